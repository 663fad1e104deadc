"""Default job pipeline shipped with jobflow.

The stage order below is the canonical forward order for trade-services
jobs. Stored jobs reference these identifiers, so stages may be appended or
relabelled but never reordered or renamed.
"""

from functools import lru_cache
from typing import Final

from jobflow.models import RuleTableDefinition
from jobflow.table import StageRuleTable

UNRESTRICTED_TARGET_STAGES: Final[tuple[str, ...]] = ("lost", "closed", "follow_up")

DEFAULT_JOB_STAGE_RULES: Final[RuleTableDefinition] = {
    "name": "job_pipeline",
    "description": "Trade-services job lifecycle from first enquiry to payment",
    "unrestricted_stages": list(UNRESTRICTED_TARGET_STAGES),
    "stages": [
        {"stage": "new_enquiry", "label": "New Enquiry", "prerequisites": []},
        {"stage": "contacted", "label": "Contacted", "prerequisites": []},
        {
            "stage": "survey_booked",
            "label": "Survey Booked",
            "prerequisites": [
                {
                    "field": "hasSurveyScheduled",
                    "check": "truthy",
                    "message": "A survey must be assigned and scheduled before marking as Survey Booked",
                },
            ],
        },
        {"stage": "quoting", "label": "Quoting", "prerequisites": []},
        {
            "stage": "quote_sent",
            "label": "Quote Sent",
            "prerequisites": [
                {
                    "field": "hasQuoteItems",
                    "check": "truthy",
                    "message": "Quote must have line items before it can be sent",
                },
                {
                    "field": "quotedValue",
                    "check": "truthy",
                    "message": "Quote must have a total value before it can be sent",
                },
            ],
        },
        {
            "stage": "follow_up",
            "label": "Follow-Up Due",
            "prerequisites": [],
            "can_skip": True,
        },
        {
            "stage": "quote_accepted",
            "label": "Quote Accepted",
            "prerequisites": [
                {
                    "field": "quoteResponse",
                    "check": "equals",
                    "value": "accepted",
                    "message": "Client must accept the quote first (update via Client Portal or manually)",
                },
            ],
        },
        {
            "stage": "deposit_requested",
            "label": "Deposit Requested",
            "prerequisites": [
                {
                    "field": "depositRequired",
                    "check": "truthy",
                    "message": "Deposit must be configured on the job",
                },
                {
                    "field": "depositAmount",
                    "check": "truthy",
                    "message": "Deposit amount must be set",
                },
            ],
            "can_skip": True,
        },
        {
            "stage": "deposit_paid",
            "label": "Deposit Paid",
            "prerequisites": [
                {
                    "field": "depositReceived",
                    "check": "truthy",
                    "message": "Deposit must be marked as received",
                },
            ],
            "can_skip": True,
        },
        {
            "stage": "scheduled",
            "label": "Scheduled",
            "prerequisites": [
                {
                    "field": "hasWorkScheduled",
                    "check": "truthy",
                    "message": "Work must be scheduled on the calendar (Project Start event or confirmed schedule proposal)",
                },
            ],
        },
        {"stage": "in_progress", "label": "In Progress", "prerequisites": []},
        {"stage": "completed", "label": "Completed", "prerequisites": []},
        {
            "stage": "invoice_sent",
            "label": "Invoice Sent",
            "prerequisites": [
                {
                    "field": "hasInvoice",
                    "check": "truthy",
                    "message": "An invoice must be created and sent before marking as Invoice Sent",
                },
            ],
        },
        {
            "stage": "paid",
            "label": "Paid",
            "prerequisites": [
                {
                    "field": "isPaidInFull",
                    "check": "truthy",
                    "message": "Job must be paid in full before marking as Paid",
                },
            ],
        },
        {"stage": "closed", "label": "Closed", "prerequisites": []},
        {"stage": "lost", "label": "Lost", "prerequisites": []},
    ],
}


@lru_cache(maxsize=1)
def default_rule_table() -> StageRuleTable:
    """Return the shared, read-only default job pipeline table."""
    return StageRuleTable.from_definition(DEFAULT_JOB_STAGE_RULES)
