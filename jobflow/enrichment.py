"""Reference snapshot provider for the default job pipeline.

``build_job_facts`` reduces a job record and summaries of its related
records into the facts the default rules reference. Callers fetch the
related records however they like; this module only does the arithmetic and
never touches storage.

Related records are plain mappings. Both snake_case and camelCase keys are
accepted (``event_type`` or ``eventType``, ``source_type`` or
``sourceType``), matching what ORMs and JSON APIs usually hand back.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Final

logger = logging.getLogger(__name__)

SURVEY_BOOKED_STATUSES: Final[frozenset[str]] = frozenset({"scheduled", "completed"})
SCHEDULE_CONFIRMED_STATUSES: Final[frozenset[str]] = frozenset({"confirmed", "scheduled"})
PROJECT_START_EVENT: Final[str] = "project_start"
INVOICE_TYPE: Final[str] = "invoice"
DRAFT_STATUS: Final[str] = "draft"
INCOME_TYPE: Final[str] = "income"
JOB_PAYMENT_SOURCE: Final[str] = "job_payment"

# Job columns stored as decimal strings
NUMERIC_JOB_FIELDS: Final[tuple[str, ...]] = ("quotedValue", "depositAmount")


def parse_amount(value: Any) -> float:
    """
    Parse a money amount leniently.

    Decimal strings such as ``"1250.00"`` become floats; anything that
    cannot be parsed (None, empty strings, garbage) counts as zero.
    """
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _get(record: Mapping[str, Any], snake: str, camel: str | None = None) -> Any:
    if snake in record:
        return record[snake]
    if camel is not None:
        return record.get(camel)
    return None


def has_scheduled_survey(surveys: Iterable[Mapping[str, Any]]) -> bool:
    return any(_get(s, "status") in SURVEY_BOOKED_STATUSES for s in surveys)


def has_scheduled_work(
    calendar_events: Iterable[Mapping[str, Any]],
    schedule_proposals: Iterable[Mapping[str, Any]],
) -> bool:
    """A Project Start event exists, or a schedule proposal was confirmed."""
    if any(_get(e, "event_type", "eventType") == PROJECT_START_EVENT for e in calendar_events):
        return True
    return any(_get(p, "status") in SCHEDULE_CONFIRMED_STATUSES for p in schedule_proposals)


def has_issued_invoice(invoices: Iterable[Mapping[str, Any]]) -> bool:
    """An invoice (not a quote or credit note) with a status other than draft.

    An invoice with no status yet is not considered issued.
    """
    return any(
        _get(i, "type") == INVOICE_TYPE and _get(i, "status") not in (None, DRAFT_STATUS)
        for i in invoices
    )


def total_paid(
    transactions: Iterable[Mapping[str, Any]],
    client_payments: Iterable[Mapping[str, Any]],
) -> float:
    """Sum of job-payment income transactions and client portal payments."""
    ledger = sum(
        parse_amount(_get(t, "amount"))
        for t in transactions
        if _get(t, "type") == INCOME_TYPE
        and _get(t, "source_type", "sourceType") == JOB_PAYMENT_SOURCE
    )
    portal = sum(parse_amount(_get(p, "amount")) for p in client_payments)
    return ledger + portal


def build_job_facts(
    job: Mapping[str, Any],
    *,
    quote_item_count: int = 0,
    surveys: Iterable[Mapping[str, Any]] = (),
    calendar_events: Iterable[Mapping[str, Any]] = (),
    schedule_proposals: Iterable[Mapping[str, Any]] = (),
    invoices: Iterable[Mapping[str, Any]] = (),
    transactions: Iterable[Mapping[str, Any]] = (),
    client_payments: Iterable[Mapping[str, Any]] = (),
) -> dict[str, Any]:
    """
    Build the fact dictionary for one job.

    Args:
        job: Job record; its columns pass through unchanged except that
            numeric money columns are parsed
        quote_item_count: Number of quote line items on the job
        surveys: Survey records with a ``status``
        calendar_events: Calendar events with an ``event_type``
        schedule_proposals: Schedule proposals with a ``status``
        invoices: Invoice records with ``type`` and ``status``
        transactions: Financial transactions with ``type``, ``source_type``
            and ``amount``
        client_payments: Client payments with an ``amount``

    Returns:
        Dictionary of facts, suitable for ``FactSnapshot``
    """
    facts: dict[str, Any] = dict(job)
    for name in NUMERIC_JOB_FIELDS:
        if facts.get(name) is not None:
            facts[name] = parse_amount(facts[name])

    quoted_value = parse_amount(job.get("quotedValue"))
    paid_amount = total_paid(transactions, client_payments)

    facts.update(
        {
            "hasQuoteItems": (quote_item_count or 0) > 0,
            "hasSurveyScheduled": has_scheduled_survey(surveys),
            "hasWorkScheduled": has_scheduled_work(calendar_events, schedule_proposals),
            "hasInvoice": has_issued_invoice(invoices),
            "paidAmount": paid_amount,
            "isPaidInFull": quoted_value > 0 and paid_amount >= quoted_value,
        }
    )
    logger.debug(
        "Built facts for job %s: quoted=%s paid=%s",
        job.get("id", "<unknown>"),
        quoted_value,
        paid_amount,
    )
    return facts
