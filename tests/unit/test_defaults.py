"""Tests for the shipped job pipeline."""

from jobflow.defaults import (
    DEFAULT_JOB_STAGE_RULES,
    UNRESTRICTED_TARGET_STAGES,
    default_rule_table,
)

EXPECTED_ORDER = [
    "new_enquiry",
    "contacted",
    "survey_booked",
    "quoting",
    "quote_sent",
    "follow_up",
    "quote_accepted",
    "deposit_requested",
    "deposit_paid",
    "scheduled",
    "in_progress",
    "completed",
    "invoice_sent",
    "paid",
    "closed",
    "lost",
]


class TestDefaultRuleTable:
    def test_stage_order(self):
        assert default_rule_table().stages == EXPECTED_ORDER

    def test_table_is_cached(self):
        assert default_rule_table() is default_rule_table()

    def test_unrestricted_stages(self):
        table = default_rule_table()

        assert table.unrestricted_stages == frozenset(UNRESTRICTED_TARGET_STAGES)
        assert set(DEFAULT_JOB_STAGE_RULES["unrestricted_stages"]) == {"lost", "closed", "follow_up"}

    def test_skippable_stages(self):
        skippable = [rule.stage for rule in default_rule_table() if rule.can_skip]
        assert skippable == ["follow_up", "deposit_requested", "deposit_paid"]

    def test_gated_stages_and_fields(self):
        gated = {rule.stage: rule.required_fields for rule in default_rule_table() if rule.is_gated}

        assert gated == {
            "survey_booked": ["hasSurveyScheduled"],
            "quote_sent": ["hasQuoteItems", "quotedValue"],
            "quote_accepted": ["quoteResponse"],
            "deposit_requested": ["depositRequired", "depositAmount"],
            "deposit_paid": ["depositReceived"],
            "scheduled": ["hasWorkScheduled"],
            "invoice_sent": ["hasInvoice"],
            "paid": ["isPaidInFull"],
        }

    def test_labels(self):
        table = default_rule_table()

        assert table.rule_for("follow_up").label == "Follow-Up Due"
        assert table.rule_for("new_enquiry").label == "New Enquiry"
