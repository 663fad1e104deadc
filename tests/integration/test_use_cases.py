"""Integration tests for the shipped job pipeline.

These tests walk realistic jobs through the default rule table, from raw
job records (via the fact reducer) to authorization decisions, the way a
CRM backend would call the engine before persisting a stage change.
"""

import pytest

from jobflow import (
    DenialReason,
    ReadinessEvaluator,
    TransitionAuthorizer,
    build_job_facts,
    default_rule_table,
    load_rule_table,
)
from jobflow.loader import dump_rule_table


class TestDocumentedScenarios:
    """Reference scenarios for the default pipeline."""

    def test_survey_not_scheduled_blocks_survey_booked(self, evaluator):
        verdict = evaluator.evaluate("survey_booked", {"hasSurveyScheduled": False})

        assert verdict.can_progress is False
        assert verdict.unmet_prerequisites == [
            {
                "field": "hasSurveyScheduled",
                "message": "A survey must be assigned and scheduled before marking as Survey Booked",
            }
        ]

    def test_zero_quote_value_blocks_quote_sent(self, evaluator):
        verdict = evaluator.evaluate("quote_sent", {"hasQuoteItems": True, "quotedValue": 0})

        assert verdict.can_progress is False
        assert [u["field"] for u in verdict.unmet_prerequisites] == ["quotedValue"]

    def test_lost_reachable_from_new_enquiry_with_no_facts(self, authorizer):
        decision = authorizer.authorize("new_enquiry", "lost", {})

        assert decision.allowed is True
        assert decision.verdict.evaluated is False

    @pytest.mark.parametrize(
        "facts",
        [{}, {"hasQuoteItems": True, "quotedValue": 500, "status": "quoting"}],
    )
    def test_backward_move_denied_regardless_of_facts(self, authorizer, facts):
        decision = authorizer.authorize("quoting", "contacted", facts)

        assert decision.allowed is False
        assert decision.reason == DenialReason.NOT_FORWARD

    def test_skippable_deposit_paid_still_checks_prerequisite(self, evaluator):
        verdict = evaluator.evaluate("deposit_paid", {"depositReceived": False})

        assert verdict.can_progress is False


class TestJobLifecycle:
    """A job walked through the pipeline using raw records."""

    def test_full_happy_path(self):
        authorizer = TransitionAuthorizer(default_rule_table())
        job = {
            "id": "job-1",
            "status": "new_enquiry",
            "quotedValue": None,
            "quoteResponse": None,
            "depositRequired": True,
            "depositAmount": None,
            "depositReceived": False,
        }
        related: dict = {}

        def move(to_stage):
            facts = build_job_facts(job, **related)
            decision = authorizer.authorize(job["status"], to_stage, facts)
            if decision.allowed:
                job["status"] = to_stage
            return decision

        assert move("contacted").allowed

        blocked = move("survey_booked")
        assert not blocked.allowed
        related["surveys"] = [{"status": "scheduled"}]
        assert move("survey_booked").allowed

        assert move("quoting").allowed
        assert not move("quote_sent").allowed
        related["quote_item_count"] = 3
        job["quotedValue"] = "2400.00"
        assert move("quote_sent").allowed

        assert not move("quote_accepted").allowed
        job["quoteResponse"] = "accepted"
        assert move("quote_accepted").allowed

        job["depositAmount"] = "500"
        assert move("deposit_requested").allowed
        job["depositReceived"] = True
        assert move("deposit_paid").allowed

        related["schedule_proposals"] = [{"status": "confirmed"}]
        assert move("scheduled").allowed
        assert move("in_progress").allowed
        assert move("completed").allowed

        related["invoices"] = [{"type": "invoice", "status": "draft"}]
        assert not move("invoice_sent").allowed
        related["invoices"] = [{"type": "invoice", "status": "sent"}]
        assert move("invoice_sent").allowed

        related["transactions"] = [{"type": "income", "source_type": "job_payment", "amount": "500"}]
        related["client_payments"] = [{"amount": "1000"}]
        partial = move("paid")
        assert partial.reason == DenialReason.PREREQUISITES_UNMET
        assert partial.reason_message.endswith("Job must be paid in full before marking as Paid")
        related["client_payments"].append({"amount": "900"})
        assert move("paid").allowed

        assert move("closed").allowed
        assert job["status"] == "closed"

    def test_skipping_optional_deposit_stages(self):
        authorizer = TransitionAuthorizer(default_rule_table())
        facts = build_job_facts(
            {"status": "quote_accepted", "quoteResponse": "accepted"},
            calendar_events=[{"event_type": "project_start"}],
        )

        decision = authorizer.authorize("quote_accepted", "scheduled", facts)

        assert decision.allowed is True

    def test_open_moves_from_quote_sent(self):
        authorizer = TransitionAuthorizer(default_rule_table())
        facts = build_job_facts({"quotedValue": 900, "quoteResponse": "declined"}, quote_item_count=1)

        open_moves = [d.to_stage for d in authorizer.authorize_many("quote_sent", None, facts) if d.allowed]

        assert open_moves == ["follow_up", "in_progress", "completed", "closed", "lost"]

    def test_readiness_report_for_new_job(self):
        report = ReadinessEvaluator(default_rule_table()).readiness(
            build_job_facts({"status": "new_enquiry"}), current_stage="new_enquiry"
        )

        assert report.get("new_enquiry").is_current
        assert [e.stage for e in report.stages if not e.can_progress] == [
            "survey_booked",
            "quote_sent",
            "quote_accepted",
            "deposit_requested",
            "deposit_paid",
            "scheduled",
            "invoice_sent",
            "paid",
        ]


class TestCustomRuleFiles:
    def test_exported_default_table_drives_same_decisions(self, tmp_path):
        path = tmp_path / "pipeline.yaml"
        path.write_text(dump_rule_table(default_rule_table()), encoding="utf-8")
        loaded = TransitionAuthorizer(load_rule_table(path))
        builtin = TransitionAuthorizer(default_rule_table())
        facts = {"hasQuoteItems": True, "quotedValue": 0, "quoteResponse": "accepted"}

        for target in ("quote_sent", "quote_accepted", "lost", "contacted"):
            assert (
                loaded.authorize("quoting", target, facts).to_dict()
                == builtin.authorize("quoting", target, facts).to_dict()
            )

    def test_custom_table_from_file(self, sample_rules_file):
        authorizer = TransitionAuthorizer(load_rule_table(sample_rules_file))

        assert not authorizer.authorize("open", "review", {"owner": "ana"}).allowed
        assert authorizer.authorize("open", "review", {"owner": "ana", "approved": True}).allowed
        assert authorizer.authorize("done", "cancelled", {}).allowed
