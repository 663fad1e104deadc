"""Pytest configuration and fixtures for jobflow tests.

This module provides shared fixtures for the jobflow test suite: rule tables
(the shipped default and a small synthetic one), engine components, fact
dictionaries for typical job situations and temporary rule/fact files.
"""

import json
from typing import Any

import pytest

from jobflow.authorizer import TransitionAuthorizer
from jobflow.defaults import default_rule_table
from jobflow.evaluator import ReadinessEvaluator
from jobflow.models import RuleTableDefinition
from jobflow.table import StageRuleTable


@pytest.fixture
def default_table() -> StageRuleTable:
    return default_rule_table()


@pytest.fixture
def evaluator(default_table) -> ReadinessEvaluator:
    return ReadinessEvaluator(default_table)


@pytest.fixture
def authorizer(default_table) -> TransitionAuthorizer:
    return TransitionAuthorizer(default_table)


@pytest.fixture
def small_table_definition() -> RuleTableDefinition:
    """Four-stage table: open, review (gated), done, cancelled (unrestricted)."""
    return {
        "name": "small",
        "unrestricted_stages": ["cancelled"],
        "stages": [
            {"stage": "open", "label": "Open"},
            {
                "stage": "review",
                "label": "Review",
                "prerequisites": [
                    {"field": "owner", "check": "exists", "message": "Owner must be set"},
                    {"field": "approved", "check": "truthy", "message": "Must be approved"},
                ],
            },
            {
                "stage": "done",
                "label": "Done",
                "prerequisites": [
                    {
                        "field": "result",
                        "check": "equals",
                        "value": "pass",
                        "message": "Result must be pass",
                    },
                ],
            },
            {"stage": "cancelled", "label": "Cancelled"},
        ],
    }


@pytest.fixture
def small_table(small_table_definition) -> StageRuleTable:
    return StageRuleTable.from_definition(small_table_definition)


@pytest.fixture
def quoted_job_facts() -> dict[str, Any]:
    """A job with a priced, itemised quote that the client has not answered."""
    return {
        "status": "quoting",
        "hasQuoteItems": True,
        "quotedValue": 1200.0,
        "quoteResponse": None,
        "depositRequired": False,
        "depositAmount": None,
        "depositReceived": False,
        "hasSurveyScheduled": False,
        "hasWorkScheduled": False,
        "hasInvoice": False,
        "isPaidInFull": False,
    }


@pytest.fixture
def sample_rules_file(tmp_path, small_table_definition):
    """Write the small table to a YAML rule file."""
    lines = ["rule_table:", "  name: small", "  unrestricted_stages: [cancelled]", "  stages:"]
    for stage in small_table_definition["stages"]:
        lines.append(f"    - stage: {stage['stage']}")
        lines.append(f"      label: {stage['label']}")
        prerequisites = stage.get("prerequisites", [])
        if prerequisites:
            lines.append("      prerequisites:")
        for prerequisite in prerequisites:
            lines.append(f"        - field: {prerequisite['field']}")
            lines.append(f"          check: {prerequisite['check']}")
            if "value" in prerequisite:
                lines.append(f"          value: {prerequisite['value']}")
            lines.append(f"          message: {prerequisite['message']}")

    rules_file = tmp_path / "rules.yaml"
    rules_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return rules_file


@pytest.fixture
def facts_file(tmp_path, quoted_job_facts):
    """Write the quoted job's facts to a JSON file."""
    path = tmp_path / "facts.json"
    path.write_text(json.dumps(quoted_job_facts), encoding="utf-8")
    return path
