"""
Base model definitions for the job pipeline engine.

This module is the single source of truth for the TypedDict contracts used to
define rule tables and to serialize evaluation results. Runtime objects
(prerequisites, rules, verdicts) are built from and converted back to these
shapes.
"""

from typing import Any, NotRequired, TypedDict

__all__ = [
    # Rule table definitions
    "PrerequisiteDefinition",
    "StageRuleDefinition",
    "RuleTableDefinition",
    "RuleFileDict",
    # Result contracts
    "UnmetPrerequisiteDict",
    "PrerequisiteResultDict",
    "VerdictDict",
    "AuthorizationDict",
    "StageReadinessDict",
    "ReadinessReportDict",
]


# ============================================================================
# Rule table definitions
# ============================================================================


class PrerequisiteDefinition(TypedDict):
    """Declarative form of a single prerequisite check."""

    field: str  # Fact name looked up in the snapshot
    check: str  # CheckType value
    message: str  # Shown to the operator when the check fails
    value: NotRequired[str | bool | int | float]  # Operand for 'equals'
    related_table: NotRequired[str]  # Collection for 'has_related'
    related_field: NotRequired[str]  # Foreign key for 'has_related'


class StageRuleDefinition(TypedDict):
    """Declarative form of a stage rule."""

    stage: str
    label: NotRequired[str]
    prerequisites: NotRequired[list[PrerequisiteDefinition]]
    can_skip: NotRequired[bool]


class RuleTableDefinition(TypedDict):
    """Declarative form of a complete rule table, stages in pipeline order."""

    stages: list[StageRuleDefinition]
    unrestricted_stages: NotRequired[list[str]]
    name: NotRequired[str]
    description: NotRequired[str]


class RuleFileDict(TypedDict):
    """Wrapped rule file format: ``{'rule_table': {...}}``."""

    rule_table: RuleTableDefinition


# ============================================================================
# Result contracts (JSON-serializable)
# ============================================================================


class UnmetPrerequisiteDict(TypedDict):
    field: str
    message: str


class PrerequisiteResultDict(TypedDict):
    field: str
    check: str
    passed: bool
    message: str
    present: bool
    actual: Any


class VerdictDict(TypedDict):
    stage: str
    can_progress: bool
    evaluated: bool
    unmet_prerequisites: list[UnmetPrerequisiteDict]
    results: list[PrerequisiteResultDict]


class AuthorizationDict(TypedDict):
    from_stage: str
    to_stage: str
    allowed: bool
    unrestricted: bool
    reason: str | None
    reason_message: str | None
    verdict: VerdictDict


class StageReadinessDict(TypedDict):
    stage: str
    label: str
    is_current: bool
    is_unrestricted: bool
    can_skip: bool
    can_progress: bool
    prerequisites: list[PrerequisiteResultDict]


class ReadinessReportDict(TypedDict):
    current_stage: str | None
    stages: list[StageReadinessDict]
