"""
jobflow: stage progression rules for trade-services jobs.

jobflow decides whether a job may move from one pipeline stage to another.
Each stage declares prerequisites over a snapshot of facts about the job; a
move is allowed when it goes forward and the target's prerequisites hold, or
when the target is an unrestricted stage (lost, closed, follow-up).

Core Components:
    - StageRuleTable: Ordered catalog of stages and their prerequisites
    - FactSnapshot: Read-only facts about one job
    - ReadinessEvaluator: Checks a stage's prerequisites, yields a Verdict
    - TransitionAuthorizer: Allow/deny decision for a move, yields an Authorization

Example Usage:
    ```python
    from jobflow import TransitionAuthorizer, default_rule_table

    authorizer = TransitionAuthorizer(default_rule_table())
    decision = authorizer.authorize("quoting", "quote_sent", job_facts)
    if not decision.allowed:
        print(decision.reason_message)
    ```
"""

__version__ = "0.1.0"

# Public API exports - Core functionality
from .authorizer import Authorization, TransitionAuthorizer
from .defaults import DEFAULT_JOB_STAGE_RULES, UNRESTRICTED_TARGET_STAGES, default_rule_table
from .enrichment import build_job_facts
from .evaluator import ReadinessEvaluator, ReadinessReport, StageReadiness, Verdict
from .loader import load_facts, load_rule_table, parse_rule_table
from .models import (
    CheckType,
    ConfigValidationError,
    DenialReason,
    JobflowError,
    LoadError,
    RuleConfigurationError,
    UnknownStageError,
)
from .prerequisite import (
    EqualsPrerequisite,
    ExistsPrerequisite,
    HasRelatedPrerequisite,
    Prerequisite,
    PrerequisiteFactory,
    PrerequisiteResult,
    TruthyPrerequisite,
)
from .rule import StageRule
from .snapshot import ABSENT, FactSnapshot, Present, create_snapshot
from .table import StageRuleTable

__all__ = [
    # Core functionality
    "StageRuleTable",
    "StageRule",
    "FactSnapshot",
    "ReadinessEvaluator",
    "TransitionAuthorizer",
    "default_rule_table",
    "load_rule_table",
    "parse_rule_table",
    "load_facts",
    "build_job_facts",
    "__version__",
    # Prerequisites
    "Prerequisite",
    "ExistsPrerequisite",
    "TruthyPrerequisite",
    "EqualsPrerequisite",
    "HasRelatedPrerequisite",
    "PrerequisiteFactory",
    # Data types and results
    "PrerequisiteResult",
    "Verdict",
    "Authorization",
    "StageReadiness",
    "ReadinessReport",
    "Present",
    "ABSENT",
    "CheckType",
    "DenialReason",
    "DEFAULT_JOB_STAGE_RULES",
    "UNRESTRICTED_TARGET_STAGES",
    # Utilities
    "create_snapshot",
    # Errors
    "JobflowError",
    "RuleConfigurationError",
    "UnknownStageError",
    "LoadError",
    "ConfigValidationError",
]
