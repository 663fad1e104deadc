"""
jobflow models package.

This package is the single source of truth for type definitions, enums and
exceptions used throughout the engine. All TypedDicts are defined here and
imported by other modules.

Usage:
    from jobflow.models import (
        CheckType,
        DenialReason,
        StageRuleDefinition,
        RuleConfigurationError,
    )
"""

from .base import (
    AuthorizationDict,
    PrerequisiteDefinition,
    PrerequisiteResultDict,
    ReadinessReportDict,
    RuleFileDict,
    RuleTableDefinition,
    StageReadinessDict,
    StageRuleDefinition,
    UnmetPrerequisiteDict,
    VerdictDict,
)
from .enums import CheckType, DenialReason, FileFormat, OutputFormat
from .errors import (
    ConfigurationError,
    ConfigValidationError,
    JobflowError,
    LoadError,
    RuleConfigurationError,
    UnknownStageError,
)

__all__ = [
    # Enumerations
    "CheckType",
    "DenialReason",
    "FileFormat",
    "OutputFormat",
    # Definitions
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
    # Errors
    "JobflowError",
    "RuleConfigurationError",
    "UnknownStageError",
    "ConfigurationError",
    "LoadError",
    "ConfigValidationError",
]
