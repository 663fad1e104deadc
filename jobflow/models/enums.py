"""
Enums and constants for the job pipeline engine.

This module defines all enums to avoid magic strings throughout the codebase.

Usage:
    from jobflow.models.enums import (
        CheckType,
        DenialReason,
    )
"""

from enum import StrEnum

# ============================================================================
# Prerequisite Enums
# ============================================================================


class CheckType(StrEnum):
    """Kinds of prerequisite checks a stage rule can declare."""

    EXISTS = "exists"
    TRUTHY = "truthy"
    EQUALS = "equals"
    HAS_RELATED = "has_related"


# ============================================================================
# Authorization Enums
# ============================================================================


class DenialReason(StrEnum):
    """Why a stage transition was refused.

    Separates a workflow direction violation from a data-completeness gap.
    """

    NOT_FORWARD = "not_forward"  # Target is at or before the current stage
    PREREQUISITES_UNMET = "prerequisites_unmet"  # Target gate failed


# ============================================================================
# Source and Format Enums
# ============================================================================


class FileFormat(StrEnum):
    """Supported rule file formats."""

    YAML = "yaml"
    JSON = "json"


class OutputFormat(StrEnum):
    """Output formats for CLI reports."""

    TEXT = "text"
    JSON = "json"
