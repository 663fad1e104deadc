"""
Exception hierarchy for the job pipeline engine.

Two families of failure exist. Configuration errors (unknown stages, malformed
prerequisites, unusable rule files) are raised. Evaluation negatives (unmet
prerequisites, backward moves) are never raised; they are returned as data.

Note: This module must NOT import from any jobflow modules to avoid circular
imports.
"""

from collections.abc import Iterable


class JobflowError(Exception):
    """Base class for every error raised by jobflow."""

    pass


class RuleConfigurationError(JobflowError, ValueError):
    """
    Raised when a rule table or prerequisite is malformed.

    Collects every problem found so a broken table can be fixed in one pass.
    """

    def __init__(self, errors: str | list[str]):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        self.error_count = len(self.errors)

        if self.error_count == 1:
            message = self.errors[0]
        else:
            error_list = "\n  • ".join(self.errors)
            message = f"Rule configuration has {self.error_count} errors:\n  • {error_list}"

        super().__init__(message)


class UnknownStageError(RuleConfigurationError):
    """Raised when a stage identifier is not declared in the rule table."""

    def __init__(self, stage: str, available: Iterable[str] = ()):
        self.stage = stage
        self.available = tuple(available)
        message = f"Unknown stage '{stage}'"
        if self.available:
            message += f". Available stages: {', '.join(self.available)}"
        super().__init__(message)


class ConfigurationError(JobflowError):
    """Raised when environment settings are invalid."""

    pass


class LoadError(JobflowError):
    """Exception raised when a rule file cannot be read or parsed."""

    pass


class ConfigValidationError(LoadError):
    """
    Exception raised when a rule file's structure fails validation.

    This exception collects all validation errors encountered while parsing
    the file, allowing for comprehensive error reporting.
    """

    def __init__(self, errors: list[str], source: str = ""):
        """
        Initialize with a list of validation errors.

        Args:
            errors: List of validation error messages
            source: Optional file path that failed validation
        """
        self.errors = errors
        self.source = source
        self.error_count = len(errors)

        prefix = f"Rule file {source}" if source else "Rule file"
        if self.error_count == 1:
            message = f"{prefix} failed validation with 1 error:\n  • {errors[0]}"
        else:
            error_list = "\n  • ".join(errors)
            message = f"{prefix} failed validation with {self.error_count} errors:\n  • {error_list}"

        super().__init__(message)

    def get_error_summary(self) -> str:
        """Get a formatted summary of all errors."""
        if self.error_count == 1:
            return f"1 validation error: {self.errors[0]}"
        return f"{self.error_count} validation errors:\n" + "\n".join(
            f"  {i+1}. {error}" for i, error in enumerate(self.errors)
        )
