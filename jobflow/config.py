"""Configuration for jobflow tooling.

Settings come from environment variables and are collected into a frozen
``EngineConfig``. The engine itself is configured by injection (a rule table
passed to the evaluator and authorizer); these settings only choose which
table the CLI loads and how it reports.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

from jobflow.models import ConfigurationError, OutputFormat

# =============================================================================
# Environment Variable Names
# =============================================================================

ENV_VAR_PREFIX: Final[str] = "JOBFLOW_"

ENV_RULES_FILE: Final[str] = f"{ENV_VAR_PREFIX}RULES_FILE"
ENV_LOG_LEVEL: Final[str] = f"{ENV_VAR_PREFIX}LOG_LEVEL"
ENV_OUTPUT_FORMAT: Final[str] = f"{ENV_VAR_PREFIX}OUTPUT_FORMAT"

# =============================================================================
# Default Configuration Values
# =============================================================================

DEFAULT_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_OUTPUT_FORMAT: Final[str] = OutputFormat.TEXT.value

LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOGGER_NAME: Final[str] = "jobflow"


# =============================================================================
# Helper Functions
# =============================================================================


def get_env_str(env_var: str, default: str) -> str:
    """Get string value from environment variable, or default if unset or blank."""
    value = os.getenv(env_var, "").strip()
    return value or default


def get_rules_file() -> str | None:
    value = get_env_str(ENV_RULES_FILE, "")
    return value or None


def get_log_level() -> str:
    return get_env_str(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()


def get_output_format() -> str:
    return get_env_str(ENV_OUTPUT_FORMAT, DEFAULT_OUTPUT_FORMAT).lower()


# =============================================================================
# Engine configuration
# =============================================================================


@dataclass(frozen=True)
class EngineConfig:
    """Settings for the jobflow CLI and embedding applications."""

    rules_file: Path | None = None
    log_level: str = DEFAULT_LOG_LEVEL
    output_format: OutputFormat = OutputFormat.TEXT

    def __post_init__(self):
        """Validate configuration after initialization"""
        errors = []
        if self.log_level not in LOG_LEVELS:
            errors.append(
                f"Invalid log level '{self.log_level}'. Must be one of: {', '.join(LOG_LEVELS)}"
            )
        if not isinstance(self.output_format, OutputFormat):
            errors.append(f"Invalid output format '{self.output_format}'")
        if self.rules_file is not None and not self.rules_file.is_file():
            errors.append(f"Rules file does not exist: {self.rules_file}")
        if errors:
            raise ConfigurationError("; ".join(errors))

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Create configuration from environment variables.

        Raises:
            ConfigurationError: If any variable holds an unusable value
        """
        format_str = get_output_format()
        try:
            output_format = OutputFormat(format_str)
        except ValueError as e:
            valid = ", ".join(f.value for f in OutputFormat)
            raise ConfigurationError(
                f"Invalid {ENV_OUTPUT_FORMAT} '{format_str}'. Must be one of: {valid}"
            ) from e

        rules_file = get_rules_file()
        return cls(
            rules_file=Path(rules_file).expanduser() if rules_file else None,
            log_level=get_log_level(),
            output_format=output_format,
        )

    @property
    def json_output(self) -> bool:
        return self.output_format == OutputFormat.JSON


def configure_logging(level: str = DEFAULT_LOG_LEVEL, console: Console | None = None) -> logging.Logger:
    """
    Route jobflow's log records to a rich handler on stderr.

    Only the ``jobflow`` logger is touched; calling this again replaces the
    handler instead of stacking a second one.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
