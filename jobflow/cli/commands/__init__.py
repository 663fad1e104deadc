"""CLI commands module for jobflow."""

from jobflow.cli.commands.evaluate import (
    authorize_command,
    check_command,
    readiness_command,
)
from jobflow.cli.commands.rules import export_command, stages_command, validate_command

__all__ = [
    "authorize_command",
    "check_command",
    "export_command",
    "readiness_command",
    "stages_command",
    "validate_command",
]
