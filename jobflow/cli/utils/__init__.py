"""CLI utilities package.

This package provides utilities for CLI commands including:
- CLIContext: Context management for commands
- CliPrinter: Rich and JSON output
- Decorators: Error handling decorators
- Helper functions: File writing
"""

from pathlib import Path

from jobflow.cli.utils.context import EXIT_ERROR, EXIT_NEGATIVE, EXIT_OK, CLIContext
from jobflow.cli.utils.decorators import handle_cli_errors
from jobflow.cli.utils.printer import CliPrinter

__all__ = [
    "CLIContext",
    "CliPrinter",
    "handle_cli_errors",
    "safe_write_file",
    "EXIT_OK",
    "EXIT_NEGATIVE",
    "EXIT_ERROR",
]


def safe_write_file(file_path: Path, content: str, cli_ctx: CLIContext) -> None:
    """Write content to file, reporting failures through the CLI context.

    Raises:
        typer.Exit: If writing fails
    """
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        cli_ctx.print_verbose(f"Writing output to {file_path}")
        file_path.write_text(content, encoding="utf-8")
    except PermissionError:
        cli_ctx.fail(f"Permission denied writing to {file_path}")
    except OSError as e:
        cli_ctx.fail(f"Failed to write to {file_path}: {e}")
