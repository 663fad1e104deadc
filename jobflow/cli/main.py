"""jobflow CLI - Typer-based command line interface."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from jobflow.cli.commands import (
    authorize_command,
    check_command,
    export_command,
    readiness_command,
    stages_command,
    validate_command,
)
from jobflow.cli.utils import EXIT_ERROR, CLIContext
from jobflow.config import EngineConfig, configure_logging
from jobflow.models import ConfigurationError

# Create main app
app = typer.Typer(
    name="jobflow",
    help="jobflow: stage progression rules for trade-services jobs",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    rules: Annotated[
        Path | None,
        typer.Option(
            "--rules",
            "-r",
            help="Rule table file (YAML/JSON). Defaults to JOBFLOW_RULES_FILE or the built-in pipeline",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose output")
    ] = False,
):
    """
    jobflow CLI callback - sets up context for all commands.

    Reads settings from the environment, installs logging and stores a
    CLIContext on ctx.obj for the commands to use.
    """
    try:
        config = EngineConfig.from_env()
    except ConfigurationError as e:
        Console().print(f"[red]Error:[/red] {e}")
        raise typer.Exit(EXIT_ERROR) from e

    configure_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = CLIContext(console=Console(), config=config, verbose=verbose, rules_path=rules)


app.command(name="stages")(stages_command)
app.command(name="check")(check_command)
app.command(name="authorize")(authorize_command)
app.command(name="readiness")(readiness_command)
app.command(name="validate")(validate_command)
app.command(name="export")(export_command)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
