"""Commands for inspecting, validating and exporting rule tables."""

from pathlib import Path
from typing import Annotated

import typer

from jobflow.cli.utils import EXIT_ERROR, EXIT_NEGATIVE, safe_write_file
from jobflow.loader import dump_rule_table, load_rule_table
from jobflow.models import ConfigValidationError, FileFormat, LoadError


def stages_command(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output in JSON format")] = False,
):
    """List the stages of the active rule table in pipeline order."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)
    cli_ctx.printer.print_table(cli_ctx.load_table_or_exit())


def validate_command(
    ctx: typer.Context,
    rules_file: Annotated[Path, typer.Argument(help="Rule table file (YAML/JSON)")],
    json_output: Annotated[bool, typer.Option("--json", help="Output in JSON format")] = False,
):
    """
    Validate a rule table file.

    Every problem in the file is reported at once. Exits with 1 when the
    file is invalid and 2 when it cannot be read or parsed.
    """
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)
    source = str(rules_file)

    try:
        table = load_rule_table(rules_file)
    except ConfigValidationError as e:
        cli_ctx.printer.print_validation(source, None, e.errors)
        raise typer.Exit(EXIT_NEGATIVE) from e
    except LoadError as e:
        cli_ctx.fail(str(e), EXIT_ERROR)

    cli_ctx.printer.print_validation(source, table, [])


def export_command(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: stdout)"),
    ] = None,
    file_format: Annotated[
        FileFormat,
        typer.Option("--format", help="Output format (default: from file extension, else yaml)"),
    ] = FileFormat.YAML,
):
    """Write the active rule table as YAML or JSON."""
    cli_ctx = ctx.obj
    table = cli_ctx.load_table_or_exit()

    if output is not None and output.suffix.lower() == ".json":
        file_format = FileFormat.JSON
    content = dump_rule_table(table, file_format)

    if output is None:
        typer.echo(content, nl=False)
        return
    safe_write_file(output, content, cli_ctx)
    cli_ctx.printer.show_success(f"Wrote {len(table)} stages to {output}")
