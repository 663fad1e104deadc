"""Commands that evaluate a job's facts against the rule table."""

from pathlib import Path
from typing import Annotated

import typer

from jobflow.cli.utils import EXIT_NEGATIVE, EXIT_OK, handle_cli_errors

FactsOption = Annotated[
    Path | None,
    typer.Option(
        "--facts",
        "-f",
        help="Fact file (JSON/YAML). If omitted, reads from stdin",
    ),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output in JSON format")]


@handle_cli_errors("Cannot evaluate stage")
def check_command(
    ctx: typer.Context,
    stage: Annotated[str, typer.Argument(help="Stage whose prerequisites to check")],
    facts: FactsOption = None,
    json_output: JsonOption = False,
):
    """
    Check whether a job's facts meet the prerequisites of STAGE.

    Exits with 0 when every prerequisite passes and 1 otherwise.
    """
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    evaluator = cli_ctx.evaluator()
    snapshot = cli_ctx.load_facts_or_exit(facts)

    verdict = evaluator.evaluate(stage, snapshot)
    cli_ctx.printer.print_verdict(verdict)
    raise typer.Exit(EXIT_OK if verdict.can_progress else EXIT_NEGATIVE)


@handle_cli_errors("Cannot authorize transition")
def authorize_command(
    ctx: typer.Context,
    from_stage: Annotated[str, typer.Argument(help="Current stage of the job")],
    to_stage: Annotated[str, typer.Argument(help="Requested stage")],
    facts: FactsOption = None,
    json_output: JsonOption = False,
):
    """
    Decide whether a job may move from FROM_STAGE to TO_STAGE.

    Exits with 0 when the move is allowed and 1 when it is denied.
    """
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    authorizer = cli_ctx.authorizer()
    snapshot = cli_ctx.load_facts_or_exit(facts)

    authorization = authorizer.authorize(from_stage, to_stage, snapshot)
    cli_ctx.printer.print_authorization(authorization)
    raise typer.Exit(EXIT_OK if authorization.allowed else EXIT_NEGATIVE)


@handle_cli_errors("Cannot build readiness report")
def readiness_command(
    ctx: typer.Context,
    facts: FactsOption = None,
    current: Annotated[
        str | None,
        typer.Option("--current", "-c", help="The job's current stage"),
    ] = None,
    json_output: JsonOption = False,
):
    """Show, for every stage, whether the job's facts meet its prerequisites."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    evaluator = cli_ctx.evaluator()
    snapshot = cli_ctx.load_facts_or_exit(facts)

    report = evaluator.readiness(snapshot, current_stage=current)
    cli_ctx.printer.print_readiness(report)
