"""CLI Printer for consistent output formatting."""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jobflow.authorizer import Authorization
from jobflow.evaluator import ReadinessReport, Verdict
from jobflow.table import StageRuleTable


def _describe_prerequisite(prerequisite) -> str:
    description = f"{prerequisite.field} {prerequisite.check.value}"
    value = getattr(prerequisite, "value", None)
    if value is not None:
        description += f" {value!r}"
    return description


class CliPrinter:
    """Centralized printer for CLI output.

    This class handles all printing operations for the CLI, ensuring consistent
    formatting across commands and proper handling of verbose/JSON modes.
    """

    def __init__(self, console: Console, verbose: bool = False, json_mode: bool = False):
        """Initialize printer with console and mode settings.

        Args:
            console: Rich console for output
            verbose: Whether to show detailed output
            json_mode: Whether to output in JSON format (can be set later)
        """
        self.console = console
        self.verbose = verbose
        self.json_mode = json_mode

    def print_table(self, table: StageRuleTable) -> None:
        """Print the rule table, one row per stage in pipeline order."""
        if self.json_mode:
            self.print_json(table.to_dict())
            return

        title = table.name or "Rule table"
        grid = Table(title=escape(title), show_lines=False)
        grid.add_column("#", justify="right", style="dim")
        grid.add_column("Stage", style="cyan")
        grid.add_column("Label")
        grid.add_column("Prerequisites")
        grid.add_column("Flags", style="yellow")

        for position, rule in enumerate(table):
            flags = []
            if table.is_unrestricted(rule.stage):
                flags.append("unrestricted")
            if rule.can_skip:
                flags.append("can skip")
            prerequisites = "\n".join(_describe_prerequisite(p) for p in rule.prerequisites)
            grid.add_row(
                str(position),
                rule.stage,
                escape(rule.label),
                escape(prerequisites) or "[dim]none[/dim]",
                ", ".join(flags),
            )
        self.console.print(grid)

    def print_verdict(self, verdict: Verdict) -> None:
        """Print the readiness verdict for a single stage."""
        if self.json_mode:
            self.print_json(verdict.to_dict())
            return

        if verdict.can_progress:
            self.console.print(f"[green]✓ Ready:[/green] {verdict.stage}")
        else:
            self.console.print(f"[red]✗ Blocked:[/red] {verdict.stage}")
        self._print_results(verdict)

    def print_authorization(self, authorization: Authorization) -> None:
        """Print an authorization decision with its reason."""
        if self.json_mode:
            self.print_json(authorization.to_dict())
            return

        move = f"{authorization.from_stage} → {authorization.to_stage}"
        if authorization.allowed:
            note = " (unrestricted target)" if authorization.unrestricted else ""
            self.console.print(f"[green]✓ Allowed:[/green] {move}{note}")
        else:
            self.console.print(f"[red]✗ Denied:[/red] {move}")
            self.console.print(f"  reason: {authorization.reason}")
            for unmet in authorization.unmet_prerequisites:
                self.console.print(f"  • {escape(unmet['message'])}")
            if authorization.reason_message and not authorization.unmet_prerequisites:
                self.console.print(f"  {escape(authorization.reason_message)}")
        if self.verbose and authorization.verdict.evaluated:
            self._print_results(authorization.verdict)

    def print_readiness(self, report: ReadinessReport) -> None:
        """Print the per-stage readiness report."""
        if self.json_mode:
            self.print_json(report.to_dict())
            return

        grid = Table(title="Stage readiness")
        grid.add_column("Stage", style="cyan")
        grid.add_column("Ready")
        grid.add_column("Unmet prerequisites")
        for entry in report.stages:
            marker = "▶ " if entry.is_current else ""
            if entry.is_unrestricted:
                ready = "[green]yes[/green] [dim](unrestricted)[/dim]"
            elif entry.can_progress:
                ready = "[green]yes[/green]"
            else:
                ready = "[red]no[/red]"
            unmet = "\n".join(escape(u["message"]) for u in entry.verdict.unmet_prerequisites)
            grid.add_row(f"{marker}{entry.stage}", ready, unmet)
        self.console.print(grid)

    def print_validation(self, source: str, table: StageRuleTable | None, errors: list[str]) -> None:
        """Print the outcome of validating a rule file."""
        if self.json_mode:
            data: dict[str, Any] = {"source": source, "valid": not errors, "errors": errors}
            if table is not None:
                data["stages"] = table.stages
            self.print_json(data)
            return

        if not errors and table is not None:
            self.show_success(f"{source} is valid ({len(table)} stages)")
            return
        self.console.print(f"[red]✗ {escape(source)} is invalid ({len(errors)} errors)[/red]")
        for i, error in enumerate(errors, 1):
            self.console.print(f"  {i}. {escape(error)}")

    def _print_results(self, verdict: Verdict) -> None:
        for result in verdict.results:
            mark = "[green]✓[/green]" if result.passed else "[red]✗[/red]"
            line = f"  {mark} {result.field} ({result.check.value})"
            if not result.passed:
                line += f": {escape(result.message)}"
            self.console.print(line)

    def show_progress(self, message: str) -> None:
        """Show progress message if verbose mode is enabled."""
        if self.verbose and not self.json_mode:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def show_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def print_json(self, data: Any) -> None:
        """Print data as JSON."""
        self.console.print_json(data=data)

    def print_error(self, message: str) -> None:
        """Print error message with red formatting, or as a JSON object in JSON mode."""
        if self.json_mode:
            self.print_json({"error": message})
        else:
            self.console.print(f"[red]Error:[/red] {escape(message)}")
