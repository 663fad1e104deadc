"""
CLI Context for jobflow.

Provides centralized rule-table and fact loading for all CLI commands.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console

from jobflow.authorizer import TransitionAuthorizer
from jobflow.cli.utils.printer import CliPrinter
from jobflow.config import EngineConfig
from jobflow.defaults import default_rule_table
from jobflow.evaluator import ReadinessEvaluator
from jobflow.loader import load_facts, load_rule_table
from jobflow.models import JobflowError
from jobflow.snapshot import FactSnapshot
from jobflow.table import StageRuleTable

EXIT_OK = 0
EXIT_NEGATIVE = 1  # denied, blocked or invalid
EXIT_ERROR = 2  # load or configuration failure


@dataclass
class CLIContext:
    """
    Context object for CLI commands.

    This context is created once by the app callback and passed to all
    commands via Typer's context injection. It centralizes:
    - Rule table selection (``--rules``, JOBFLOW_RULES_FILE or the default)
    - Fact loading from files or stdin
    - Error reporting and exit codes
    - Verbose and JSON mode control

    Attributes:
        console: Rich console for output
        config: Settings read from the environment
        verbose: Enable verbose output (ignored when json_mode is True)
        rules_path: Rule file given on the command line, overrides config
        json_mode: When True, all output is JSON (set by commands)
        printer: CLI printer for formatted output
    """

    console: Console
    config: EngineConfig = field(default_factory=EngineConfig)
    verbose: bool = False
    rules_path: Path | None = None
    json_mode: bool = False
    printer: CliPrinter = field(init=False)
    _table: StageRuleTable | None = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.printer = CliPrinter(console=self.console, verbose=self.verbose)
        self.json_mode = self.json_mode or self.config.json_output
        self.printer.json_mode = self.json_mode

    def set_json_mode(self, json_output: bool) -> None:
        """Enable JSON output from a command flag (the environment may already have)."""
        self.json_mode = json_output or self.config.json_output
        self.printer.json_mode = self.json_mode

    def print_verbose(self, message: str) -> None:
        self.printer.show_progress(message)

    def fail(self, message: str, code: int = EXIT_ERROR) -> NoReturn:
        """Report an error and exit with ``code``."""
        self.printer.print_error(message)
        raise typer.Exit(code=code)

    @property
    def rules_source(self) -> Path | None:
        return self.rules_path or self.config.rules_file

    def load_table_or_exit(self) -> StageRuleTable:
        """
        Load the active rule table, exiting with code 2 on failure.

        Raises:
            typer.Exit: If the rule file cannot be loaded
        """
        if self._table is not None:
            return self._table

        source = self.rules_source
        if source is None:
            self.print_verbose("Using the default job pipeline")
            self._table = default_rule_table()
            return self._table

        self.print_verbose(f"Loading rule table from: {source}")
        try:
            self._table = load_rule_table(source)
        except JobflowError as e:
            self.fail(str(e))
        return self._table

    def load_facts_or_exit(self, facts_path: Path | None) -> FactSnapshot:
        """
        Load a fact snapshot from a file, or stdin when no path is given.

        Raises:
            typer.Exit: If the facts cannot be read
        """
        self.print_verbose(f"Reading facts from {facts_path or 'stdin'}")
        try:
            return FactSnapshot(load_facts(facts_path))
        except JobflowError as e:
            self.fail(f"Failed to load facts: {e}")

    def evaluator(self) -> ReadinessEvaluator:
        return ReadinessEvaluator(self.load_table_or_exit())

    def authorizer(self) -> TransitionAuthorizer:
        return TransitionAuthorizer(self.load_table_or_exit())
