"""Ordered stage rule table for jobflow."""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from jobflow.models import (
    RuleConfigurationError,
    RuleTableDefinition,
    UnknownStageError,
)
from jobflow.rule import StageRule

logger = logging.getLogger(__name__)

NOT_FOUND = -1


class StageRuleTable:
    """
    Authoritative, ordered catalog of pipeline stages.

    The declaration order is the canonical "forward" order of the pipeline,
    so it must be kept stable across releases: callers compare positions, and
    renumbering silently changes which transitions count as forward.

    A table is read-only once constructed and can be shared freely across
    threads.
    """

    def __init__(
        self,
        rules: Iterable[StageRule],
        unrestricted_stages: Iterable[str] = (),
        name: str = "",
        description: str = "",
    ):
        """
        Initialize and validate the table.

        Args:
            rules: Stage rules in pipeline order
            unrestricted_stages: Stages reachable from anywhere, bypassing
                ordering and prerequisites
            name: Optional table name
            description: Optional table description

        Raises:
            RuleConfigurationError: If the table is empty, has duplicate
                stages or names unrestricted stages it does not declare
        """
        self.name = name
        self.description = description
        self._rules: tuple[StageRule, ...] = tuple(rules)
        self._index: dict[str, int] = {}

        errors: list[str] = []
        if not self._rules:
            errors.append("Rule table must declare at least one stage")

        for position, rule in enumerate(self._rules):
            if not isinstance(rule, StageRule):
                errors.append(f"Entry {position} is not a StageRule: {rule!r}")
                continue
            if rule.stage in self._index:
                errors.append(f"Duplicate stage '{rule.stage}' in rule table")
                continue
            self._index[rule.stage] = position

        unrestricted = []
        for stage in unrestricted_stages:
            if stage not in self._index:
                errors.append(f"Unrestricted stage '{stage}' is not declared in the rule table")
            unrestricted.append(stage)
        self._unrestricted = frozenset(unrestricted)

        if errors:
            raise RuleConfigurationError(errors)

        logger.debug(
            "Rule table %s built with %d stages (%d unrestricted)",
            name or "<unnamed>",
            len(self._rules),
            len(self._unrestricted),
        )

    @classmethod
    def from_definition(cls, definition: RuleTableDefinition | dict[str, Any]) -> "StageRuleTable":
        """
        Build a table from its declarative form.

        Every stage is parsed before failing so all problems are reported
        together.

        Raises:
            RuleConfigurationError: If any part of the definition is invalid
        """
        if not isinstance(definition, dict):
            raise RuleConfigurationError(
                f"Rule table definition must be a dictionary, got {type(definition).__name__}"
            )
        stages_config = definition.get("stages")
        if not isinstance(stages_config, list):
            raise RuleConfigurationError("Rule table 'stages' must be a list of stage rules")

        errors: list[str] = []
        rules = []
        for stage_def in stages_config:
            try:
                rules.append(StageRule.from_definition(stage_def))
            except RuleConfigurationError as e:
                errors.extend(e.errors)
        if errors:
            raise RuleConfigurationError(errors)

        return cls(
            rules,
            unrestricted_stages=definition.get("unrestricted_stages") or (),
            name=definition.get("name", ""),
            description=definition.get("description", ""),
        )

    # Lookups

    def rule_for(self, stage: str) -> StageRule | None:
        """Return the rule for a stage, or None if the stage is unknown."""
        position = self._index.get(stage)
        if position is None:
            return None
        return self._rules[position]

    def require(self, stage: str) -> StageRule:
        """
        Return the rule for a stage.

        Raises:
            UnknownStageError: If the stage is not declared
        """
        rule = self.rule_for(stage)
        if rule is None:
            raise UnknownStageError(stage, self.stages)
        return rule

    def index_of(self, stage: str) -> int:
        """Ordinal position of a stage, or -1 when the stage is unknown."""
        return self._index.get(stage, NOT_FOUND)

    @property
    def unrestricted_stages(self) -> frozenset[str]:
        """Stages reachable from any stage, regardless of ordering or prerequisites."""
        return self._unrestricted

    def is_unrestricted(self, stage: str) -> bool:
        return stage in self._unrestricted

    def is_forward_progression(self, from_stage: str, to_stage: str) -> bool:
        """True iff ``to_stage`` sits strictly after ``from_stage``."""
        return self.index_of(to_stage) > self.index_of(from_stage)

    # Collection views

    @property
    def rules(self) -> tuple[StageRule, ...]:
        return self._rules

    @property
    def stages(self) -> list[str]:
        """Stage identifiers in pipeline order."""
        return [rule.stage for rule in self._rules]

    @property
    def initial_stage(self) -> str:
        """The first declared stage; new jobs start here."""
        return self._rules[0].stage

    def __contains__(self, stage: object) -> bool:
        return stage in self._index

    def __iter__(self) -> Iterator[StageRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"StageRuleTable(name={self.name!r}, stages={self.stages!r})"

    # Serialization

    def to_dict(self) -> RuleTableDefinition:
        """Serialize table to its declarative form."""
        result: RuleTableDefinition = {
            "stages": [rule.to_dict() for rule in self._rules],
            # Declaration order keeps exports stable
            "unrestricted_stages": [s for s in self.stages if s in self._unrestricted],
        }
        if self.name:
            result["name"] = self.name
        if self.description:
            result["description"] = self.description
        return result
