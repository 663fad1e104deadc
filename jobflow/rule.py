"""Stage rule definition for jobflow."""

from dataclasses import dataclass, field
from typing import Any

from jobflow.models import RuleConfigurationError, StageRuleDefinition
from jobflow.prerequisite import BasePrerequisite, PrerequisiteFactory


@dataclass(frozen=True)
class StageRule:
    """
    Immutable rule for one pipeline stage.

    Attributes:
        stage: Unique stage identifier (e.g. ``quote_sent``)
        label: Display name, never evaluated
        prerequisites: Checks that must pass before a job may enter the stage
        can_skip: Advisory flag marking the stage as optional. It never
            changes how the stage's own prerequisites are scored.
    """

    stage: str
    label: str = ""
    prerequisites: tuple[BasePrerequisite, ...] = field(default_factory=tuple)
    can_skip: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.stage, str) or not self.stage.strip():
            raise RuleConfigurationError("Stage rule must have a non-empty stage identifier")
        if not self.label:
            object.__setattr__(self, "label", self.stage)
        # Lists from callers are frozen to keep the rule immutable
        object.__setattr__(self, "prerequisites", tuple(self.prerequisites))
        for prerequisite in self.prerequisites:
            if not isinstance(prerequisite, BasePrerequisite):
                raise RuleConfigurationError(
                    f"Stage '{self.stage}' has an invalid prerequisite: {prerequisite!r}"
                )

    @classmethod
    def from_definition(cls, definition: StageRuleDefinition | dict[str, Any]) -> "StageRule":
        """
        Build a rule from its declarative form.

        Accepts ``canSkip`` as an alias of ``can_skip``.

        Raises:
            RuleConfigurationError: If the definition or any prerequisite is invalid
        """
        if not isinstance(definition, dict):
            raise RuleConfigurationError(
                f"Stage rule definition must be a dictionary, got {type(definition).__name__}"
            )
        stage = definition.get("stage", "")
        prerequisites_config = definition.get("prerequisites") or []
        if not isinstance(prerequisites_config, list):
            raise RuleConfigurationError(f"Stage '{stage}' prerequisites must be a list")

        errors: list[str] = []
        prerequisites = []
        for index, prereq_def in enumerate(prerequisites_config):
            try:
                prerequisites.append(PrerequisiteFactory.create(prereq_def))
            except RuleConfigurationError as e:
                errors.extend(f"Stage '{stage}' prerequisite {index}: {err}" for err in e.errors)

        can_skip = definition.get("can_skip", definition.get("canSkip", False))
        if not isinstance(can_skip, bool):
            errors.append(f"Stage '{stage}' can_skip must be a boolean, got {can_skip!r}")
        if errors:
            raise RuleConfigurationError(errors)

        return cls(
            stage=stage,
            label=definition.get("label", "") or "",
            prerequisites=tuple(prerequisites),
            can_skip=can_skip,
        )

    @property
    def is_gated(self) -> bool:
        """Whether entering this stage requires any prerequisite."""
        return bool(self.prerequisites)

    @property
    def required_fields(self) -> list[str]:
        """Fact names referenced by this rule, in declaration order."""
        fields: list[str] = []
        for prerequisite in self.prerequisites:
            if prerequisite.field not in fields:
                fields.append(prerequisite.field)
        return fields

    def to_dict(self) -> StageRuleDefinition:
        """Serialize rule to its declarative form."""
        return {
            "stage": self.stage,
            "label": self.label,
            "prerequisites": [p.to_dict() for p in self.prerequisites],
            "can_skip": self.can_skip,
        }
