"""Prerequisite checks and evaluation logic for jobflow."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from jobflow.models import (
    CheckType,
    PrerequisiteDefinition,
    PrerequisiteResultDict,
    RuleConfigurationError,
    UnmetPrerequisiteDict,
)
from jobflow.snapshot import ABSENT, FactSnapshot, Lookup, Present


@dataclass(frozen=True)
class PrerequisiteResult:
    """
    Result of checking one prerequisite against a fact snapshot.

    Attributes:
        field: Fact name that was checked
        check: Kind of check that was evaluated
        passed: Whether the check passed
        message: The prerequisite's configured message
        actual: Lookup result for the fact (Present(value) or ABSENT)
    """

    field: str
    check: CheckType
    passed: bool
    message: str
    actual: Lookup = ABSENT

    @property
    def present(self) -> bool:
        """Whether the fact was present in the snapshot."""
        return isinstance(self.actual, Present)

    def to_unmet(self) -> UnmetPrerequisiteDict:
        return {"field": self.field, "message": self.message}

    def to_dict(self) -> PrerequisiteResultDict:
        """Convert result to JSON-serializable dictionary."""
        return {
            "field": self.field,
            "check": self.check.value,
            "passed": self.passed,
            "message": self.message,
            "present": self.present,
            "actual": self.actual.value if isinstance(self.actual, Present) else None,
        }


def _values_equal(actual: Any, expected: Any) -> bool:
    """Compare by value, keeping booleans apart from the numbers 0 and 1."""
    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    return actual == expected


@dataclass(frozen=True)
class BasePrerequisite(ABC):
    """
    Abstract base class for all prerequisite checks.

    Each subclass carries only the operands its check needs, so an ``equals``
    check without a value or a ``has_related`` check without its table cannot
    be constructed.

    Attributes:
        field: Name of the fact to look up in the snapshot
        message: Human-readable explanation shown when the check fails
    """

    check: ClassVar[CheckType]

    field: str
    message: str

    def __post_init__(self) -> None:
        errors = self._validation_errors()
        if errors:
            raise RuleConfigurationError(errors)

    def _validation_errors(self) -> list[str]:
        errors = []
        if not isinstance(self.field, str) or not self.field.strip():
            errors.append(f"'{self.check}' prerequisite must name a non-empty field")
        if not isinstance(self.message, str) or not self.message.strip():
            errors.append(
                f"'{self.check}' prerequisite on '{self.field}' must have a non-empty message"
            )
        return errors

    @abstractmethod
    def passes(self, actual: Lookup) -> bool:
        """
        Decide whether a looked-up fact satisfies this check.

        Args:
            actual: Present(value) or ABSENT

        Returns:
            True if the check passes
        """
        pass

    def evaluate(self, snapshot: FactSnapshot) -> PrerequisiteResult:
        """Check this prerequisite against a snapshot."""
        actual = snapshot.lookup(self.field)
        return PrerequisiteResult(
            field=self.field,
            check=self.check,
            passed=self.passes(actual),
            message=self.message,
            actual=actual,
        )

    def to_dict(self) -> PrerequisiteDefinition:
        """Convert prerequisite to its declarative form."""
        return {
            "field": self.field,
            "check": self.check.value,
            "message": self.message,
        }


@dataclass(frozen=True)
class ExistsPrerequisite(BasePrerequisite):
    """Passes when the fact is present and not null."""

    check: ClassVar[CheckType] = CheckType.EXISTS

    def passes(self, actual: Lookup) -> bool:
        return isinstance(actual, Present)


@dataclass(frozen=True)
class TruthyPrerequisite(BasePrerequisite):
    """Passes when the fact is present and truthy (non-empty, non-zero, not False)."""

    check: ClassVar[CheckType] = CheckType.TRUTHY

    def passes(self, actual: Lookup) -> bool:
        return isinstance(actual, Present) and bool(actual.value)


@dataclass(frozen=True)
class EqualsPrerequisite(BasePrerequisite):
    """Passes when the fact equals ``value``."""

    check: ClassVar[CheckType] = CheckType.EQUALS

    value: str | bool | int | float

    def _validation_errors(self) -> list[str]:
        errors = super()._validation_errors()
        if self.value is None:
            errors.append(f"'equals' prerequisite on '{self.field}' requires a value")
        return errors

    def passes(self, actual: Lookup) -> bool:
        return isinstance(actual, Present) and _values_equal(actual.value, self.value)

    def to_dict(self) -> PrerequisiteDefinition:
        result = super().to_dict()
        result["value"] = self.value
        return result


@dataclass(frozen=True)
class HasRelatedPrerequisite(BasePrerequisite):
    """
    Passes when the snapshot reports related records for the job.

    The snapshot provider resolves the related collection into a count or a
    boolean stored under ``field``; this check only reads that fact.
    """

    check: ClassVar[CheckType] = CheckType.HAS_RELATED

    related_table: str
    related_field: str

    def _validation_errors(self) -> list[str]:
        errors = super()._validation_errors()
        for operand in ("related_table", "related_field"):
            value = getattr(self, operand)
            if not isinstance(value, str) or not value.strip():
                errors.append(
                    f"'has_related' prerequisite on '{self.field}' requires '{operand}'"
                )
        return errors

    def passes(self, actual: Lookup) -> bool:
        return isinstance(actual, Present) and bool(actual.value)

    def to_dict(self) -> PrerequisiteDefinition:
        result = super().to_dict()
        result["related_table"] = self.related_table
        result["related_field"] = self.related_field
        return result


Prerequisite = ExistsPrerequisite | TruthyPrerequisite | EqualsPrerequisite | HasRelatedPrerequisite


class PrerequisiteFactory:
    """
    Factory for creating Prerequisite instances from declarative definitions.

    Accepts both snake_case and the camelCase operand names used by the
    CRM's JSON rule files (``relatedTable``/``relatedField``).
    """

    _ALIASES = {
        "relatedTable": "related_table",
        "relatedField": "related_field",
    }

    @classmethod
    def create(cls, definition: PrerequisiteDefinition | dict[str, Any]) -> BasePrerequisite:
        """
        Create the appropriate prerequisite type from a definition.

        Args:
            definition: Prerequisite definition dictionary

        Returns:
            BasePrerequisite instance

        Raises:
            RuleConfigurationError: If the definition is invalid
        """
        if not isinstance(definition, dict):
            raise RuleConfigurationError(
                f"Prerequisite definition must be a dictionary, got {type(definition).__name__}"
            )
        data = {cls._ALIASES.get(key, key): value for key, value in definition.items()}

        raw_check = data.get("check")
        try:
            check = CheckType(str(raw_check).lower())
        except ValueError as err:
            valid = ", ".join(c.value for c in CheckType)
            raise RuleConfigurationError(
                f"Unknown prerequisite check '{raw_check}' on field '{data.get('field')}'. "
                f"Must be one of: {valid}"
            ) from err

        field = data.get("field", "")
        message = data.get("message", "")

        if check == CheckType.EXISTS:
            return ExistsPrerequisite(field=field, message=message)
        if check == CheckType.TRUTHY:
            return TruthyPrerequisite(field=field, message=message)
        if check == CheckType.EQUALS:
            return EqualsPrerequisite(field=field, message=message, value=data.get("value"))
        return HasRelatedPrerequisite(
            field=field,
            message=message,
            related_table=data.get("related_table", ""),
            related_field=data.get("related_field", ""),
        )
