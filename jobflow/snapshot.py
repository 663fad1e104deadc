"""Fact snapshot interface and implementation for jobflow."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Final


@dataclass(frozen=True)
class Present:
    """A fact that exists in the snapshot, with its value."""

    value: Any


class _Absent:
    """Marker for a fact that is missing from the snapshot (or null)."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Final = _Absent()

Lookup = Present | _Absent


class FactSnapshot(Mapping[str, Any]):
    """
    Read-only bundle of per-job facts supplied to the engine.

    The snapshot keeps its own shallow copy of the mapping, so keys added or
    replaced in the caller's dictionary later never leak into an evaluation.
    Values are held by reference and the engine never writes to them.
    Lookups distinguish a missing fact from a falsy one through ``lookup``,
    which returns ``Present(value)`` or ``ABSENT``. A fact
    explicitly set to ``None`` is reported as ``ABSENT``.
    """

    def __init__(self, facts: Mapping[str, Any] | None = None):
        """
        Initialize with fact data.

        Args:
            facts: Mapping of fact name to value. Extra facts are allowed and
                ignored by rules that do not reference them.

        Raises:
            TypeError: If facts is not a mapping
        """
        if facts is None:
            facts = {}
        if not isinstance(facts, Mapping):
            raise TypeError(
                f"Fact snapshot requires a mapping, got {type(facts).__name__}"
            )
        for key in facts:
            if not isinstance(key, str):
                raise TypeError(f"Fact names must be strings, got {key!r}")
        self._facts = dict(facts)

    def lookup(self, field: str) -> Lookup:
        """
        Look up a fact.

        Args:
            field: Fact name

        Returns:
            Present(value) when the fact is set, ABSENT otherwise
        """
        value = self._facts.get(field)
        if value is None:
            return ABSENT
        return Present(value)

    def has_fact(self, field: str) -> bool:
        """Check if a fact is present (set and not null)."""
        return isinstance(self.lookup(field), Present)

    def to_dict(self) -> dict[str, Any]:
        """Convert snapshot to dictionary representation."""
        return dict(self._facts)

    def __getitem__(self, key: str) -> Any:
        return self._facts[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._facts)

    def __len__(self) -> int:
        return len(self._facts)

    def __repr__(self) -> str:
        return f"FactSnapshot({self._facts!r})"


def create_snapshot(facts: "FactSnapshot | Mapping[str, Any] | None") -> FactSnapshot:
    """
    Create a FactSnapshot from various data sources.

    Args:
        facts: Mapping, existing FactSnapshot, or None for an empty snapshot

    Returns:
        FactSnapshot instance
    """
    if isinstance(facts, FactSnapshot):
        return facts
    if facts is None or isinstance(facts, Mapping):
        return FactSnapshot(facts)
    raise TypeError(f"Cannot create FactSnapshot from type {type(facts)}")
