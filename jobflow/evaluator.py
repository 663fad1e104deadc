"""Readiness evaluation of stage prerequisites for jobflow.

This module answers "are the prerequisites for entering stage X met by this
job's facts", for one stage (``evaluate``) or for the whole pipeline
(``readiness``).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from jobflow.models import (
    ReadinessReportDict,
    StageReadinessDict,
    UnmetPrerequisiteDict,
    VerdictDict,
)
from jobflow.prerequisite import PrerequisiteResult
from jobflow.rule import StageRule
from jobflow.snapshot import FactSnapshot, create_snapshot
from jobflow.table import StageRuleTable


@dataclass(frozen=True)
class Verdict:
    """Result of evaluating a stage's prerequisites against a snapshot.

    Fields:
        stage: Stage whose prerequisites were evaluated
        can_progress: True iff every prerequisite passed
        results: Every prerequisite result, in declaration order
        evaluated: False when a decision was reached without running the
            prerequisites (escape-hatch or backward moves)
    """

    stage: str
    can_progress: bool
    results: tuple[PrerequisiteResult, ...] = field(default_factory=tuple)
    evaluated: bool = True

    @classmethod
    def skipped(cls, stage: str, can_progress: bool) -> "Verdict":
        """Verdict for a decision that did not need the prerequisites."""
        return cls(stage=stage, can_progress=can_progress, results=(), evaluated=False)

    @property
    def failed(self) -> tuple[PrerequisiteResult, ...]:
        return tuple(result for result in self.results if not result.passed)

    @property
    def unmet_prerequisites(self) -> list[UnmetPrerequisiteDict]:
        """Failed checks as ``{field, message}``, in declaration order."""
        return [result.to_unmet() for result in self.failed]

    @property
    def messages(self) -> list[str]:
        """End-user messages of the failed checks, in declaration order."""
        return [result.message for result in self.failed]

    def to_dict(self) -> VerdictDict:
        """Convert verdict to JSON-serializable dictionary."""
        return {
            "stage": self.stage,
            "can_progress": self.can_progress,
            "evaluated": self.evaluated,
            "unmet_prerequisites": self.unmet_prerequisites,
            "results": [result.to_dict() for result in self.results],
        }


@dataclass(frozen=True)
class StageReadiness:
    """Readiness of one stage within a pipeline-wide report."""

    stage: str
    label: str
    is_current: bool
    is_unrestricted: bool
    can_skip: bool
    verdict: Verdict

    @property
    def can_progress(self) -> bool:
        """Prerequisites met, or the stage is reachable without them."""
        return self.verdict.can_progress or self.is_unrestricted

    def to_dict(self) -> StageReadinessDict:
        return {
            "stage": self.stage,
            "label": self.label,
            "is_current": self.is_current,
            "is_unrestricted": self.is_unrestricted,
            "can_skip": self.can_skip,
            "can_progress": self.can_progress,
            "prerequisites": [result.to_dict() for result in self.verdict.results],
        }


@dataclass(frozen=True)
class ReadinessReport:
    """Per-stage readiness for one job, in pipeline order."""

    current_stage: str | None
    stages: tuple[StageReadiness, ...]

    def get(self, stage: str) -> StageReadiness | None:
        for entry in self.stages:
            if entry.stage == stage:
                return entry
        return None

    @property
    def ready_stages(self) -> list[str]:
        return [entry.stage for entry in self.stages if entry.can_progress]

    def to_dict(self) -> ReadinessReportDict:
        return {
            "current_stage": self.current_stage,
            "stages": [entry.to_dict() for entry in self.stages],
        }


class ReadinessEvaluator:
    """
    Evaluates stage prerequisites against fact snapshots.

    The evaluator holds only the (read-only) rule table it was given, so one
    instance can serve concurrent requests.
    """

    def __init__(self, table: StageRuleTable):
        self.table = table

    def evaluate(
        self, stage: str, snapshot: FactSnapshot | Mapping[str, Any] | None
    ) -> Verdict:
        """
        Evaluate every prerequisite of ``stage`` against ``snapshot``.

        All prerequisites are checked, so the verdict lists every failure and
        not just the first.

        Args:
            stage: Target stage identifier
            snapshot: Facts about the job

        Returns:
            Verdict for the stage

        Raises:
            UnknownStageError: If the stage is not declared in the table
        """
        rule = self.table.require(stage)
        return self._evaluate_rule(rule, create_snapshot(snapshot))

    def _evaluate_rule(self, rule: StageRule, snapshot: FactSnapshot) -> Verdict:
        results = tuple(prerequisite.evaluate(snapshot) for prerequisite in rule.prerequisites)
        return Verdict(
            stage=rule.stage,
            can_progress=all(result.passed for result in results),
            results=results,
        )

    def readiness(
        self,
        snapshot: FactSnapshot | Mapping[str, Any] | None,
        current_stage: str | None = None,
    ) -> ReadinessReport:
        """
        Evaluate every stage of the pipeline for one job.

        Args:
            snapshot: Facts about the job
            current_stage: The job's current stage, flagged in the report

        Returns:
            ReadinessReport with one entry per stage in pipeline order

        Raises:
            UnknownStageError: If current_stage is given but not declared
        """
        if current_stage is not None:
            self.table.require(current_stage)
        facts = create_snapshot(snapshot)

        entries = tuple(
            StageReadiness(
                stage=rule.stage,
                label=rule.label,
                is_current=rule.stage == current_stage,
                is_unrestricted=self.table.is_unrestricted(rule.stage),
                can_skip=rule.can_skip,
                verdict=self._evaluate_rule(rule, facts),
            )
            for rule in self.table
        )
        return ReadinessReport(current_stage=current_stage, stages=entries)
