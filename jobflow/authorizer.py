"""Transition authorization for jobflow.

The authorizer is the single decision point for "may this job move from
stage A to stage B right now". Its answer depends only on stage order, the
unrestricted stage set and the target's prerequisites.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from jobflow.evaluator import ReadinessEvaluator, Verdict
from jobflow.models import AuthorizationDict, DenialReason
from jobflow.snapshot import FactSnapshot, create_snapshot
from jobflow.table import StageRuleTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Authorization:
    """Outcome of a transition authorization.

    Attributes:
        from_stage: Stage the job is currently in
        to_stage: Requested target stage
        allowed: Whether the move is permitted
        verdict: Prerequisite verdict for the target (not evaluated for
            escape-hatch and backward moves)
        reason: Why the move was denied, None when allowed
        reason_message: Human-readable explanation, None when allowed
        unrestricted: True when the target is an escape-hatch stage
    """

    from_stage: str
    to_stage: str
    allowed: bool
    verdict: Verdict
    reason: DenialReason | None = None
    reason_message: str | None = None
    unrestricted: bool = False

    @property
    def unmet_prerequisites(self):
        return self.verdict.unmet_prerequisites

    def to_dict(self) -> AuthorizationDict:
        """Convert authorization to JSON-serializable dictionary."""
        return {
            "from_stage": self.from_stage,
            "to_stage": self.to_stage,
            "allowed": self.allowed,
            "unrestricted": self.unrestricted,
            "reason": self.reason.value if self.reason else None,
            "reason_message": self.reason_message,
            "verdict": self.verdict.to_dict(),
        }


class TransitionAuthorizer:
    """
    Decides whether a job may move between two stages.

    Algorithm:
        1. Unrestricted targets are always allowed; nothing else is checked.
        2. Moves that are not strictly forward are denied (NOT_FORWARD).
        3. Forward moves are allowed iff the target's prerequisites are met
           (PREREQUISITES_UNMET otherwise).

    ``can_skip`` is deliberately not consulted: any stage-skipping policy
    belongs to the caller.
    """

    def __init__(self, table: StageRuleTable, evaluator: ReadinessEvaluator | None = None):
        self.table = table
        self.evaluator = evaluator or ReadinessEvaluator(table)

    def is_forward_progression(self, from_stage: str, to_stage: str) -> bool:
        return self.table.is_forward_progression(from_stage, to_stage)

    def authorize(
        self,
        from_stage: str,
        to_stage: str,
        snapshot: FactSnapshot | Mapping[str, Any] | None,
    ) -> Authorization:
        """
        Authorize a move from ``from_stage`` to ``to_stage``.

        Args:
            from_stage: Current stage of the job
            to_stage: Requested stage
            snapshot: Facts about the job

        Returns:
            Authorization with the decision and its diagnostics

        Raises:
            UnknownStageError: If either stage is not declared in the table
        """
        from_rule = self.table.require(from_stage)
        to_rule = self.table.require(to_stage)

        if self.table.is_unrestricted(to_stage):
            logger.debug("Transition %s -> %s allowed: unrestricted target", from_stage, to_stage)
            return Authorization(
                from_stage=from_stage,
                to_stage=to_stage,
                allowed=True,
                verdict=Verdict.skipped(to_stage, can_progress=True),
                unrestricted=True,
            )

        if not self.is_forward_progression(from_stage, to_stage):
            message = (
                f"Cannot move from '{from_rule.label}' to '{to_rule.label}': "
                f"only forward progression is allowed"
            )
            logger.info("Transition %s -> %s denied: %s", from_stage, to_stage, message)
            return Authorization(
                from_stage=from_stage,
                to_stage=to_stage,
                allowed=False,
                verdict=Verdict.skipped(to_stage, can_progress=False),
                reason=DenialReason.NOT_FORWARD,
                reason_message=message,
            )

        verdict = self.evaluator.evaluate(to_stage, create_snapshot(snapshot))
        if verdict.can_progress:
            logger.debug("Transition %s -> %s allowed", from_stage, to_stage)
            return Authorization(
                from_stage=from_stage,
                to_stage=to_stage,
                allowed=True,
                verdict=verdict,
            )

        message = f"Prerequisites for '{to_rule.label}' are not met: " + "; ".join(
            verdict.messages
        )
        logger.info("Transition %s -> %s denied: %s", from_stage, to_stage, message)
        return Authorization(
            from_stage=from_stage,
            to_stage=to_stage,
            allowed=False,
            verdict=verdict,
            reason=DenialReason.PREREQUISITES_UNMET,
            reason_message=message,
        )

    def authorize_many(
        self,
        from_stage: str,
        targets: Iterable[str] | None,
        snapshot: FactSnapshot | Mapping[str, Any] | None,
    ) -> list[Authorization]:
        """
        Authorize several candidate targets against the same snapshot.

        Args:
            from_stage: Current stage of the job
            targets: Candidate stages; every other stage when None
            snapshot: Facts about the job

        Returns:
            One Authorization per target, in the order given
        """
        facts = create_snapshot(snapshot)
        if targets is None:
            targets = [stage for stage in self.table.stages if stage != from_stage]
        return [self.authorize(from_stage, target, facts) for target in targets]
