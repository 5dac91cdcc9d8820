"""Perk advancement: eligibility, pricing, payment, and commit."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque

from ..roster.models import Perk, Person, RosterSnapshot, RosterStatus, Specialty
from .costs import ConfigurationError, CostTable, TrainingCost
from .ledger import GameMode, InsufficientResourcesError, ResourceLedger
from .levels import SkillLevel, next_level

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 256


class AdvancementOutcome(str, Enum):
    """Possible results of a training request."""

    SUCCESS = "success"
    NOT_ELIGIBLE = "not_eligible"
    MAX_LEVEL_REACHED = "max_level_reached"
    INSUFFICIENT_RESOURCES = "insufficient_resources"
    CONFIGURATION_ERROR = "configuration_error"


@dataclass(frozen=True)
class AdvancementResult:
    """Outcome of :meth:`Trainer.advance` along with user feedback."""

    outcome: AdvancementOutcome
    person: str
    specialty: Specialty
    perk: Perk | None = None
    cost: TrainingCost | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is AdvancementOutcome.SUCCESS

    @property
    def is_fatal(self) -> bool:
        """``True`` for broken data or integrations rather than player input."""

        return self.outcome is AdvancementOutcome.CONFIGURATION_ERROR


@dataclass(frozen=True)
class TrainingQuote:
    """Read-only preview of what training a perk would do."""

    person: str
    specialty: Specialty
    current_level: SkillLevel
    next_level: SkillLevel
    eligible: bool
    cost: TrainingCost | None = None

    @property
    def at_max_level(self) -> bool:
        return self.next_level == self.current_level


@dataclass
class TrainingLogEntry:
    """Record of a training request for the feedback log."""

    person: str
    specialty: Specialty
    outcome: AdvancementOutcome
    from_level: SkillLevel
    to_level: SkillLevel
    cost: TrainingCost | None = None
    notes: dict[str, object] = field(default_factory=dict)


class Trainer:
    """Advances perks by one level once the training cost has been paid."""

    def __init__(
        self,
        cost_table: CostTable | None = None,
        *,
        roster: RosterSnapshot | None = None,
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be positive")
        self.cost_table = cost_table if cost_table is not None else CostTable.default()
        self.roster = roster
        # Oldest entries drop off once the limit is reached.
        self.history: Deque[TrainingLogEntry] = deque(maxlen=history_limit)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    def is_eligible(
        self,
        person: Person,
        *,
        in_flight: bool,
        roster: RosterSnapshot | None = None,
    ) -> bool:
        """Applicants and crew assigned to a mission in flight cannot train."""

        snapshot = self._roster(roster)
        if snapshot.is_applicant(person):
            return False
        if in_flight and person.status is RosterStatus.ASSIGNED:
            return False
        return True

    def quote(
        self,
        person: Person,
        perk: Perk,
        *,
        in_flight: bool,
        roster: RosterSnapshot | None = None,
    ) -> TrainingQuote:
        """Describe the next step for ``perk`` without touching any state.

        Raises:
            ConfigurationError: the next level has no cost entry, or no
                roster snapshot is available.
        """

        eligible = self.is_eligible(person, in_flight=in_flight, roster=roster)
        target = next_level(perk.skill_level)
        cost = None
        if eligible and target != perk.skill_level:
            cost = self.cost_table.cost_for(target)
        return TrainingQuote(
            person=person.name,
            specialty=perk.specialty,
            current_level=perk.skill_level,
            next_level=target,
            eligible=eligible,
            cost=cost,
        )

    def advance(
        self,
        person: Person,
        perk: Perk,
        mode: GameMode | str,
        ledger: ResourceLedger,
        *,
        in_flight: bool,
        roster: RosterSnapshot | None = None,
    ) -> AdvancementResult:
        """Train ``perk`` up one level, paying from ``ledger`` under ``mode``.

        Every outcome is returned as an :class:`AdvancementResult`. Nothing
        is changed unless the payment succeeded; only then is the perk
        raised and written back into ``person``.
        """

        with self._lock:
            current = perk.skill_level

            try:
                economy = GameMode.from_host(mode)
                eligible = self.is_eligible(person, in_flight=in_flight, roster=roster)
            except (ConfigurationError, ValueError) as exc:
                return self._fail_configuration(person, perk, target=current, error=exc)

            if not eligible:
                return self._finish(
                    AdvancementOutcome.NOT_ELIGIBLE,
                    person,
                    perk,
                    target=current,
                    message=f"{person.name} cannot be trained right now.",
                )

            target = next_level(current)
            if target == current:
                return self._finish(
                    AdvancementOutcome.MAX_LEVEL_REACHED,
                    person,
                    perk,
                    target=current,
                    message=f"{perk.specialty.value} is already at max level.",
                )

            logger.debug("Requested upgrade to %s for %s", target.value, person.name)
            try:
                cost = self.cost_table.cost_for(target)
            except ConfigurationError as exc:
                return self._fail_configuration(person, perk, target=target, error=exc)

            try:
                ledger.check_and_spend(economy, cost)
            except InsufficientResourcesError as exc:
                return self._finish(
                    AdvancementOutcome.INSUFFICIENT_RESOURCES,
                    person,
                    perk,
                    target=target,
                    cost=cost,
                    message="You cannot afford this training!",
                    notes={"shortfall": exc.shortfall},
                )

            perk.skill_level = target
            person.replace_perk(perk)
            return self._finish(
                AdvancementOutcome.SUCCESS,
                person,
                perk,
                target=target,
                cost=cost,
                from_level=current,
                message=f"{person.name} trained to {target.value} {perk.specialty.value}.",
            )

    # ------------------------------------------------------------------
    def _roster(self, roster: RosterSnapshot | None) -> RosterSnapshot:
        snapshot = roster if roster is not None else self.roster
        if snapshot is None:
            raise ConfigurationError("a roster snapshot is required to check eligibility")
        return snapshot

    def _fail_configuration(
        self,
        person: Person,
        perk: Perk,
        *,
        target: SkillLevel,
        error: Exception,
    ) -> AdvancementResult:
        logger.error("Cannot train %s: %s", person.name, error)
        return self._finish(
            AdvancementOutcome.CONFIGURATION_ERROR,
            person,
            perk,
            target=target,
            message=str(error),
        )

    def _finish(
        self,
        outcome: AdvancementOutcome,
        person: Person,
        perk: Perk,
        *,
        target: SkillLevel,
        message: str,
        cost: TrainingCost | None = None,
        from_level: SkillLevel | None = None,
        notes: dict[str, object] | None = None,
    ) -> AdvancementResult:
        success = outcome is AdvancementOutcome.SUCCESS
        if not success and outcome is not AdvancementOutcome.CONFIGURATION_ERROR:
            logger.info("Training rejected for %s: %s", person.name, outcome.value)
        self.history.append(
            TrainingLogEntry(
                person=person.name,
                specialty=perk.specialty,
                outcome=outcome,
                from_level=from_level if from_level is not None else perk.skill_level,
                to_level=target if success else perk.skill_level,
                cost=cost if success else None,
                notes=dict(notes or {}),
            )
        )
        return AdvancementResult(
            outcome=outcome,
            person=person.name,
            specialty=perk.specialty,
            perk=perk if success else None,
            cost=cost,
            message=message,
        )


__all__ = [
    "AdvancementOutcome",
    "AdvancementResult",
    "Trainer",
    "TrainingLogEntry",
    "TrainingQuote",
]
