"""Game-mode aware resource ledger used to pay for crew training."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .costs import TrainingCost

logger = logging.getLogger(__name__)


class InsufficientResourcesError(RuntimeError):
    """Raised when the ledger cannot cover a training cost."""

    def __init__(self, shortfall: Dict[str, float]) -> None:
        self.shortfall = dict(shortfall)
        detail = ", ".join(f"{key} short by {amount:g}" for key, amount in self.shortfall.items())
        super().__init__(f"insufficient resources ({detail})")


class GameMode(str, Enum):
    """Economy rules that decide which resources constrain training."""

    FULL_ECONOMY = "full_economy"
    SCIENCE_ONLY = "science_only"
    UNCONSTRAINED = "unconstrained"

    @staticmethod
    def from_host(value: "GameMode | str") -> "GameMode":
        """Map a host game mode tag or a mode name to its economy.

        Names match case-insensitively and ignore separators, so
        ``"FullEconomy"``, ``"full-economy"`` and ``"FULL_ECONOMY"`` agree.

        Raises:
            ValueError: ``value`` names no mode and no known host tag.
        """

        if isinstance(value, GameMode):
            return value
        key = _mode_key(str(value))
        try:
            return _HOST_MODES[key]
        except KeyError:
            raise ValueError(f"unknown game mode {value!r}") from None

    @property
    def charges_funds(self) -> bool:
        return self is GameMode.FULL_ECONOMY

    @property
    def charges_science(self) -> bool:
        return self in (GameMode.FULL_ECONOMY, GameMode.SCIENCE_ONLY)


def _mode_key(value: str) -> str:
    return "".join(char for char in value.upper() if char.isalnum())


_HOST_MODES: Dict[str, GameMode] = {
    **{_mode_key(mode.name): mode for mode in GameMode},
    "SCIENCEONLYECONOMY": GameMode.SCIENCE_ONLY,
    "CAREER": GameMode.FULL_ECONOMY,
    "SCIENCESANDBOX": GameMode.SCIENCE_ONLY,
    # Host modes without an economy.
    "SANDBOX": GameMode.UNCONSTRAINED,
    "MISSION": GameMode.UNCONSTRAINED,
    "MISSIONBUILDER": GameMode.UNCONSTRAINED,
    "SCENARIO": GameMode.UNCONSTRAINED,
    "SCENARIONONRESUMABLE": GameMode.UNCONSTRAINED,
    "TUTORIAL": GameMode.UNCONSTRAINED,
}


@dataclass(frozen=True)
class LedgerBalance:
    """Point-in-time view of the ledger."""

    funds: float
    science: float


class ResourceLedger:
    """Funds and science pool with an atomic check-and-spend operation."""

    def __init__(self, *, funds: float = 0.0, science: float = 0.0) -> None:
        if funds < 0 or science < 0:
            raise ValueError("ledger balances must be non-negative")
        self._funds = float(funds)
        self._science = float(science)
        self._lock = threading.Lock()

    # -- Introspection -------------------------------------------------
    @property
    def funds(self) -> float:
        return self._funds

    @property
    def science(self) -> float:
        return self._science

    def balance(self) -> LedgerBalance:
        with self._lock:
            return LedgerBalance(funds=self._funds, science=self._science)

    def __repr__(self) -> str:
        return f"ResourceLedger(funds={self._funds:g}, science={self._science:g})"

    # -- Mutation ------------------------------------------------------
    def deposit(self, *, funds: float = 0.0, science: float = 0.0) -> LedgerBalance:
        """Credit resources to the ledger and return the new balance."""

        if funds < 0 or science < 0:
            raise ValueError("deposit amounts must be non-negative")
        with self._lock:
            self._funds += funds
            self._science += science
            return LedgerBalance(funds=self._funds, science=self._science)

    def can_afford(self, mode: GameMode, cost: TrainingCost) -> bool:
        with self._lock:
            return not self._shortfall(mode, cost)

    def check_and_spend(self, mode: GameMode, cost: TrainingCost) -> None:
        """Deduct ``cost`` under ``mode`` or leave the ledger untouched.

        The check and the deduction happen under one lock, so concurrent
        callers can never both pass the check against the same balance.

        Raises:
            InsufficientResourcesError: a charged resource is below its cost.
        """

        with self._lock:
            shortfall = self._shortfall(mode, cost)
            if shortfall:
                raise InsufficientResourcesError(shortfall)
            if mode.charges_funds:
                self._funds -= cost.funds
            if mode.charges_science:
                self._science -= cost.science
            logger.info(
                "Spent %g funds and %g science on %s training (%s)",
                cost.funds if mode.charges_funds else 0.0,
                cost.science if mode.charges_science else 0.0,
                cost.target_level.value,
                mode.value,
            )

    def _shortfall(self, mode: GameMode, cost: TrainingCost) -> Dict[str, float]:
        shortfall: Dict[str, float] = {}
        if mode.charges_funds and self._funds < cost.funds:
            shortfall["funds"] = cost.funds - self._funds
        if mode.charges_science and self._science < cost.science:
            shortfall["science"] = cost.science - self._science
        return shortfall


__all__ = [
    "GameMode",
    "InsufficientResourcesError",
    "LedgerBalance",
    "ResourceLedger",
]
