"""Skill levels, training costs, and the resource ledger."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - imported only for type checkers
    from .advancement import (
        AdvancementOutcome,
        AdvancementResult,
        Trainer,
        TrainingLogEntry,
        TrainingQuote,
    )
    from .config import TrainingConfig
    from .costs import ConfigurationError, CostTable, TrainingCost
    from .ledger import GameMode, InsufficientResourcesError, LedgerBalance, ResourceLedger
    from .levels import SkillLevel, is_max_level, next_level, reachable_levels

__all__ = [
    "AdvancementOutcome",
    "AdvancementResult",
    "ConfigurationError",
    "CostTable",
    "GameMode",
    "InsufficientResourcesError",
    "LedgerBalance",
    "ResourceLedger",
    "SkillLevel",
    "Trainer",
    "TrainingConfig",
    "TrainingCost",
    "TrainingLogEntry",
    "TrainingQuote",
    "is_max_level",
    "next_level",
    "reachable_levels",
]

_EXPORTS = {
    "AdvancementOutcome": "crewtrain.training.advancement",
    "AdvancementResult": "crewtrain.training.advancement",
    "Trainer": "crewtrain.training.advancement",
    "TrainingLogEntry": "crewtrain.training.advancement",
    "TrainingQuote": "crewtrain.training.advancement",
    "TrainingConfig": "crewtrain.training.config",
    "ConfigurationError": "crewtrain.training.costs",
    "CostTable": "crewtrain.training.costs",
    "TrainingCost": "crewtrain.training.costs",
    "GameMode": "crewtrain.training.ledger",
    "InsufficientResourcesError": "crewtrain.training.ledger",
    "LedgerBalance": "crewtrain.training.ledger",
    "ResourceLedger": "crewtrain.training.ledger",
    "SkillLevel": "crewtrain.training.levels",
    "is_max_level": "crewtrain.training.levels",
    "next_level": "crewtrain.training.levels",
    "reachable_levels": "crewtrain.training.levels",
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module = import_module(_EXPORTS[name])
        value = getattr(module, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted({*globals(), *__all__})
