"""Training cost records and the lookup table keyed by target level."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .levels import SkillLevel, reachable_levels


class ConfigurationError(LookupError):
    """Raised when training data is missing or a host dependency misbehaves."""


class TrainingCost(BaseModel):
    """Resources required to train a perk up to ``target_level``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    target_level: SkillLevel
    funds: float = Field(default=0.0, ge=0.0)
    science: float = Field(default=0.0, ge=0.0)

    @field_validator("target_level", mode="before")
    @classmethod
    def _coerce_level(cls, value: object) -> SkillLevel:
        if isinstance(value, SkillLevel):
            return value
        return SkillLevel.from_value(str(value))

    @field_validator("funds", "science")
    @classmethod
    def _coerce_float(cls, value: float) -> float:
        return float(value)


_DEFAULT_COSTS: Mapping[SkillLevel, tuple[float, float]] = {
    SkillLevel.BASIC: (10_000.0, 5.0),
    SkillLevel.INTERMEDIATE: (25_000.0, 15.0),
    SkillLevel.ADVANCED: (60_000.0, 40.0),
    SkillLevel.EXPERT: (150_000.0, 100.0),
}


class CostTable(BaseModel):
    """Ordered training costs with at most one entry per target level."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    entries: tuple[TrainingCost, ...] = Field(default_factory=tuple)

    @field_validator("entries")
    @classmethod
    def _reject_duplicates(cls, value: tuple[TrainingCost, ...]) -> tuple[TrainingCost, ...]:
        seen: set[SkillLevel] = set()
        for entry in value:
            if entry.target_level in seen:
                raise ValueError(f"duplicate cost entry for {entry.target_level.value}")
            seen.add(entry.target_level)
        return value

    @classmethod
    def default(cls) -> "CostTable":
        """Return the stock cost table covering every trainable level."""

        return cls(
            entries=tuple(
                TrainingCost(target_level=level, funds=funds, science=science)
                for level, (funds, science) in _DEFAULT_COSTS.items()
            )
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Mapping[str, float]]) -> "CostTable":
        """Build a table from ``{level: {"funds": .., "science": ..}}``."""

        return cls(
            entries=tuple(
                TrainingCost(target_level=level, **dict(costs))
                for level, costs in payload.items()
            )
        )

    def cost_for(self, level: SkillLevel) -> TrainingCost:
        """Return the cost of training up to ``level``.

        Raises:
            ConfigurationError: no entry targets ``level``.
        """

        for entry in self.entries:
            if entry.target_level == level:
                return entry
        raise ConfigurationError(f"no training cost defined for level {level.value!r}")

    def missing_levels(self) -> list[SkillLevel]:
        covered = {entry.target_level for entry in self.entries}
        return [level for level in reachable_levels() if level not in covered]

    def require_complete(self) -> None:
        missing = self.missing_levels()
        if missing:
            names = ", ".join(level.value for level in missing)
            raise ConfigurationError(f"training cost table is missing entries for: {names}")


__all__ = ["ConfigurationError", "CostTable", "TrainingCost"]
