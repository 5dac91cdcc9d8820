"""Validated configuration for the training window."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .costs import CostTable

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..roster.models import RosterSnapshot
    from .advancement import Trainer


class TrainingConfig(BaseModel):
    """Settings payload describing training costs."""

    model_config = ConfigDict(extra="forbid")

    costs: CostTable = Field(default_factory=CostTable.default)
    require_complete_costs: bool = Field(default=True)

    @field_validator("costs", mode="before")
    @classmethod
    def _accept_level_mapping(cls, value: object) -> object:
        # ``{"basic": {"funds": 1, "science": 2}, ...}`` is the compact host form.
        if isinstance(value, Mapping) and "entries" not in value:
            return CostTable.from_mapping(value)
        return value

    @model_validator(mode="after")
    def _check_costs(self) -> "TrainingConfig":
        if self.require_complete_costs:
            missing = self.costs.missing_levels()
            if missing:
                names = ", ".join(level.value for level in missing)
                raise ValueError(f"training cost table is missing entries for: {names}")
        return self

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> "TrainingConfig":
        """Validate a settings mapping supplied by the host."""

        if payload is None:
            return cls()
        return cls.model_validate(dict(payload))

    def trainer(self, roster: RosterSnapshot | None = None) -> Trainer:
        """Return a :class:`~crewtrain.training.advancement.Trainer` using these costs."""

        from .advancement import Trainer

        return Trainer(self.costs, roster=roster)


__all__ = ["TrainingConfig"]
