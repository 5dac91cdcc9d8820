"""Skill level ladder used by perk training."""

from __future__ import annotations

from enum import Enum


class SkillLevel(str, Enum):
    """Ordered skill ranks a perk can hold, lowest first."""

    NONE = "none"
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        """Position of the level on the ladder, starting at zero."""

        return _LADDER.index(self)

    @staticmethod
    def minimum() -> "SkillLevel":
        return _LADDER[0]

    @staticmethod
    def maximum() -> "SkillLevel":
        return _LADDER[-1]

    @staticmethod
    def from_value(value: "SkillLevel | str") -> "SkillLevel":
        """Return the level matching ``value`` by value or member name."""

        if isinstance(value, SkillLevel):
            return value
        normalized = str(value).strip().lower()
        for level in _LADDER:
            if level.value == normalized or level.name.lower() == normalized:
                return level
        raise ValueError(f"unknown skill level {value!r}")

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SkillLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SkillLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SkillLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SkillLevel):
            return NotImplemented
        return self.rank >= other.rank


_LADDER: tuple[SkillLevel, ...] = tuple(SkillLevel)


def next_level(current: SkillLevel) -> SkillLevel:
    """Return the level directly above ``current``.

    The ladder saturates: the maximum level maps to itself, so callers can
    detect the ceiling with ``next_level(level) == level``.
    """

    index = _LADDER.index(current)
    if index + 1 >= len(_LADDER):
        return current
    return _LADDER[index + 1]


def is_max_level(level: SkillLevel) -> bool:
    return next_level(level) == level


def reachable_levels() -> tuple[SkillLevel, ...]:
    """Levels that can be trained into, i.e. every level above the minimum."""

    return _LADDER[1:]


__all__ = ["SkillLevel", "is_max_level", "next_level", "reachable_levels"]
