"""Personnel, perks, and the roster snapshot handed over by the host."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TypedDict

from ..training.levels import SkillLevel


class RosterStatus(str, Enum):
    """Roster status tags reported by the host game."""

    AVAILABLE = "available"
    ASSIGNED = "assigned"
    DEAD = "dead"
    MISSING = "missing"

    @staticmethod
    def from_value(value: "RosterStatus | str") -> "RosterStatus":
        if isinstance(value, RosterStatus):
            return value
        normalized = str(value).strip().lower()
        try:
            return RosterStatus(normalized)
        except ValueError as exc:
            raise ValueError(f"unknown roster status {value!r}") from exc


class Specialty(str, Enum):
    """Skill specialties a crew member can be trained in."""

    ELECTRICAL = "electrical"
    MECHANICAL = "mechanical"
    EVA = "eva"


@dataclass
class Perk:
    """A specialty held by a person together with its current level."""

    specialty: Specialty
    skill_level: SkillLevel = SkillLevel.NONE

    def copy(self) -> "Perk":
        return Perk(specialty=self.specialty, skill_level=self.skill_level)


class PersonPayload(TypedDict, total=False):
    """Serialized representation of a :class:`Person`."""

    name: str
    status: str
    perks: Mapping[str, str]


@dataclass
class Person:
    """A crew member or applicant as seen by the training window."""

    name: str
    status: RosterStatus = RosterStatus.AVAILABLE
    perks: list[Perk] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.status = RosterStatus.from_value(self.status)

    def perk(self, specialty: Specialty) -> Perk | None:
        for perk in self.perks:
            if perk.specialty == specialty:
                return perk
        return None

    def replace_perk(self, perk: Perk) -> None:
        """Store ``perk`` in place of the entry sharing its specialty."""

        for index, existing in enumerate(self.perks):
            if existing.specialty == perk.specialty:
                self.perks[index] = perk
                return
        self.perks.append(perk)

    def to_dict(self) -> PersonPayload:
        return {
            "name": self.name,
            "status": self.status.value,
            "perks": {perk.specialty.value: perk.skill_level.value for perk in self.perks},
        }

    @staticmethod
    def from_dict(payload: PersonPayload | Mapping[str, object]) -> Person:
        """Deserialize a :class:`Person`, skipping unknown perks."""

        name = str(payload.get("name", ""))
        status_raw = payload.get("status", RosterStatus.AVAILABLE.value)
        perks_payload = payload.get("perks", {})
        perks: list[Perk] = []
        if isinstance(perks_payload, Mapping):
            for key, value in perks_payload.items():
                try:
                    specialty = Specialty(str(key))
                    level = SkillLevel.from_value(str(value))
                except ValueError:
                    continue
                perks.append(Perk(specialty=specialty, skill_level=level))
        return Person(name=name, status=RosterStatus.from_value(str(status_raw)), perks=perks)


@dataclass(frozen=True)
class RosterSnapshot:
    """Immutable view of the host roster and its pool memberships.

    ``crew`` is the hired pool, ``applicants`` the applicant pool and
    ``active_crew`` the names aboard the active mission.
    """

    crew: tuple[Person, ...] = ()
    applicants: tuple[Person, ...] = ()
    active_crew: frozenset[str] = frozenset()
    _crew_names: frozenset[str] = field(init=False, repr=False, compare=False)
    _applicant_names: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "crew", tuple(self.crew))
        object.__setattr__(self, "applicants", tuple(self.applicants))
        object.__setattr__(self, "active_crew", frozenset(self.active_crew))
        names = [person.name for person in self.crew] + [person.name for person in self.applicants]
        if len(names) != len(set(names)):
            raise ValueError("roster names must be unique across crew and applicants")
        object.__setattr__(self, "_crew_names", frozenset(p.name for p in self.crew))
        object.__setattr__(self, "_applicant_names", frozenset(p.name for p in self.applicants))

    @classmethod
    def build(
        cls,
        *,
        crew: Iterable[Person] = (),
        applicants: Iterable[Person] = (),
        active_crew: Iterable[str | Person] = (),
    ) -> "RosterSnapshot":
        active = frozenset(
            entry.name if isinstance(entry, Person) else str(entry) for entry in active_crew
        )
        return cls(crew=tuple(crew), applicants=tuple(applicants), active_crew=active)

    def __iter__(self) -> Iterator[Person]:
        """Iterate applicants first, then hired crew."""

        yield from self.applicants
        yield from self.crew

    def __len__(self) -> int:
        return len(self.crew) + len(self.applicants)

    def is_hired(self, person: Person) -> bool:
        return person.name in self._crew_names

    def is_applicant(self, person: Person) -> bool:
        return person.name in self._applicant_names

    def is_active_crew(self, person: Person) -> bool:
        return person.name in self.active_crew

    def find(self, name: str) -> Person | None:
        for person in self:
            if person.name == name:
                return person
        return None


__all__ = [
    "Perk",
    "Person",
    "PersonPayload",
    "RosterSnapshot",
    "RosterStatus",
    "Specialty",
]
