"""Toggle-driven filtering of the crew roster."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

import polars as pl
from polars._typing import PolarsDataType

from .models import Person, RosterSnapshot, RosterStatus

RosterFilter = Callable[[Person], bool]

_ROSTER_FRAME_SCHEMA: dict[str, PolarsDataType] = {
    "name": pl.String,
    "status": pl.String,
    "hired": pl.Boolean,
    "applicant": pl.Boolean,
    "active": pl.Boolean,
}


@dataclass(frozen=True)
class FilterConfig:
    """Which groups of personnel the roster list shows."""

    show_active_crew: bool = False
    show_assigned: bool = False
    show_available: bool = False
    show_applicants: bool = False

    @classmethod
    def defaults(cls, in_flight: bool) -> "FilterConfig":
        """Initial toggles: the active crew in flight, the hired roster otherwise."""

        return cls(
            show_active_crew=in_flight,
            show_assigned=not in_flight,
            show_available=not in_flight,
            show_applicants=False,
        )

    def with_toggle(self, name: str, value: bool) -> "FilterConfig":
        if name not in self.__dataclass_fields__:
            raise KeyError(name)
        return replace(self, **{name: bool(value)})

    @property
    def any_enabled(self) -> bool:
        return (
            self.show_active_crew
            or self.show_assigned
            or self.show_available
            or self.show_applicants
        )


def build_filter(config: FilterConfig, roster: RosterSnapshot, *, in_flight: bool) -> RosterFilter:
    """Return a predicate selecting the people visible under ``config``.

    A person is visible when any enabled clause matches. The active crew
    clause only applies in flight. The predicate captures the frozen
    ``config`` and ``roster`` and nothing else.
    """

    show_crew = config.show_active_crew and in_flight
    show_assigned = config.show_assigned
    show_available = config.show_available
    show_applicants = config.show_applicants

    def _visible(person: Person) -> bool:
        return (
            (show_crew and roster.is_active_crew(person))
            or (show_assigned and person.status is RosterStatus.ASSIGNED)
            or (
                show_available
                and roster.is_hired(person)
                and person.status is RosterStatus.AVAILABLE
            )
            or (show_applicants and roster.is_applicant(person))
        )

    return _visible


def visible_persons(
    config: FilterConfig, roster: RosterSnapshot, *, in_flight: bool
) -> list[Person]:
    """List visible people, applicants first, preserving roster order."""

    predicate = build_filter(config, roster, in_flight=in_flight)
    return [person for person in roster if predicate(person)]


# ----------------------------------------------------------------------
def roster_frame(roster: RosterSnapshot) -> pl.DataFrame:
    """Tabulate the roster with one membership flag column per pool."""

    rows = [
        {
            "name": person.name,
            "status": person.status.value,
            "hired": roster.is_hired(person),
            "applicant": roster.is_applicant(person),
            "active": roster.is_active_crew(person),
        }
        for person in roster
    ]
    if not rows:
        return pl.DataFrame(schema=_ROSTER_FRAME_SCHEMA)
    return pl.DataFrame(rows, schema=_ROSTER_FRAME_SCHEMA)


def filter_expression(config: FilterConfig, *, in_flight: bool) -> pl.Expr:
    """Columnar counterpart of :func:`build_filter` over :func:`roster_frame`."""

    clauses: list[pl.Expr] = []
    if config.show_active_crew and in_flight:
        clauses.append(pl.col("active"))
    if config.show_assigned:
        clauses.append(pl.col("status") == RosterStatus.ASSIGNED.value)
    if config.show_available:
        clauses.append(pl.col("hired") & (pl.col("status") == RosterStatus.AVAILABLE.value))
    if config.show_applicants:
        clauses.append(pl.col("applicant"))
    if not clauses:
        return pl.lit(False)
    return pl.any_horizontal(clauses)


def visible_frame(config: FilterConfig, roster: RosterSnapshot, *, in_flight: bool) -> pl.DataFrame:
    return roster_frame(roster).filter(filter_expression(config, in_flight=in_flight))


__all__ = [
    "FilterConfig",
    "RosterFilter",
    "build_filter",
    "filter_expression",
    "roster_frame",
    "visible_frame",
    "visible_persons",
]
