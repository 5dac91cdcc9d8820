"""Selection state behind the crew management window."""

from __future__ import annotations

from dataclasses import replace

from .filters import FilterConfig, visible_persons
from .models import Perk, Person, RosterSnapshot


class RosterBrowser:
    """Tracks filter toggles and the selected person and perk between frames.

    The browser holds no reference to the roster itself; each query takes
    the current :class:`RosterSnapshot` so the host can refresh it freely.
    """

    def __init__(self, *, in_flight: bool, filters: FilterConfig | None = None) -> None:
        self.in_flight = in_flight
        self.filters = self._sanitize(filters if filters is not None else FilterConfig.defaults(in_flight))
        self.previous_filters = self.filters
        self.person_index = 0
        self.perk_index = 0

    @property
    def filters_changed(self) -> bool:
        return self.filters != self.previous_filters

    def update_filters(self, filters: FilterConfig) -> bool:
        """Apply the toggles for this frame; return ``True`` when they changed."""

        self.previous_filters = self.filters
        self.filters = self._sanitize(filters)
        if self.filters_changed:
            self.person_index = 0
            return True
        return False

    def toggle(self, name: str, value: bool) -> bool:
        return self.update_filters(self.filters.with_toggle(name, value))

    def select(self, index: int) -> None:
        if index < 0:
            raise ValueError("index must be non-negative")
        if index != self.person_index:
            self.perk_index = 0
        self.person_index = index

    def select_perk(self, index: int) -> None:
        if index < 0:
            raise ValueError("index must be non-negative")
        self.perk_index = index

    def visible(self, roster: RosterSnapshot) -> list[Person]:
        return visible_persons(self.filters, roster, in_flight=self.in_flight)

    def selected_person(self, roster: RosterSnapshot) -> Person | None:
        """Return the highlighted person, or ``None`` when nobody matches."""

        people = self.visible(roster)
        if not people:
            return None
        if self.person_index >= len(people):
            self.person_index = 0
        return people[self.person_index]

    def selected_perk(self, person: Person) -> Perk | None:
        if not person.perks:
            return None
        if self.perk_index >= len(person.perks):
            self.perk_index = 0
        return person.perks[self.perk_index]

    def _sanitize(self, filters: FilterConfig) -> FilterConfig:
        # The active crew toggle is hidden outside flight.
        if not self.in_flight and filters.show_active_crew:
            return replace(filters, show_active_crew=False)
        return filters


__all__ = ["RosterBrowser"]
