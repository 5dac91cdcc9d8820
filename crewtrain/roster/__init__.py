"""Roster models, filtering, and selection state."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - imported only for type checkers
    from .filters import (
        FilterConfig,
        RosterFilter,
        build_filter,
        filter_expression,
        roster_frame,
        visible_frame,
        visible_persons,
    )
    from .models import Perk, Person, PersonPayload, RosterSnapshot, RosterStatus, Specialty
    from .selection import RosterBrowser

__all__ = [
    "FilterConfig",
    "Perk",
    "Person",
    "PersonPayload",
    "RosterBrowser",
    "RosterFilter",
    "RosterSnapshot",
    "RosterStatus",
    "Specialty",
    "build_filter",
    "filter_expression",
    "roster_frame",
    "visible_frame",
    "visible_persons",
]

_EXPORTS = {
    "FilterConfig": "crewtrain.roster.filters",
    "RosterFilter": "crewtrain.roster.filters",
    "build_filter": "crewtrain.roster.filters",
    "filter_expression": "crewtrain.roster.filters",
    "roster_frame": "crewtrain.roster.filters",
    "visible_frame": "crewtrain.roster.filters",
    "visible_persons": "crewtrain.roster.filters",
    "Perk": "crewtrain.roster.models",
    "Person": "crewtrain.roster.models",
    "PersonPayload": "crewtrain.roster.models",
    "RosterSnapshot": "crewtrain.roster.models",
    "RosterStatus": "crewtrain.roster.models",
    "Specialty": "crewtrain.roster.models",
    "RosterBrowser": "crewtrain.roster.selection",
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
