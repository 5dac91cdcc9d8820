"""Crew roster filtering and perk training for the Dang It! crew window."""

from __future__ import annotations

__version__ = "0.3.0"

__all__ = ["__version__"]
