"""Ownership linking and unit construction over parsed lots and contacts."""

from __future__ import annotations

from .linking import OwnershipLinker, OwnershipMap, OwnershipMapBuilder
from .outcomes import BuiltUnits, OutcomeKind, ReviewRequired, Skipped, UnitOutcome
from .units import OwnerLots, UnitBuilder

__all__ = [
    "BuiltUnits",
    "OutcomeKind",
    "OwnerLots",
    "OwnershipLinker",
    "OwnershipMap",
    "OwnershipMapBuilder",
    "ReviewRequired",
    "Skipped",
    "UnitBuilder",
    "UnitOutcome",
]
