"""Tagged per-owner outcomes produced by the unit builder."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from coproimport.domain.model import ReviewCase, Unit


class OutcomeKind(StrEnum):
    """What the unit builder decided for one owner."""

    BUILT = "built"
    REVIEW_REQUIRED = "review_required"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True, kw_only=True)
class BuiltUnits:
    """Owner resolved into one or more units."""

    owner_ref: str
    units: tuple[Unit, ...]
    kind: Literal[OutcomeKind.BUILT] = OutcomeKind.BUILT

    def __post_init__(self) -> None:
        if not self.units:
            raise ValueError("BuiltUnits must carry at least one unit")


@dataclass(frozen=True, slots=True, kw_only=True)
class ReviewRequired:
    """Owner holds several main-habitation lots; a human has to decide."""

    owner_ref: str
    review: ReviewCase
    kind: Literal[OutcomeKind.REVIEW_REQUIRED] = OutcomeKind.REVIEW_REQUIRED


@dataclass(frozen=True, slots=True, kw_only=True)
class Skipped:
    """Owner had no lot to build from."""

    owner_ref: str
    reason: str = "no_lots"
    kind: Literal[OutcomeKind.SKIPPED] = OutcomeKind.SKIPPED


type UnitOutcome = BuiltUnits | ReviewRequired | Skipped
