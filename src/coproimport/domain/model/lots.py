"""Lot records parsed from the EDD registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

    from .enums import LotFamily


@dataclass(frozen=True, slots=True)
class Tantieme:
    """Ownership-share fraction; either side may be unknown."""

    num: int | None = None
    den: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.num is None and self.den is None


EMPTY_TANTIEME = Tantieme()


@dataclass(frozen=True, slots=True)
class Exterior:
    type: str
    surface_m2: float | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ParsedLot:
    """One row of the lot registry, keyed by ``lot_number`` within a property."""

    lot_number: str
    floor_label: str
    lot_type_label: str
    lot_family: LotFamily
    surface_m2: float | None = None
    exteriors: tuple[Exterior, ...] | None = None
    tantiemes_general: Tantieme = EMPTY_TANTIEME
    tantiemes_elevators: Tantieme = EMPTY_TANTIEME
    tantiemes_stairs: Tantieme = EMPTY_TANTIEME
    tantiemes_heating: Tantieme = EMPTY_TANTIEME
    observations: str | None = None
    acquired_at: date | None = None
    building: str | None = None
    staircase: str | None = None
    nb_rooms: str | None = None
    door_number: str | None = None
    annex_lot: str | None = None
    works_fund_amount: float | None = None

    @property
    def normalized_type_label(self) -> str:
        return self.lot_type_label.lower().strip()
