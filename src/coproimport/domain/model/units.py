"""Reconciliation outputs: units grouping lots under an owner, and review cases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import (
    ContactCategory,
    LotRole,
    ReviewReason,
    ReviewStatus,
    UnitType,
)

if TYPE_CHECKING:
    from .contacts import ParsedContact
    from .enums import AddressRole, GroupType, LegalForm


@dataclass(frozen=True, slots=True)
class OwnerLotLink:
    owner_ref: str
    lot_number: str


@dataclass(frozen=True, slots=True)
class UnitLot:
    lot_number: str
    role: LotRole


@dataclass(frozen=True, slots=True)
class UnitAddress:
    label: str
    role: AddressRole


@dataclass(frozen=True, slots=True, kw_only=True)
class Unit:
    """A main lot (or a group of dependances) with its annexes, owner, address and parcels."""

    unit_type: UnitType
    main_lot_number: str
    owner_ref: str
    owner: ParsedContact | None = None
    lots: tuple[UnitLot, ...]
    addresses: tuple[UnitAddress, ...] = field(default_factory=tuple)
    cadastral_refs: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.lots:
            raise ValueError("A unit requires at least one lot")
        main_lots = [link.lot_number for link in self.lots if link.role is LotRole.MAIN]
        if self.unit_type is UnitType.DEPENDANCE:
            if len(main_lots) != len(self.lots):
                raise ValueError("Dependance units only hold lots with role 'main'")
            if self.lots[0].lot_number != self.main_lot_number:
                raise ValueError("Dependance unit main lot must be the first lot of its group")
            return
        if main_lots != [self.main_lot_number]:
            raise ValueError(
                f"Unit must hold exactly one main lot ({self.main_lot_number}), got {main_lots}"
            )

    @property
    def lot_numbers(self) -> tuple[str, ...]:
        return tuple(link.lot_number for link in self.lots)

    @property
    def annex_lot_numbers(self) -> tuple[str, ...]:
        return tuple(link.lot_number for link in self.lots if link.role is LotRole.ANNEX)


@dataclass(frozen=True, slots=True)
class LotSummary:
    lot_number: str
    lot_type_label: str


@dataclass(frozen=True, slots=True, kw_only=True)
class LotsInScope:
    main_habitation: tuple[LotSummary, ...] = ()
    main_commerce: tuple[LotSummary, ...] = ()
    dependance: tuple[LotSummary, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class SplitCandidate:
    """One unit per main-habitation lot, each carrying every dependance."""

    main_lot: str
    unit_type: UnitType = UnitType.HABITATION
    dep_lots: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class MergeCandidate:
    """A single unit anchored on the first main-habitation lot covering every lot."""

    main_lot: str
    unit_type: UnitType = UnitType.HABITATION
    all_lots: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class ReviewCase:
    """Ownership situation deferred to a human decision."""

    owner_ref: str
    owner: ParsedContact | None = None
    reason: ReviewReason = ReviewReason.MULTIPLE_HABITATION_MAIN_LOTS
    status: ReviewStatus = ReviewStatus.PENDING_REVIEW
    lots_in_scope: LotsInScope
    split: tuple[SplitCandidate, ...]
    merge: MergeCandidate

    @property
    def display_name(self) -> str:
        return self.owner.display_name if self.owner is not None else self.owner_ref

    @property
    def contact_category(self) -> ContactCategory:
        return self.owner.category if self.owner is not None else ContactCategory.PHYSICAL

    @property
    def legal_form(self) -> LegalForm | None:
        return self.owner.legal_form if self.owner is not None else None

    @property
    def group_type(self) -> GroupType | None:
        return self.owner.group_type if self.owner is not None else None

    @property
    def main_hab_lots(self) -> tuple[str, ...]:
        return tuple(lot.lot_number for lot in self.lots_in_scope.main_habitation)

    @property
    def dep_lots(self) -> tuple[str, ...]:
        return tuple(lot.lot_number for lot in self.lots_in_scope.dependance)
