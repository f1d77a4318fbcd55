"""Per-owner unit construction.

The builder never guesses: an owner holding several main-habitation lots gets a
review case carrying split and merge proposals instead of units.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from coproimport.domain.issues import warn
from coproimport.domain.model import (
    AddressRole,
    LotFamily,
    LotRole,
    LotsInScope,
    LotSummary,
    MergeCandidate,
    ReviewCase,
    ReviewReason,
    SplitCandidate,
    Unit,
    UnitAddress,
    UnitLot,
    UnitType,
)

from .outcomes import BuiltUnits, ReviewRequired, Skipped

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from coproimport.domain.issues import IssueSink
    from coproimport.domain.model import ParsedContact, ParsedLot, PropertyContext

    from .linking import OwnershipMap
    from .outcomes import UnitOutcome

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OwnerLots:
    """An owner's distinct lots partitioned by family, each in link order.

    ``repeated`` holds one lot number per dropped copy of an already seen link.
    """

    main_habitation: tuple[ParsedLot, ...]
    main_commerce: tuple[ParsedLot, ...]
    dependance: tuple[ParsedLot, ...]
    ordered: tuple[ParsedLot, ...]
    repeated: tuple[str, ...] = ()

    @classmethod
    def partition(
        cls,
        lot_numbers: Iterable[str],
        lots: Mapping[str, ParsedLot],
    ) -> OwnerLots:
        seen: dict[str, ParsedLot] = {}
        repeated: list[str] = []
        for lot_number in lot_numbers:
            if lot_number not in lots:
                continue
            if lot_number in seen:
                repeated.append(lot_number)
                continue
            seen[lot_number] = lots[lot_number]
        ordered = tuple(seen.values())
        return cls(
            main_habitation=_of_family(ordered, LotFamily.MAIN_HABITATION),
            main_commerce=_of_family(ordered, LotFamily.MAIN_COMMERCE),
            dependance=_of_family(ordered, LotFamily.DEPENDANCE),
            ordered=ordered,
            repeated=tuple(repeated),
        )


def _of_family(lots: Sequence[ParsedLot], family: LotFamily) -> tuple[ParsedLot, ...]:
    return tuple(lot for lot in lots if lot.lot_family is family)


def _numbers(lots: Iterable[ParsedLot]) -> tuple[str, ...]:
    return tuple(lot.lot_number for lot in lots)


def _summaries(lots: Iterable[ParsedLot]) -> tuple[LotSummary, ...]:
    return tuple(
        LotSummary(lot_number=lot.lot_number, lot_type_label=lot.lot_type_label) for lot in lots
    )


@dataclass(slots=True)
class UnitBuilder:
    """Decide, for each owner independently, which units (or review) to produce."""

    context: PropertyContext
    sink: IssueSink

    def build_all(
        self,
        ownership: OwnershipMap,
        *,
        lots: Mapping[str, ParsedLot],
        contacts: Mapping[str, ParsedContact],
    ) -> tuple[UnitOutcome, ...]:
        return tuple(
            self.build(owner_ref, ownership[owner_ref], lots=lots, owner=contacts.get(owner_ref))
            for owner_ref in ownership
        )

    def build(
        self,
        owner_ref: str,
        lot_numbers: Iterable[str],
        *,
        lots: Mapping[str, ParsedLot],
        owner: ParsedContact | None = None,
    ) -> UnitOutcome:
        partition = OwnerLots.partition(lot_numbers, lots)
        for lot_number in partition.repeated:
            warn(
                self.sink,
                "owner_link_duplicate",
                entity_type="lot_ref",
                entity_key=lot_number,
                message=f'Owner "{owner_ref}" is linked to lot "{lot_number}" more than once',
                payload={"owner_ref": owner_ref, "lot_number": lot_number},
            )

        if len(partition.main_habitation) >= 2:
            log.debug(
                "Owner %s holds %s main-habitation lots, review required",
                owner_ref,
                len(partition.main_habitation),
            )
            return ReviewRequired(
                owner_ref=owner_ref,
                review=self._review_case(owner_ref, partition, owner),
            )

        if partition.main_habitation or partition.main_commerce:
            return BuiltUnits(
                owner_ref=owner_ref,
                units=(self._main_unit(owner_ref, partition, owner),),
            )

        if partition.dependance:
            return BuiltUnits(
                owner_ref=owner_ref,
                units=self._dependance_units(owner_ref, partition.dependance, owner),
            )

        return Skipped(owner_ref=owner_ref)

    def _review_case(
        self,
        owner_ref: str,
        partition: OwnerLots,
        owner: ParsedContact | None,
    ) -> ReviewCase:
        dep_lots = _numbers(partition.dependance)
        return ReviewCase(
            owner_ref=owner_ref,
            owner=owner,
            reason=ReviewReason.MULTIPLE_HABITATION_MAIN_LOTS,
            lots_in_scope=LotsInScope(
                main_habitation=_summaries(partition.main_habitation),
                main_commerce=_summaries(partition.main_commerce),
                dependance=_summaries(partition.dependance),
            ),
            split=tuple(
                SplitCandidate(main_lot=lot.lot_number, dep_lots=dep_lots)
                for lot in partition.main_habitation
            ),
            merge=MergeCandidate(
                main_lot=partition.main_habitation[0].lot_number,
                all_lots=_numbers(partition.ordered),
            ),
        )

    def _main_unit(
        self,
        owner_ref: str,
        partition: OwnerLots,
        owner: ParsedContact | None,
    ) -> Unit:
        if partition.main_habitation:
            main_lot = partition.main_habitation[0]
            unit_type = UnitType.HABITATION
            left_out = partition.main_commerce
        else:
            main_lot = partition.main_commerce[0]
            unit_type = UnitType.COMMERCIAL
            left_out = partition.main_commerce[1:]

        if left_out:
            warn(
                self.sink,
                "main_commerce_lots_not_attached",
                entity_type="owner",
                entity_key=owner_ref,
                message=(
                    f'Owner "{owner_ref}": commerce lots {", ".join(_numbers(left_out))} '
                    f'not attached to unit of main lot "{main_lot.lot_number}"'
                ),
                payload={
                    "owner_ref": owner_ref,
                    "main_lot_number": main_lot.lot_number,
                    "lot_numbers": list(_numbers(left_out)),
                },
            )

        unit_lots = (
            UnitLot(lot_number=main_lot.lot_number, role=LotRole.MAIN),
            *(UnitLot(lot_number=lot.lot_number, role=LotRole.ANNEX) for lot in partition.dependance),
        )
        return self._unit(unit_type, main_lot.lot_number, owner_ref, owner, unit_lots)

    def _dependance_units(
        self,
        owner_ref: str,
        dependances: Sequence[ParsedLot],
        owner: ParsedContact | None,
    ) -> tuple[Unit, ...]:
        groups: dict[str, list[ParsedLot]] = {}
        for lot in dependances:
            groups.setdefault(lot.normalized_type_label, []).append(lot)

        return tuple(
            self._unit(
                UnitType.DEPENDANCE,
                group[0].lot_number,
                owner_ref,
                owner,
                tuple(UnitLot(lot_number=lot.lot_number, role=LotRole.MAIN) for lot in group),
            )
            for group in groups.values()
        )

    def _unit(
        self,
        unit_type: UnitType,
        main_lot_number: str,
        owner_ref: str,
        owner: ParsedContact | None,
        unit_lots: tuple[UnitLot, ...],
    ) -> Unit:
        primary = self.context.primary_address
        addresses = (
            (UnitAddress(label=primary.label, role=AddressRole.MAIN),) if primary is not None else ()
        )
        return Unit(
            unit_type=unit_type,
            main_lot_number=main_lot_number,
            owner_ref=owner_ref,
            owner=owner,
            lots=unit_lots,
            addresses=addresses,
            cadastral_refs=self.context.cadastral_refs,
        )
