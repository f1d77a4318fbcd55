"""Correlate the owner/lot reference extract with parsed lots and contacts."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING

from coproimport.domain.issues import warn

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from coproimport.domain.issues import IssueSink
    from coproimport.domain.model import OwnerLotLink, ParsedContact, ParsedLot

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OwnershipMap(Mapping[str, tuple[str, ...]]):
    """Immutable owner_ref -> lot numbers view, owners in first-encounter order.

    Lot tuples keep every retained link, duplicates included, in input order.
    """

    _lots_by_owner: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    links_retained: int = 0

    def __getitem__(self, owner_ref: str) -> tuple[str, ...]:
        return self._lots_by_owner[owner_ref]

    def __iter__(self) -> Iterator[str]:
        return iter(self._lots_by_owner)

    def __len__(self) -> int:
        return len(self._lots_by_owner)

    @property
    def owner_refs(self) -> tuple[str, ...]:
        return tuple(self._lots_by_owner)

    def linked_lot_numbers(self) -> frozenset[str]:
        return frozenset(lot for lots in self._lots_by_owner.values() for lot in lots)


@dataclass(slots=True)
class OwnershipMapBuilder:
    """Accumulates retained links; ``build`` freezes them once."""

    _lots_by_owner: dict[str, list[str]] = field(default_factory=dict[str, list[str]])
    _count: int = 0

    def add(self, owner_ref: str, lot_number: str) -> None:
        self._lots_by_owner.setdefault(owner_ref, []).append(lot_number)
        self._count += 1

    def build(self) -> OwnershipMap:
        frozen = {owner: tuple(lots) for owner, lots in self._lots_by_owner.items()}
        return OwnershipMap(MappingProxyType(frozen), links_retained=self._count)


@dataclass(slots=True)
class OwnershipLinker:
    """Build the ownership map and flag dangling references in both directions.

    The three checks are independent and never fatal:

    * a link whose lot is unknown is dropped (``owner_link_without_lot``)
    * a lot nobody references is reported (``missing_owner_link``)
    * an owner without a contact row is reported (``missing_contact_for_owner_ref``)
    """

    sink: IssueSink

    def link(
        self,
        links: Iterable[OwnerLotLink],
        *,
        lots: Mapping[str, ParsedLot],
        contacts: Mapping[str, ParsedContact],
    ) -> OwnershipMap:
        builder = OwnershipMapBuilder()
        for link in links:
            if link.lot_number not in lots:
                warn(
                    self.sink,
                    "owner_link_without_lot",
                    entity_type="lot_ref",
                    entity_key=link.lot_number,
                    message=(
                        f'Owner "{link.owner_ref}" references lot "{link.lot_number}" '
                        "which is not in the EDD"
                    ),
                    payload={"owner_ref": link.owner_ref, "lot_number": link.lot_number},
                )
                continue
            builder.add(link.owner_ref, link.lot_number)
        ownership = builder.build()

        linked = ownership.linked_lot_numbers()
        for lot_number in lots:
            if lot_number not in linked:
                warn(
                    self.sink,
                    "missing_owner_link",
                    entity_type="lot",
                    entity_key=lot_number,
                    message=f'Lot "{lot_number}" has no owner in lot_ref',
                    payload={"lot_number": lot_number},
                )

        for owner_ref in ownership:
            if owner_ref not in contacts:
                warn(
                    self.sink,
                    "missing_contact_for_owner_ref",
                    entity_type="contact",
                    entity_key=owner_ref,
                    message=f'Owner "{owner_ref}" has lots but no contact row',
                    payload={"owner_ref": owner_ref},
                )

        log.debug(
            "Linked %s owners over %s retained links",
            len(ownership),
            ownership.links_retained,
        )
        return ownership
