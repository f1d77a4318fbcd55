"""Concrete phases of the import pipeline, in execution order."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from coproimport.domain.parsing import (
    CONTACTS_SPEC,
    EDD_SPEC,
    LOT_REF_SPEC,
    parse_contact_rows,
    parse_lot_rows,
    parse_owner_links,
    validate_required_headers,
)
from coproimport.domain.reconciliation import OwnershipLinker, UnitBuilder

if TYPE_CHECKING:
    from .context import ImportState

log = getLogger(__name__)


@dataclass(slots=True)
class HeaderValidationPhase:
    """Check every required header of every dataset; any miss fails the run."""

    name: str = "header_validation"

    def run(self, state: ImportState) -> None:
        checks = (
            (state.datasets.edd, EDD_SPEC),
            (state.datasets.lot_ref, LOT_REF_SPEC),
            (state.datasets.contacts, CONTACTS_SPEC),
        )
        for dataset, spec in checks:
            state.blocking_errors.extend(
                validate_required_headers(dataset, spec, sink=state.ledger)
            )
        if state.blocking_errors:
            log.info("Missing required columns: %s", len(state.blocking_errors))
            state.run.fail()


@dataclass(slots=True)
class LotParsingPhase:
    name: str = "lots"

    def run(self, state: ImportState) -> None:
        state.lots = parse_lot_rows(state.datasets.edd, sink=state.ledger)


@dataclass(slots=True)
class ContactParsingPhase:
    name: str = "contacts"

    def run(self, state: ImportState) -> None:
        state.contacts = parse_contact_rows(state.datasets.contacts, sink=state.ledger)


@dataclass(slots=True)
class LinkingPhase:
    name: str = "links"

    def run(self, state: ImportState) -> None:
        state.links = parse_owner_links(state.datasets.lot_ref, sink=state.ledger)
        state.ownership = OwnershipLinker(state.ledger).link(
            state.links, lots=state.lots, contacts=state.contacts
        )


@dataclass(slots=True)
class UnitBuildingPhase:
    name: str = "units"

    def run(self, state: ImportState) -> None:
        builder = UnitBuilder(context=state.context, sink=state.ledger)
        state.outcomes = builder.build_all(
            state.ownership, lots=state.lots, contacts=state.contacts
        )
