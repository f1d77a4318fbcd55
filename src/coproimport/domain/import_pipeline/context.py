"""Inputs and mutable working state shared by the import phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from coproimport.domain.issues import IssueLedger
from coproimport.domain.model import (
    BlockingError,
    OwnerLotLink,
    ParsedContact,
    ParsedLot,
    TabularDataset,
)
from coproimport.domain.reconciliation import OwnershipMap

from .state import ImportRun

if TYPE_CHECKING:
    from coproimport.domain.model import PropertyContext
    from coproimport.domain.reconciliation import UnitOutcome


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportDatasets:
    """The three decoded input files of one property."""

    edd: TabularDataset
    lot_ref: TabularDataset
    contacts: TabularDataset


@dataclass(slots=True, kw_only=True)
class ImportState:
    """Everything the phases read and write during one run."""

    datasets: ImportDatasets
    context: PropertyContext
    ledger: IssueLedger = field(default_factory=IssueLedger)
    run: ImportRun = field(default_factory=ImportRun)
    blocking_errors: list[BlockingError] = field(default_factory=list[BlockingError])
    lots: dict[str, ParsedLot] = field(default_factory=dict[str, ParsedLot])
    contacts: dict[str, ParsedContact] = field(default_factory=dict[str, ParsedContact])
    links: tuple[OwnerLotLink, ...] = ()
    ownership: OwnershipMap = field(default_factory=OwnershipMap)
    outcomes: tuple[UnitOutcome, ...] = ()
