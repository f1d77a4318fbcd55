"""Public domain model surface."""

from __future__ import annotations

from coproimport.domain.model.contacts import ParsedContact
from coproimport.domain.model.datasets import Row, TabularDataset
from coproimport.domain.model.enums import (
    AddressRole,
    ContactCategory,
    GroupType,
    LegalForm,
    LotFamily,
    LotRole,
    ReviewReason,
    ReviewStatus,
    RunStatus,
    Severity,
    UnitType,
)
from coproimport.domain.model.issues import BlockingError, DataIssue
from coproimport.domain.model.lots import EMPTY_TANTIEME, Exterior, ParsedLot, Tantieme
from coproimport.domain.model.property import PropertyAddress, PropertyContext
from coproimport.domain.model.units import (
    LotsInScope,
    LotSummary,
    MergeCandidate,
    OwnerLotLink,
    ReviewCase,
    SplitCandidate,
    Unit,
    UnitAddress,
    UnitLot,
)

__all__ = [  # noqa: RUF022
    # lots
    "EMPTY_TANTIEME",
    "Exterior",
    "ParsedLot",
    "Tantieme",
    # contacts
    "ParsedContact",
    # property
    "PropertyAddress",
    "PropertyContext",
    # units
    "LotSummary",
    "LotsInScope",
    "MergeCandidate",
    "OwnerLotLink",
    "ReviewCase",
    "SplitCandidate",
    "Unit",
    "UnitAddress",
    "UnitLot",
    # datasets
    "Row",
    "TabularDataset",
    # issues
    "BlockingError",
    "DataIssue",
    # enums
    "AddressRole",
    "ContactCategory",
    "GroupType",
    "LegalForm",
    "LotFamily",
    "LotRole",
    "ReviewReason",
    "ReviewStatus",
    "RunStatus",
    "Severity",
    "UnitType",
]
