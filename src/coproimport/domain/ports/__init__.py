"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import BlobStore, SpreadsheetDecoder
from .persistence import (
    ContactRepository,
    DataIssueRepository,
    ImportJobRepository,
    LotRepository,
    PropertyRepository,
    ReviewRepository,
    UnitRepository,
    Upserted,
)
from .unit_of_work import (
    ImportRepositories,
    ImportUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "BlobStore",
    "ContactRepository",
    "DataIssueRepository",
    "ImportJobRepository",
    "ImportRepositories",
    "ImportUnitOfWork",
    "LotRepository",
    "PropertyRepository",
    "RepositoryCollection",
    "ReviewRepository",
    "SpreadsheetDecoder",
    "UnitOfWork",
    "UnitRepository",
    "Upserted",
]
