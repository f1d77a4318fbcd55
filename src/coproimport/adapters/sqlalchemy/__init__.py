"""SQLAlchemy adapter package for copro-import."""

from __future__ import annotations

from .mappings import create_all_tables, metadata
from .repositories import (
    SqlAlchemyContactRepository,
    SqlAlchemyDataIssueRepository,
    SqlAlchemyImportJobRepository,
    SqlAlchemyLotRepository,
    SqlAlchemyPropertyRepository,
    SqlAlchemyReviewRepository,
    SqlAlchemyUnitRepository,
)
from .unit_of_work import SqlAlchemyImportUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "SqlAlchemyContactRepository",
    "SqlAlchemyDataIssueRepository",
    "SqlAlchemyImportJobRepository",
    "SqlAlchemyImportUnitOfWork",
    "SqlAlchemyLotRepository",
    "SqlAlchemyPropertyRepository",
    "SqlAlchemyReviewRepository",
    "SqlAlchemyUnitRepository",
    "StartupError",
    "create_all_tables",
    "metadata",
    "shutdown",
    "startup",
]
