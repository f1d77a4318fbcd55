"""Result value returned by one reconciliation run."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from coproimport.domain.model import RunStatus

if TYPE_CHECKING:
    from coproimport.domain.model import (
        BlockingError,
        DataIssue,
        ParsedContact,
        ParsedLot,
        ReviewCase,
        Unit,
    )
    from coproimport.domain.reconciliation import OwnershipMap


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportStats:
    lots_processed: int = 0
    contacts_processed: int = 0
    links_processed: int = 0
    units_created: int = 0
    unit_lots_created: int = 0
    unit_owners_created: int = 0
    reviews_created: int = 0
    issues_warning: int = 0
    issues_error: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationResult:
    """Terminal status plus everything the run produced.

    ``stats`` is ``None`` for failed runs; ``errors`` is non-empty only then.
    """

    status: RunStatus
    stats: ImportStats | None
    lots: tuple[ParsedLot, ...] = ()
    contacts: tuple[ParsedContact, ...] = ()
    ownership: OwnershipMap | None = None
    units: tuple[Unit, ...] = ()
    reviews: tuple[ReviewCase, ...] = ()
    issues: tuple[DataIssue, ...] = ()
    errors: tuple[BlockingError, ...] = ()

    @property
    def failed(self) -> bool:
        return self.status is RunStatus.FAILED
