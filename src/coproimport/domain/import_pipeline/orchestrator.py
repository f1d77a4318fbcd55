"""Phase-based orchestrator for the property import core."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from coproimport.domain.model import Severity
from coproimport.domain.reconciliation import BuiltUnits, ReviewRequired

from .context import ImportDatasets, ImportState
from .phases import (
    ContactParsingPhase,
    HeaderValidationPhase,
    LinkingPhase,
    LotParsingPhase,
    UnitBuildingPhase,
)
from .result import ImportStats, ReconciliationResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from coproimport.domain.model import PropertyContext

log = getLogger(__name__)


class ImportPhase(Protocol):
    """Contract implemented by each import phase."""

    name: str

    def run(self, state: ImportState) -> None: ...


def default_phases() -> tuple[ImportPhase, ...]:
    return (
        HeaderValidationPhase(),
        LotParsingPhase(),
        ContactParsingPhase(),
        LinkingPhase(),
        UnitBuildingPhase(),
    )


@dataclass(slots=True)
class ImportPipeline:
    """Run the ordered phases, stopping as soon as one moves the run to a terminal state."""

    phases: Sequence[ImportPhase] = field(default_factory=default_phases)

    def with_phase(self, phase: ImportPhase) -> ImportPipeline:
        """Return a new pipeline appending ``phase`` at the end."""

        return ImportPipeline(phases=(*self.phases, phase))

    def extend(self, phases: Iterable[ImportPhase]) -> ImportPipeline:
        return ImportPipeline(phases=(*self.phases, *tuple(phases)))

    def run(self, state: ImportState) -> ReconciliationResult:
        for phase in self.phases:
            if state.run.is_terminal:
                log.debug("Skipping phase %s, run is %s", phase.name, state.run.status)
                continue
            phase.run(state)

        if state.run.is_terminal:
            return _failed_result(state)

        units = tuple(
            unit
            for outcome in state.outcomes
            if isinstance(outcome, BuiltUnits)
            for unit in outcome.units
        )
        reviews = tuple(
            outcome.review for outcome in state.outcomes if isinstance(outcome, ReviewRequired)
        )
        state.run.complete(reviews=len(reviews))

        stats = ImportStats(
            lots_processed=len(state.lots),
            contacts_processed=len(state.contacts),
            links_processed=state.ownership.links_retained,
            units_created=len(units),
            unit_lots_created=sum(len(unit.lots) for unit in units),
            unit_owners_created=sum(1 for unit in units if unit.owner is not None),
            reviews_created=len(reviews),
            issues_warning=state.ledger.count(Severity.WARNING),
            issues_error=state.ledger.count(Severity.ERROR),
        )
        log.info(
            "Property %s reconciled: %s lots, %s contacts, %s units, %s reviews, %s warnings",
            state.context.property_id,
            stats.lots_processed,
            stats.contacts_processed,
            stats.units_created,
            stats.reviews_created,
            stats.issues_warning,
        )
        return ReconciliationResult(
            status=state.run.status,
            stats=stats,
            lots=tuple(state.lots.values()),
            contacts=tuple(state.contacts.values()),
            ownership=state.ownership,
            units=units,
            reviews=reviews,
            issues=state.ledger.issues,
        )


def _failed_result(state: ImportState) -> ReconciliationResult:
    log.info(
        "Property %s import failed with %s blocking errors",
        state.context.property_id,
        len(state.blocking_errors),
    )
    return ReconciliationResult(
        status=state.run.status,
        stats=None,
        issues=state.ledger.issues,
        errors=tuple(state.blocking_errors),
    )


def reconcile_property(
    datasets: ImportDatasets,
    context: PropertyContext,
    *,
    pipeline: ImportPipeline | None = None,
) -> ReconciliationResult:
    """Run the default import pipeline over the three decoded datasets."""

    state = ImportState(datasets=datasets, context=context)
    return (pipeline or ImportPipeline()).run(state)
