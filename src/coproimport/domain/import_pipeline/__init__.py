"""Import pipeline: header validation, parsing, linking and unit building.

Each phase reads and writes a shared ``ImportState``; the orchestrator stops
running phases once the run reaches a terminal status (a missing required
column) and turns the state into a ``ReconciliationResult``.
"""

from __future__ import annotations

from .context import ImportDatasets, ImportState
from .orchestrator import ImportPhase, ImportPipeline, default_phases, reconcile_property
from .persist import PersistenceReport, persist_reconciliation
from .phases import (
    ContactParsingPhase,
    HeaderValidationPhase,
    LinkingPhase,
    LotParsingPhase,
    UnitBuildingPhase,
)
from .result import ImportStats, ReconciliationResult
from .state import ImportRun

__all__ = [
    "ContactParsingPhase",
    "HeaderValidationPhase",
    "ImportDatasets",
    "ImportPhase",
    "ImportPipeline",
    "ImportRun",
    "ImportState",
    "ImportStats",
    "LinkingPhase",
    "LotParsingPhase",
    "PersistenceReport",
    "ReconciliationResult",
    "UnitBuildingPhase",
    "default_phases",
    "persist_reconciliation",
    "reconcile_property",
]
