from __future__ import annotations

from dataclasses import dataclass

from coproimport.domain.import_pipeline import (
    ImportPipeline,
    ImportState,
    reconcile_property,
)
from coproimport.domain.model import RunStatus, Severity, UnitType
from tests.helpers.property_files import (
    edd_row,
    link_row,
    make_context,
    make_datasets,
    sample_property_datasets,
)


@dataclass(slots=True)
class _RecordingPhase:
    name: str
    calls: list[str]

    def run(self, state: ImportState) -> None:
        _ = state
        self.calls.append(self.name)


@dataclass(slots=True)
class _FailingPhase:
    name: str = "failing"

    def run(self, state: ImportState) -> None:
        state.run.fail()


def test_pipeline_runs_phases_in_order() -> None:
    calls: list[str] = []
    pipeline = ImportPipeline(
        phases=(_RecordingPhase("first", calls), _RecordingPhase("second", calls))
    )

    result = pipeline.run(ImportState(datasets=make_datasets(), context=make_context()))

    assert calls == ["first", "second"]
    assert result.status is RunStatus.COMPLETED


def test_pipeline_stops_once_run_is_terminal() -> None:
    calls: list[str] = []
    pipeline = ImportPipeline(phases=(_FailingPhase(),)).with_phase(
        _RecordingPhase("after", calls)
    )

    result = pipeline.run(ImportState(datasets=make_datasets(), context=make_context()))

    assert calls == []
    assert result.failed
    assert result.stats is None


def test_extend_appends_phases() -> None:
    calls: list[str] = []
    pipeline = ImportPipeline(phases=()).extend(
        [_RecordingPhase("a", calls), _RecordingPhase("b", calls)]
    )

    assert [phase.name for phase in pipeline.phases] == ["a", "b"]


def test_sample_property_reconciles_with_review() -> None:
    result = reconcile_property(sample_property_datasets(), make_context())

    assert result.status is RunStatus.COMPLETED_WITH_REVIEW_REQUIRED
    assert result.stats is not None
    assert result.stats.as_dict() == {
        "lots_processed": 9,
        "contacts_processed": 3,
        "links_processed": 8,
        "units_created": 3,
        "unit_lots_created": 5,
        "unit_owners_created": 2,
        "reviews_created": 1,
        "issues_warning": 4,
        "issues_error": 0,
    }
    assert [(issue.code, issue.entity_key) for issue in result.issues] == [
        ("unknown_lot_type_mapping", "9"),
        ("owner_link_without_lot", "99"),
        ("missing_owner_link", "8"),
        ("missing_contact_for_owner_ref", "D"),
    ]
    assert result.errors == ()


def test_sample_property_units_and_review() -> None:
    result = reconcile_property(sample_property_datasets(), make_context())

    units = {unit.owner_ref: unit for unit in result.units}
    assert set(units) == {"A", "C", "D"}
    assert units["A"].unit_type is UnitType.HABITATION
    assert units["A"].lot_numbers == ("1", "2", "3")
    assert units["A"].owner is not None
    assert units["A"].owner.display_name == "Jean Dupont"
    assert units["C"].unit_type is UnitType.COMMERCIAL
    assert units["C"].lot_numbers == ("6",)
    assert units["D"].unit_type is UnitType.DEPENDANCE
    assert units["D"].owner is None

    (review,) = result.reviews
    assert review.owner_ref == "B"
    assert [(split.main_lot, split.dep_lots) for split in review.split] == [
        ("4", ("7",)),
        ("5", ("7",)),
    ]
    assert review.merge.main_lot == "4"
    assert review.merge.all_lots == ("4", "5", "7")


def test_missing_columns_fail_before_parsing() -> None:
    datasets = make_datasets(
        edd=[edd_row("1", "Appartement")],
        links=[link_row("A", "1")],
        edd_headers=("NumLot", "TypeLot"),
        contacts_headers=("Référence", "Civilité"),
    )

    result = reconcile_property(datasets, make_context())

    assert result.failed
    assert result.stats is None
    assert result.units == ()
    assert [(error.code, error.column) for error in result.errors] == [
        ("edd_missing_required_column", "Etage"),
        ("contacts_missing_required_column", "Nom"),
    ]
    assert {issue.severity for issue in result.issues} == {Severity.ERROR}


def test_empty_files_with_headers_complete() -> None:
    result = reconcile_property(make_datasets(), make_context())

    assert result.status is RunStatus.COMPLETED
    assert result.stats is not None
    assert result.stats.lots_processed == 0
    assert result.issues == ()


def test_reconciliation_is_deterministic() -> None:
    first = reconcile_property(sample_property_datasets(), make_context())
    second = reconcile_property(sample_property_datasets(), make_context())

    assert first.units == second.units
    assert first.reviews == second.reviews
    assert first.issues == second.issues
