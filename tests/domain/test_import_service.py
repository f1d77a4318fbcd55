from __future__ import annotations

from typing import TYPE_CHECKING

from coproimport.adapters.spreadsheet import OpenpyxlDecoder
from coproimport.domain.data_integration import (
    INTERNAL_ERROR,
    ImportFilePaths,
    ImportPropertyFiles,
    load_datasets,
)
from coproimport.domain.model import RunStatus
from tests.helpers.property_files import (
    FakeBlobStore,
    dataset_workbook,
    make_context,
    make_datasets,
    sample_blob_store,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from coproimport.adapters.sqlalchemy.unit_of_work import SqlAlchemyImportUnitOfWork

PATHS = ImportFilePaths(
    edd="tenant-1/edd.xlsx",
    lot_ref="tenant-1/lot_ref.xlsx",
    contacts="tenant-1/contacts.xlsx",
)


def test_load_datasets_decodes_each_file() -> None:
    store = sample_blob_store()

    datasets = load_datasets(PATHS, blob_store=store, decoder=OpenpyxlDecoder())

    assert store.fetched == [PATHS.edd, PATHS.lot_ref, PATHS.contacts]
    assert len(datasets.edd) == 9
    assert datasets.lot_ref.headers == ("Référence", "N° lot")
    assert datasets.contacts.rows[0]["Nom"] == "Dupont"


def test_import_persists_and_finishes_job(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
) -> None:
    service = ImportPropertyFiles(
        blob_store=sample_blob_store(),
        decoder=OpenpyxlDecoder(),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    outcome = service(make_context(), PATHS)

    assert outcome.job_id is not None
    assert outcome.status is RunStatus.COMPLETED_WITH_REVIEW_REQUIRED
    assert set(outcome.review_ids) == {"B"}
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.jobs.status_of(outcome.job_id) is outcome.status
        issues = uow.repositories.issues.list_for_job(outcome.job_id)
    assert [issue.code for issue in issues] == [
        "unknown_lot_type_mapping",
        "owner_link_without_lot",
        "missing_owner_link",
        "missing_contact_for_owner_ref",
    ]


def test_missing_columns_fail_the_job_with_issues(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
) -> None:
    datasets = make_datasets(edd_headers=("NumLot",))
    store = FakeBlobStore(
        {
            PATHS.edd: dataset_workbook(datasets.edd),
            PATHS.lot_ref: dataset_workbook(datasets.lot_ref),
            PATHS.contacts: dataset_workbook(datasets.contacts),
        }
    )
    service = ImportPropertyFiles(
        blob_store=store,
        decoder=OpenpyxlDecoder(),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    outcome = service(make_context(), PATHS)

    assert outcome.status is RunStatus.FAILED
    assert [error.column for error in outcome.result.errors] == ["Etage", "TypeLot"]
    assert outcome.job_id is not None
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.jobs.status_of(outcome.job_id) is RunStatus.FAILED
        assert len(uow.repositories.issues.list_for_job(outcome.job_id)) == 2


def test_unreadable_file_reports_internal_error(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportUnitOfWork],
) -> None:
    service = ImportPropertyFiles(
        blob_store=FakeBlobStore(),
        decoder=OpenpyxlDecoder(),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    outcome = service(make_context(), PATHS)

    assert outcome.status is RunStatus.FAILED
    assert outcome.result.errors == (INTERNAL_ERROR,)
    assert outcome.job_id is not None
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.jobs.status_of(outcome.job_id) is RunStatus.FAILED


def test_failure_before_job_creation_has_no_job_id() -> None:
    def broken_factory() -> SqlAlchemyImportUnitOfWork:
        raise RuntimeError("database unavailable")

    service = ImportPropertyFiles(
        blob_store=sample_blob_store(),
        decoder=OpenpyxlDecoder(),
        unit_of_work_factory=broken_factory,
    )

    outcome = service(make_context(), PATHS)

    assert outcome.job_id is None
    assert outcome.result.errors == (INTERNAL_ERROR,)
