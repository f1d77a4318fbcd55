"""Application service running one property import job end to end."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from coproimport.domain.import_pipeline import (
    ImportDatasets,
    ImportPipeline,
    ReconciliationResult,
    persist_reconciliation,
    reconcile_property,
)
from coproimport.domain.model import BlockingError, RunStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from coproimport.domain.model import PropertyContext
    from coproimport.domain.ports import BlobStore, ImportUnitOfWork, SpreadsheetDecoder

log = getLogger(__name__)

INTERNAL_ERROR = BlockingError(
    code="internal_error",
    message="An internal error occurred during import",
    entity="system",
)


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportFilePaths:
    """Blob store paths of the three input files."""

    edd: str
    lot_ref: str
    contacts: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportJobResult:
    """Outcome of one job: its id, the reconciliation result and stored review ids."""

    job_id: int | None
    result: ReconciliationResult
    review_ids: Mapping[str, int] = field(default_factory=dict[str, int])

    @property
    def status(self) -> RunStatus:
        return self.result.status


def load_datasets(
    paths: ImportFilePaths,
    *,
    blob_store: BlobStore,
    decoder: SpreadsheetDecoder,
) -> ImportDatasets:
    """Download and decode the three files (EDD, lot_ref, contacts)."""

    return ImportDatasets(
        edd=decoder(blob_store.fetch(paths.edd), name=paths.edd),
        lot_ref=decoder(blob_store.fetch(paths.lot_ref), name=paths.lot_ref),
        contacts=decoder(blob_store.fetch(paths.contacts), name=paths.contacts),
    )


@dataclass(slots=True)
class ImportPropertyFiles:
    """Create a job, reconcile the files, persist everything and close the job.

    Any unexpected exception after the job exists marks it failed and is
    reported as one opaque ``internal_error``; the traceback only goes to the log.
    """

    blob_store: BlobStore
    decoder: SpreadsheetDecoder
    unit_of_work_factory: Callable[[], ImportUnitOfWork]
    pipeline: ImportPipeline = field(default_factory=ImportPipeline)

    def __call__(
        self,
        context: PropertyContext,
        paths: ImportFilePaths,
        *,
        request: Mapping[str, object] | None = None,
    ) -> ImportJobResult:
        job_id: int | None = None
        try:
            job_id = self._start_job(context, paths, request)
            datasets = load_datasets(paths, blob_store=self.blob_store, decoder=self.decoder)
            result = reconcile_property(datasets, context, pipeline=self.pipeline)

            with self.unit_of_work_factory() as uow:
                report = persist_reconciliation(uow, result, context=context, job_id=job_id)
                uow.repositories.jobs.finish(
                    job_id,
                    status=result.status,
                    stats=result.stats.as_dict() if result.stats is not None else None,
                )
                uow.commit()
        except Exception:
            log.exception(f"Import job {job_id} for property {context.property_id} failed")
            if job_id is not None:
                self._mark_failed(job_id)
            return ImportJobResult(
                job_id=job_id,
                result=ReconciliationResult(
                    status=RunStatus.FAILED, stats=None, errors=(INTERNAL_ERROR,)
                ),
            )

        log.info(f"Import job {job_id} finished with status {result.status}")
        return ImportJobResult(job_id=job_id, result=result, review_ids=dict(report.review_ids))

    def _start_job(
        self,
        context: PropertyContext,
        paths: ImportFilePaths,
        request: Mapping[str, object] | None,
    ) -> int:
        document = dict(request) if request is not None else {
            "files": {
                "edd_path": paths.edd,
                "lot_ref_path": paths.lot_ref,
                "contacts_path": paths.contacts,
            }
        }
        with self.unit_of_work_factory() as uow:
            job_id = uow.repositories.jobs.start(
                tenant_id=context.tenant_id,
                property_id=context.property_id,
                request=document,
            )
            uow.commit()
        log.info(f"Started import job {job_id} for property {context.property_id}")
        return job_id

    def _mark_failed(self, job_id: int) -> None:
        try:
            with self.unit_of_work_factory() as uow:
                uow.repositories.jobs.finish(job_id, status=RunStatus.FAILED, stats=None)
                uow.commit()
        except Exception:
            log.exception(f"Could not mark import job {job_id} as failed")
