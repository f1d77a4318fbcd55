"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from coproimport.adapters.blob_store import HttpBlobStore, LocalBlobStore
from coproimport.adapters.json_api import (
    CheckResponsePayload,
    ImportResponsePayload,
    check_response_from_result,
    context_from_request,
    parse_import_request,
    response_from_result,
)
from coproimport.adapters.spreadsheet import OpenpyxlDecoder
from coproimport.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    is_started,
    startup,
)
from coproimport.domain.data_integration import ImportFilePaths, ImportPropertyFiles
from coproimport.domain.import_pipeline import ImportDatasets, reconcile_property
from coproimport.domain.ports.unit_of_work import ImportUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from coproimport.domain.model import PropertyContext
    from coproimport.domain.ports import BlobStore, SpreadsheetDecoder

UnitOfWorkFactory = Callable[[], ImportUnitOfWork]

log = getLogger(__name__)


def run_property_import(
    document: Mapping[str, object],
    *,
    blob_store: BlobStore | None = None,
    source_dir: Path | None = None,
    decoder: SpreadsheetDecoder | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ImportResponsePayload:
    """Run one import job described by a JSON request document.

    Raises ``InvalidImportRequestError`` when the document misses required
    fields; every other failure is reported inside the returned response.
    """

    request = parse_import_request(document)
    context = context_from_request(request)

    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyImportUnitOfWork
    if blob_store is None:
        blob_store = LocalBlobStore(source_dir) if source_dir is not None else HttpBlobStore()

    service = ImportPropertyFiles(
        blob_store=blob_store,
        decoder=decoder or OpenpyxlDecoder(),
        unit_of_work_factory=unit_of_work_factory,
    )
    log.info(
        "Starting import: tenant=%s, property=%s, addresses=%s, parcels=%s",
        context.tenant_id,
        context.property_id,
        len(context.addresses),
        len(context.cadastral_refs),
    )
    outcome = service(
        context,
        ImportFilePaths(
            edd=request.files.edd_path,
            lot_ref=request.files.lot_ref_path,
            contacts=request.files.contacts_path,
        ),
        request=request.model_dump(mode="json"),
    )
    return response_from_result(outcome.result, job_id=outcome.job_id, review_ids=outcome.review_ids)


def check_property_files(
    *,
    edd: Path,
    lot_ref: Path,
    contacts: Path,
    context: PropertyContext,
    decoder: SpreadsheetDecoder | None = None,
) -> CheckResponsePayload:
    """Reconcile local files without persisting anything."""

    effective_decoder = decoder or OpenpyxlDecoder()
    datasets = ImportDatasets(
        edd=effective_decoder(edd.read_bytes(), name=edd.name),
        lot_ref=effective_decoder(lot_ref.read_bytes(), name=lot_ref.name),
        contacts=effective_decoder(contacts.read_bytes(), name=contacts.name),
    )
    result = reconcile_property(datasets, context)
    log.info(
        f"Checked property {context.property_id}: status={result.status}, "
        f"issues={len(result.issues)}, reviews={len(result.reviews)}"
    )
    return check_response_from_result(result)
