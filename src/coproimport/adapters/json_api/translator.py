"""Translate between the JSON API documents and the import domain."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from coproimport.domain.errors import CoproImportError
from coproimport.domain.model import AddressRole, PropertyAddress, PropertyContext, RunStatus

from .schema import (
    CheckResponsePayload,
    ErrorPayload,
    ImportRequestPayload,
    ImportResponsePayload,
    IssuePayload,
    ReviewPayload,
    StatsPayload,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from coproimport.domain.import_pipeline import ReconciliationResult
    from coproimport.domain.model import BlockingError, DataIssue, ReviewCase

log = getLogger(__name__)

INVALID_REQUEST_CODE = "invalid_request"
INVALID_REQUEST_MESSAGE = "Missing required fields"


class InvalidImportRequestError(CoproImportError):
    """Raised when an import request document misses required fields."""

    def __init__(self, message: str, *, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


def parse_import_request(document: object) -> ImportRequestPayload:
    try:
        return ImportRequestPayload.model_validate(document)
    except ValidationError as exc:
        details = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        log.info(f"Rejected import request: {'; '.join(details)}")
        raise InvalidImportRequestError(INVALID_REQUEST_MESSAGE, details=details) from exc


def context_from_request(request: ImportRequestPayload) -> PropertyContext:
    return PropertyContext(
        tenant_id=request.tenant_id,
        property_id=request.copro_id,
        addresses=tuple(
            PropertyAddress(label=address.label, role=AddressRole(address.role))
            for address in request.copro_addresses
        ),
        cadastral_refs=tuple(request.copro_cadastral_refs),
    )


def review_payload(review: ReviewCase, *, review_id: int | None = None) -> ReviewPayload:
    return ReviewPayload(
        review_id=review_id,
        owner_ref=review.owner_ref,
        display_name=review.display_name,
        contact_category=review.contact_category.value,
        legal_form=review.legal_form.value if review.legal_form is not None else None,
        group_type=review.group_type.value if review.group_type is not None else None,
        main_hab_lots=list(review.main_hab_lots),
        dep_lots=list(review.dep_lots),
        reason=review.reason.value,
    )


def error_payload(error: BlockingError) -> ErrorPayload:
    return ErrorPayload(
        code=error.code,
        message=error.message,
        entity=error.entity,
        column=error.column,
    )


def issue_payloads(issues: Iterable[DataIssue]) -> list[IssuePayload]:
    return [
        IssuePayload(
            severity=issue.severity.value,
            code=issue.code,
            entity_type=issue.entity_type,
            entity_key=issue.entity_key,
            message=issue.message,
            payload=issue.payload,
        )
        for issue in issues
    ]


def response_from_result(
    result: ReconciliationResult,
    *,
    job_id: int | None,
    review_ids: Mapping[str, int] | None = None,
) -> ImportResponsePayload:
    ids = review_ids or {}
    return ImportResponsePayload(
        job_id=job_id,
        status=_status_name(result.status),
        stats=StatsPayload(**result.stats.as_dict()) if result.stats is not None else None,
        reviews=[
            review_payload(review, review_id=ids.get(review.owner_ref)) for review in result.reviews
        ],
        errors=[error_payload(error) for error in result.errors],
    )


def check_response_from_result(result: ReconciliationResult) -> CheckResponsePayload:
    response = response_from_result(result, job_id=None)
    return CheckResponsePayload(
        **response.model_dump(),
        issues=issue_payloads(result.issues),
    )


def invalid_request_response(error: InvalidImportRequestError) -> ImportResponsePayload:
    return ImportResponsePayload(
        job_id=None,
        status="failed",
        errors=[ErrorPayload(code=INVALID_REQUEST_CODE, message=str(error), entity="request")],
    )


def _status_name(status: RunStatus) -> str:
    if status is RunStatus.RUNNING:
        raise ValueError("A running import has no response status")
    return status.value
