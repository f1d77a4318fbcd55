"""JSON request/response documents of the import endpoint."""

from __future__ import annotations

from .schema import (
    CheckResponsePayload,
    CoproAddressPayload,
    ErrorPayload,
    ImportFilesPayload,
    ImportRequestPayload,
    ImportResponsePayload,
    IssuePayload,
    ReviewPayload,
    StatsPayload,
)
from .translator import (
    InvalidImportRequestError,
    check_response_from_result,
    context_from_request,
    invalid_request_response,
    parse_import_request,
    response_from_result,
)

__all__ = [
    "CheckResponsePayload",
    "CoproAddressPayload",
    "ErrorPayload",
    "ImportFilesPayload",
    "ImportRequestPayload",
    "ImportResponsePayload",
    "InvalidImportRequestError",
    "IssuePayload",
    "ReviewPayload",
    "StatsPayload",
    "check_response_from_result",
    "context_from_request",
    "invalid_request_response",
    "parse_import_request",
    "response_from_result",
]
