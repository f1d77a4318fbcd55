"""Exception hierarchy shared by the domain and its adapters."""

from __future__ import annotations


class CoproImportError(RuntimeError):
    """Base class for errors raised by copro-import."""


class InvalidTransitionError(CoproImportError):
    """Raised when a terminal import run is asked to change status."""


class BlobStoreError(CoproImportError):
    """Raised when a file cannot be retrieved from the blob store."""


class BlobNotFoundError(BlobStoreError):
    """Raised when the requested blob does not exist."""


class SpreadsheetDecodeError(CoproImportError):
    """Raised when file bytes cannot be decoded into rows."""
