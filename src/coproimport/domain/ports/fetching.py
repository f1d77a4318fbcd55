"""Ports for retrieving and decoding the import files."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from coproimport.domain.model import TabularDataset


@runtime_checkable
class BlobStore(Protocol):
    """Object storage holding the uploaded files, addressed by relative path.

    Raises ``BlobNotFoundError`` for a missing object and ``BlobStoreError`` for
    any other retrieval failure.
    """

    def fetch(self, path: str) -> bytes: ...


@runtime_checkable
class SpreadsheetDecoder(Protocol):
    """Callable port turning raw file bytes into a header-keyed string table."""

    def __call__(self, content: bytes, *, name: str) -> TabularDataset: ...


__all__ = ["BlobStore", "SpreadsheetDecoder"]
