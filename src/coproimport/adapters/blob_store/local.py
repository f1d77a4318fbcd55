"""Blob store backed by a local directory, used by the CLI and tests."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from coproimport.domain.errors import BlobNotFoundError, BlobStoreError

if TYPE_CHECKING:
    from coproimport.domain.ports.fetching import BlobStore


@dataclass(slots=True)
class LocalBlobStore:
    root: Path

    def fetch(self, path: str) -> bytes:
        root = self.root.resolve()
        target = (root / path).resolve()
        if not target.is_relative_to(root):
            raise BlobStoreError(f"Path escapes the store root: {path}")
        try:
            return target.read_bytes()
        except FileNotFoundError as exc:
            raise BlobNotFoundError(f"File not found: {path}") from exc
        except OSError as exc:
            raise BlobStoreError(f"Could not read {path}: {exc}") from exc


if TYPE_CHECKING:
    _store_check: BlobStore = LocalBlobStore(Path())
