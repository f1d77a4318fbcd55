"""Blob store adapters for retrieving the uploaded import files."""

from __future__ import annotations

from .http import HttpBlobStore
from .local import LocalBlobStore

__all__ = ["HttpBlobStore", "LocalBlobStore"]
