"""Object-storage blob store reached over HTTP."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx

from coproimport.adapters.http_resilience import ResilientClient
from coproimport.config import BlobStoreConfig, get_blob_store_config
from coproimport.domain.errors import BlobNotFoundError, BlobStoreError
from coproimport.domain.ports.fetching import BlobStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from coproimport.config import ResilienceConfig

log = getLogger(__name__)

OBJECT_ENDPOINT = "storage/v1/object"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpBlobStore:
    """Download files from ``{base_url}/storage/v1/object/{bucket}/{path}``."""

    config: BlobStoreConfig = field(default_factory=get_blob_store_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def fetch(self, path: str) -> bytes:
        return asyncio.run(self._fetch_async(path))

    def object_url(self, path: str) -> str:
        return (
            f"{self.config.base_url}/{OBJECT_ENDPOINT}/"
            f"{quote(self.config.bucket)}/{quote(path.lstrip('/'))}"
        )

    async def _fetch_async(self, path: str) -> bytes:
        url = self.object_url(path)
        async with self.client_factory(self.config.resilience) as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as exc:
                raise BlobStoreError(f"Could not download {path}: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise BlobNotFoundError(f"File not found in bucket {self.config.bucket}: {path}")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            log.error(f"Blob store returned {response.status_code} for {path}")
            raise BlobStoreError(
                f"Could not download {path}: HTTP {response.status_code}"
            ) from exc

        log.debug("Downloaded %s (%s bytes)", path, len(response.content))
        return response.content


if TYPE_CHECKING:
    _store_check: BlobStore = HttpBlobStore()
