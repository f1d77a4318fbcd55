from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from coproimport.adapters.blob_store import HttpBlobStore
from coproimport.adapters.http_resilience import ResilientClient
from coproimport.config import BlobStoreConfig, ResilienceConfig
from coproimport.domain.errors import BlobNotFoundError, BlobStoreError

if TYPE_CHECKING:
    from collections.abc import Callable


def _config() -> BlobStoreConfig:
    return BlobStoreConfig(
        base_url="https://storage.example.com",
        api_key="secret",
        bucket="imports",
        resilience=ResilienceConfig(
            name="blob_store",
            default_headers={"Authorization": "Bearer secret"},
        ),
    )


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001
            transport=httpx.MockTransport(async_handler),
            headers=dict(resilience.default_headers or {}),
        )
        return client

    return factory


def test_object_url_quotes_path() -> None:
    store = HttpBlobStore(config=_config())

    assert store.object_url("/tenant 1/edd.xlsx") == (
        "https://storage.example.com/storage/v1/object/imports/tenant%201/edd.xlsx"
    )


def test_fetch_returns_content() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"xlsx-bytes")

    store = HttpBlobStore(config=_config(), client_factory=_make_client_factory(handler))

    assert store.fetch("tenant-1/edd.xlsx") == b"xlsx-bytes"
    (request,) = seen
    assert request.method == "GET"
    assert request.url.path == "/storage/v1/object/imports/tenant-1/edd.xlsx"
    assert request.headers["Authorization"] == "Bearer secret"


def test_fetch_missing_blob() -> None:
    store = HttpBlobStore(
        config=_config(),
        client_factory=_make_client_factory(lambda _request: httpx.Response(404)),
    )

    with pytest.raises(BlobNotFoundError, match="tenant-1/edd.xlsx"):
        store.fetch("tenant-1/edd.xlsx")


def test_fetch_server_error() -> None:
    store = HttpBlobStore(
        config=_config(),
        client_factory=_make_client_factory(lambda _request: httpx.Response(403)),
    )

    with pytest.raises(BlobStoreError, match="HTTP 403") as excinfo:
        store.fetch("tenant-1/edd.xlsx")
    assert not isinstance(excinfo.value, BlobNotFoundError)


def test_fetch_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    store = HttpBlobStore(config=_config(), client_factory=_make_client_factory(handler))

    with pytest.raises(BlobStoreError, match="Could not download"):
        store.fetch("tenant-1/edd.xlsx")


def test_default_config_comes_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COPROIMPORT_STORAGE_URL", "https://files.example.com/")
    monkeypatch.setenv("COPROIMPORT_STORAGE_KEY", "k")
    monkeypatch.delenv("COPROIMPORT_STORAGE_BUCKET", raising=False)

    store = HttpBlobStore()

    assert store.object_url("a.xlsx") == "https://files.example.com/storage/v1/object/imports/a.xlsx"
