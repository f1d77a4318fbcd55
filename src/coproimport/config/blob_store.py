"""Blob store (object storage) configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

DEFAULT_BUCKET: Final[str] = "imports"
BLOB_STORE_TIMEOUT_SECONDS: Final[float] = 30.0


@dataclass(frozen=True, slots=True)
class BlobStoreConfig:
    """Holds object storage endpoint and credentials."""

    base_url: str
    api_key: str
    bucket: str
    resilience: ResilienceConfig


def get_blob_store_config(*, resilience: ResilienceConfig | None = None) -> BlobStoreConfig:
    values = require_env_vars(("COPROIMPORT_STORAGE_URL", "COPROIMPORT_STORAGE_KEY"))
    base_url = values["COPROIMPORT_STORAGE_URL"].rstrip("/")
    api_key = values["COPROIMPORT_STORAGE_KEY"]
    bucket = (os.getenv("COPROIMPORT_STORAGE_BUCKET") or "").strip() or DEFAULT_BUCKET
    return BlobStoreConfig(
        base_url=base_url,
        api_key=api_key,
        bucket=bucket,
        resilience=resilience
        or ResilienceConfig(
            name="blob_store",
            base_url=base_url,
            timeout_seconds=BLOB_STORE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers={
                "Authorization": f"Bearer {api_key}",
                "apikey": api_key,
            },
        ),
    )
