"""Application configuration helpers."""

from __future__ import annotations

from .blob_store import BlobStoreConfig, get_blob_store_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, ResponseHook, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "BlobStoreConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "ResponseHook",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_blob_store_config",
    "get_database_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
