from __future__ import annotations

"""
Object Store Infrastructure.

Exposes the put-object capability and the factory that builds the backend
selected in the configuration.
"""

from typing import Any, Dict

from zipsync.domain.constants import DEFAULT_UPLOAD_TIMEOUT
from zipsync.infra.storage.common import ObjectStoreClient
from zipsync.infra.storage.http_client import HttpObjectStoreClient
from zipsync.infra.storage.s3_client import S3ObjectStoreClient


def create_object_store_client(config: Dict[str, Any]) -> ObjectStoreClient:
    """
    Build the object store client described by a validated configuration.

    Raises:
        ValueError: If the backend name is unknown or its settings are incomplete.
        StorageError: If the backend client cannot be created.
    """
    backend = config.get("storage_backend", "s3")
    timeout = float(config.get("upload_timeout", DEFAULT_UPLOAD_TIMEOUT))

    if backend == "s3":
        return S3ObjectStoreClient(
            region=config.get("region", ""),
            endpoint_url=config.get("endpoint_url", ""),
            timeout=timeout,
        )
    if backend == "http":
        return HttpObjectStoreClient(config.get("endpoint_url", ""), timeout=timeout)

    raise ValueError(f"Unknown storage backend: '{backend}'")


__all__ = [
    "ObjectStoreClient",
    "S3ObjectStoreClient",
    "HttpObjectStoreClient",
    "create_object_store_client",
]
