from __future__ import annotations

"""
HTTP Object Store Client.

Stores objects with a plain HTTP PUT to '{endpoint}/{bucket}/{key}', the
path-style addressing understood by S3-compatible gateways.
"""

import logging
from typing import BinaryIO, Optional
from urllib.parse import quote

import requests

from zipsync.domain.constants import DEFAULT_UPLOAD_TIMEOUT
from zipsync.domain.errors import StorageError
from zipsync.infra.storage.common import USER_AGENT

logger = logging.getLogger(__name__)


class HttpObjectStoreClient:
    """
    Object store reached over HTTP PUT.

    Args:
        endpoint_url: Base URL of the store.
        timeout: Per-request timeout in seconds.
        session: Optional requests.Session to reuse connections.
    """

    def __init__(
            self,
            endpoint_url: str,
            timeout: float = DEFAULT_UPLOAD_TIMEOUT,
            session: Optional[requests.Session] = None,
    ) -> None:
        if not endpoint_url:
            raise ValueError("HTTP object store requires an endpoint URL.")
        self.endpoint_url = endpoint_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT})

    def object_url(self, bucket: str, key: str) -> str:
        return f"{self.endpoint_url}/{quote(bucket)}/{quote(key)}"

    def put(self, bucket: str, key: str, stream: BinaryIO) -> None:
        url = self.object_url(bucket, key)
        try:
            response = self._session.put(url, data=stream, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise StorageError(f"HTTP PUT {url} failed: {e}", bucket, key) from e
        logger.debug(f"Stored {url}")
