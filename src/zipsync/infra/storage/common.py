from __future__ import annotations

from typing import BinaryIO, Protocol

USER_AGENT = "ZipSync-Client/1.0.0"


class ObjectStoreClient(Protocol):
    """Put-object capability consumed by the upload coordinator."""

    def put(self, bucket: str, key: str, stream: BinaryIO) -> None:
        """Store stream under bucket/key; raise StorageError on failure."""
        ...
