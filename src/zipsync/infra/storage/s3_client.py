from __future__ import annotations

"""
Amazon S3 Object Store Client.

Thin adapter over boto3's put_object. Credentials come from boto3's default
provider chain. Retries are disabled so that every failed put surfaces to
the upload coordinator exactly once.
"""

import logging
from typing import Any, BinaryIO, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from zipsync.domain.constants import DEFAULT_UPLOAD_TIMEOUT
from zipsync.domain.errors import StorageError
from zipsync.infra.storage.common import USER_AGENT

logger = logging.getLogger(__name__)


class S3ObjectStoreClient:
    """
    Object store backed by S3 (or an S3-compatible endpoint).

    Args:
        region: AWS region; empty means boto3's configured default.
        endpoint_url: Optional custom endpoint (MinIO, LocalStack, ...).
        timeout: Connect and read timeout per request, in seconds.
        client: Pre-built boto3 S3 client, mainly for tests.
    """

    def __init__(
            self,
            region: str = "",
            endpoint_url: str = "",
            timeout: float = DEFAULT_UPLOAD_TIMEOUT,
            client: Optional[Any] = None,
    ) -> None:
        if client is None:
            botocore_config = Config(
                connect_timeout=timeout,
                read_timeout=timeout,
                retries={"max_attempts": 1, "mode": "standard"},
                user_agent_extra=USER_AGENT,
            )
            try:
                client = boto3.client(
                    "s3",
                    region_name=region or None,
                    endpoint_url=endpoint_url or None,
                    config=botocore_config,
                )
            except BotoCoreError as e:
                raise StorageError(f"Cannot create S3 client: {e}") from e
        self._client = client

    def put(self, bucket: str, key: str, stream: BinaryIO) -> None:
        try:
            self._client.put_object(Bucket=bucket, Key=key, Body=stream)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            raise StorageError(f"S3 rejected s3://{bucket}/{key} ({code}): {e}", bucket, key) from e
        except BotoCoreError as e:
            raise StorageError(f"S3 request failed for s3://{bucket}/{key}: {e}", bucket, key) from e
        logger.debug(f"Stored s3://{bucket}/{key}")
