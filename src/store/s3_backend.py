"""S3 object backend.

This module stores each key as one S3 object through boto3.
Missing objects read as absent; other failures surface as
StorageUnavailableError without retries.
"""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.config import RegistrarConfig
from core.constants import KEY_SEPARATOR, MISSING_OBJECT_ERROR_CODES
from core.errors import StorageUnavailableError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class S3Backend:
    """Key-value backend over a bucket prefix."""

    def __init__(self, s3_client: Any, bucket: str, prefix: str = "") -> None:
        """Create backend for one bucket prefix.

        Args:
            s3_client: Boto3 S3 client or compatible object.
            bucket: Target bucket name.
            prefix: Optional key prefix inside the bucket.
        """
        self._client = s3_client
        self._bucket = bucket
        self._prefix = prefix.strip(KEY_SEPARATOR)

    def get(self, key: str) -> bytes | None:
        object_key = self._object_key(key)
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=object_key)
            return response["Body"].read()
        except ClientError as error:
            if _is_missing(error):
                return None
            raise _unavailable("get", object_key, error) from error
        except BotoCoreError as error:
            raise _unavailable("get", object_key, error) from error

    def put(self, key: str, payload: bytes) -> None:
        object_key = self._object_key(key)
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=object_key,
                Body=payload,
                ContentType="application/json",
            )
        except (BotoCoreError, ClientError) as error:
            raise _unavailable("put", object_key, error) from error

    def delete(self, key: str) -> bool:
        # delete_object succeeds for missing keys, so existence is probed first.
        object_key = self._object_key(key)
        try:
            self._client.head_object(Bucket=self._bucket, Key=object_key)
        except ClientError as error:
            if _is_missing(error):
                return False
            raise _unavailable("delete", object_key, error) from error
        except BotoCoreError as error:
            raise _unavailable("delete", object_key, error) from error
        try:
            self._client.delete_object(Bucket=self._bucket, Key=object_key)
        except (BotoCoreError, ClientError) as error:
            raise _unavailable("delete", object_key, error) from error
        return True

    def _object_key(self, key: str) -> str:
        if not self._prefix:
            return key
        return f"{self._prefix}{KEY_SEPARATOR}{key}"


def create_s3_client(config: RegistrarConfig) -> Any:
    """Create boto3 S3 client for the s3 backend.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.
    """
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _is_missing(error: ClientError) -> bool:
    code = str(error.response.get("Error", {}).get("Code", ""))
    return code in MISSING_OBJECT_ERROR_CODES


def _unavailable(operation: str, object_key: str, error: Exception) -> StorageUnavailableError:
    _LOGGER.error("storage_call_failed", operation=operation, key=object_key, error=str(error))
    return StorageUnavailableError(
        f"S3 {operation} failed for key '{object_key}': {error}. Retry the operation."
    )
