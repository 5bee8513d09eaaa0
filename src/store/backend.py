"""Key-value backend primitives.

This module defines the three-operation backend contract consumed by
the store and provides in-memory and filesystem implementations.
"""

from __future__ import annotations

import os
import threading
import uuid
from pathlib import Path
from typing import Protocol

from core.config import RegistrarConfig
from core.constants import KEY_SEPARATOR, RECORD_FILE_SUFFIX, TEMP_FILE_SUFFIX
from core.errors import RegistrarStoreError, StorageUnavailableError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class KeyValueBackend(Protocol):
    """Single-key storage with no listing or transactions."""

    def get(self, key: str) -> bytes | None:
        """Return stored bytes or None when absent."""

    def put(self, key: str, payload: bytes) -> None:
        """Store bytes under key, replacing any previous value."""

    def delete(self, key: str) -> bool:
        """Remove key and return whether a value existed."""


class InMemoryBackend:
    """Process-local backend guarded by a mutex."""

    def __init__(self) -> None:
        self._values: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            return self._values.get(key)

    def put(self, key: str, payload: bytes) -> None:
        with self._lock:
            self._values[key] = bytes(payload)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._values.pop(key, None) is not None


class FileSystemBackend:
    """Backend storing one file per key under a root directory.

    Writes land in a temporary sibling file and are moved into place
    with ``os.replace`` so readers never observe a partial value.
    """

    def __init__(self, root: Path) -> None:
        """Initialize backend root.

        Args:
            root: Directory holding key files.
        """
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)

    def get(self, key: str) -> bytes | None:
        path = self._key_path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as error:
            raise _unavailable("get", key, error) from error

    def put(self, key: str, payload: bytes) -> None:
        path = self._key_path(key)
        temp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex}{TEMP_FILE_SUFFIX}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_bytes(payload)
            os.replace(temp_path, path)
        except OSError as error:
            temp_path.unlink(missing_ok=True)
            raise _unavailable("put", key, error) from error

    def delete(self, key: str) -> bool:
        path = self._key_path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as error:
            raise _unavailable("delete", key, error) from error
        return True

    def _key_path(self, key: str) -> Path:
        """Map a key onto a file path below the root.

        Raises:
            RegistrarStoreError: If a key segment could escape the root.
        """
        segments = key.split(KEY_SEPARATOR)
        if any(segment in ("", ".", "..") for segment in segments):
            raise RegistrarStoreError(f"Invalid storage key '{key}': empty or relative segment.")
        return self._root.joinpath(*segments[:-1], segments[-1] + RECORD_FILE_SUFFIX)


def build_backend(config: RegistrarConfig) -> KeyValueBackend:
    """Create the backend selected by config.

    Args:
        config: Runtime configuration.

    Returns:
        Backend instance.
    """
    if config.backend == "memory":
        return InMemoryBackend()
    if config.backend == "s3":
        from store.s3_backend import S3Backend, create_s3_client

        bucket = config.s3_bucket or ""
        return S3Backend(create_s3_client(config), bucket, config.s3_prefix)
    return FileSystemBackend(config.data_root / "collections")


def _unavailable(operation: str, key: str, error: Exception) -> StorageUnavailableError:
    _LOGGER.error("storage_call_failed", operation=operation, key=key, error=str(error))
    return StorageUnavailableError(
        f"Storage {operation} failed for key '{key}': {error}. Retry the operation."
    )
