"""Public SDK surface for Registrar.

This module provides a stable import path for SDK users.
It re-exports the primary client and typed models.
"""

from __future__ import annotations

from core.config import RegistrarConfig
from core.errors import (
    InconsistentIndexError,
    RecordAlreadyExistsError,
    RecordNotFoundError,
    RegistrarError,
    StorageUnavailableError,
)
from core.types import CollectionSpec, RecordPage
from store.backend import FileSystemBackend, InMemoryBackend, KeyValueBackend
from store.registry_sdk import CollectionHandle, RegistrarClient

__all__ = [
    "CollectionHandle",
    "CollectionSpec",
    "FileSystemBackend",
    "InMemoryBackend",
    "InconsistentIndexError",
    "KeyValueBackend",
    "RecordAlreadyExistsError",
    "RecordNotFoundError",
    "RecordPage",
    "RegistrarClient",
    "RegistrarConfig",
    "RegistrarError",
    "StorageUnavailableError",
]
