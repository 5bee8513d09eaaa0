"""Registrar exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each store layer raises a specific error type for debuggability.
"""

from __future__ import annotations


class RegistrarError(Exception):
    """Base exception for all Registrar failures."""


class RegistrarConfigError(RegistrarError):
    """Raised for invalid runtime configuration."""


class RegistrarStoreError(RegistrarError):
    """Raised for record store and index failures."""


class RecordNotFoundError(RegistrarStoreError):
    """Raised when an operation addresses an id with no stored record."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(
            f"No '{collection}' record with id '{record_id}'. "
            "List the collection to discover valid ids."
        )
        self.collection = collection
        self.record_id = record_id


class RecordAlreadyExistsError(RegistrarStoreError):
    """Raised when create targets an id that is already stored."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(
            f"A '{collection}' record with id '{record_id}' already exists. "
            "Generate a new id or patch the existing record."
        )
        self.collection = collection
        self.record_id = record_id


class InconsistentIndexError(RegistrarStoreError):
    """Raised when an indexed id resolves to no record."""

    def __init__(self, collection: str, record_id: str) -> None:
        super().__init__(
            f"Index for '{collection}' lists id '{record_id}' but no record is stored."
        )
        self.collection = collection
        self.record_id = record_id


class StorageUnavailableError(RegistrarError):
    """Raised when the key-value backend call fails."""


class RegistrarSeedError(RegistrarError):
    """Raised for invalid seed tables or seed files."""
