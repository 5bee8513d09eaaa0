"""Per-collection id index.

This module persists the ordered set of live ids for one collection
under a dedicated index key, so listing never scans the backend.
Every read-modify-write of the index runs under the collection lock.
"""

from __future__ import annotations

from typing import Iterator

from core.logging_config import get_logger
from store.backend import KeyValueBackend
from store.locks import KeyedLocks
from store.record_payload import decode_index, encode_index, index_key

_LOGGER = get_logger(__name__)


class IndexManager:
    """Ordered id index for one collection."""

    def __init__(
        self,
        backend: KeyValueBackend,
        collection: str,
        index_name: str,
        locks: KeyedLocks,
    ) -> None:
        """Initialize index manager.

        Args:
            backend: Key-value backend holding the index object.
            collection: Collection name.
            index_name: Persisted index name.
            locks: Shared lock registry.
        """
        self._backend = backend
        self._collection = collection
        self._index_name = index_name
        self._key = index_key(collection, index_name)
        self._locks = locks

    @property
    def key(self) -> str:
        return self._key

    def list_ids(self) -> Iterator[str]:
        """Yield live ids in insertion order.

        The index is read when iteration starts; each call returns a
        fresh iterator over the current persisted state.
        """
        yield from self._read_ids()

    def has_entries(self) -> bool:
        """Return whether the index holds at least one id."""
        return bool(self._read_ids())

    def add_id(self, record_id: str) -> bool:
        """Append id if absent.

        Args:
            record_id: Id to register.

        Returns:
            True when the id was appended, False when already present.
        """
        with self._locks.hold(self._key):
            ids = self._read_ids()
            if record_id in ids:
                return False
            ids.append(record_id)
            self._write_ids(ids)
        _LOGGER.debug("index_id_added", collection=self._collection, record_id=record_id)
        return True

    def remove_id(self, record_id: str) -> bool:
        """Remove id if present.

        Args:
            record_id: Id to deregister.

        Returns:
            True when the id was removed, False when it was absent.
        """
        with self._locks.hold(self._key):
            ids = self._read_ids()
            if record_id not in ids:
                return False
            self._write_ids([item for item in ids if item != record_id])
        _LOGGER.debug("index_id_removed", collection=self._collection, record_id=record_id)
        return True

    def _read_ids(self) -> list[str]:
        payload = self._backend.get(self._key)
        if payload is None:
            return []
        return decode_index(payload, self._key)

    def _write_ids(self, ids: list[str]) -> None:
        self._backend.put(self._key, encode_index(self._collection, self._index_name, ids))
