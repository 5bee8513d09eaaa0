"""Record store for one collection.

This module owns single-record durability and coordinates every
mutation with the collection index:

* create writes the record, then registers the id;
* delete deregisters the id, then removes the record;
* list resolves indexed ids and skips ids without a record.

Operations on one id serialize on a per-id lock; index updates
serialize on the collection index lock.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from core.constants import RECORD_ID_FIELD
from core.errors import (
    InconsistentIndexError,
    RecordAlreadyExistsError,
    RecordNotFoundError,
    RegistrarStoreError,
)
from core.logging_config import get_logger
from core.types import CollectionSpec, Record, RecordPage
from store.backend import KeyValueBackend
from store.index_manager import IndexManager
from store.locks import KeyedLocks
from store.merge_patch import merge_patch
from store.record_payload import decode_record, encode_record, record_key

_LOGGER = get_logger(__name__)


class RecordStore:
    """Keyed record storage with a consistent id index."""

    def __init__(
        self,
        backend: KeyValueBackend,
        spec: CollectionSpec,
        locks: KeyedLocks | None = None,
    ) -> None:
        """Initialize record store for one collection.

        Args:
            backend: Key-value backend.
            spec: Collection description.
            locks: Shared lock registry; a private one is created when omitted.
        """
        self._backend = backend
        self._spec = spec
        self._locks = locks or KeyedLocks()
        self._index = IndexManager(backend, spec.name, spec.index_name, self._locks)

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def spec(self) -> CollectionSpec:
        return self._spec

    @property
    def index(self) -> IndexManager:
        return self._index

    def exists(self, record_id: str) -> bool:
        """Return whether a record is stored under id."""
        return self._backend.get(self._key(record_id)) is not None

    def get(self, record_id: str) -> Record:
        """Return the stored record.

        Raises:
            RecordNotFoundError: If no record is stored under id.
        """
        record = self._read(record_id)
        if record is None:
            raise RecordNotFoundError(self.name, record_id)
        return record

    def create(self, record: Mapping[str, Any]) -> Record:
        """Store a new record and register its id.

        Args:
            record: Full record including a non-empty string id.

        Returns:
            Stored record copy.

        Raises:
            RegistrarStoreError: If the id is missing or empty.
            RecordAlreadyExistsError: If the id is already stored.
        """
        record_id = _require_id(self.name, record)
        with self._locks.hold(self._key(record_id)):
            if self.exists(record_id):
                raise RecordAlreadyExistsError(self.name, record_id)
            stored = self.write_raw(record)
            self._index.add_id(record_id)
        _LOGGER.info("record_created", collection=self.name, record_id=record_id)
        return stored

    def patch(self, record_id: str, fields: Mapping[str, Any]) -> Record:
        """Merge fields into a stored record.

        Args:
            record_id: Target record id.
            fields: Patch fields; see ``merge_patch`` for blank handling.

        Returns:
            Post-merge record.

        Raises:
            RecordNotFoundError: If no record is stored under id.
        """
        with self._locks.hold(self._key(record_id)):
            current = self.get(record_id)
            merged = merge_patch(current, fields, self._spec.secret_fields)
            self._backend.put(self._key(record_id), encode_record(merged))
        _LOGGER.info(
            "record_patched",
            collection=self.name,
            record_id=record_id,
            fields=sorted(fields),
        )
        return merged

    def delete(self, record_id: str) -> bool:
        """Deregister id and remove the record.

        Returns:
            True when a record was removed, False when none existed.
        """
        with self._locks.hold(self._key(record_id)):
            self._index.remove_id(record_id)
            removed = self._backend.delete(self._key(record_id))
        if removed:
            _LOGGER.info("record_deleted", collection=self.name, record_id=record_id)
        return removed

    def write_raw(self, record: Mapping[str, Any]) -> Record:
        """Write a full record without touching the index.

        Used by seeding, which registers ids in a separate pass.
        """
        record_id = _require_id(self.name, record)
        stored = dict(record)
        self._backend.put(self._key(record_id), encode_record(stored))
        return stored

    def list(self) -> RecordPage:
        """Resolve every indexed id into its record.

        Ids that do not resolve are logged and skipped.
        """
        return RecordPage(items=tuple(self.iter_records()))

    def iter_records(self) -> Iterator[Record]:
        """Lazily yield records in index order."""
        for record_id in self._index.list_ids():
            record = self._read(record_id)
            if record is None:
                _LOGGER.warning(
                    "index_entry_unresolved",
                    collection=self.name,
                    record_id=record_id,
                )
                continue
            yield record

    def dangling_ids(self, strict: bool = False) -> tuple[str, ...]:
        """Return indexed ids that have no stored record.

        Args:
            strict: Raise on the first dangling id instead of collecting.

        Raises:
            InconsistentIndexError: In strict mode, when any id is dangling.
        """
        dangling: list[str] = []
        for record_id in self._index.list_ids():
            if self.exists(record_id):
                continue
            if strict:
                raise InconsistentIndexError(self.name, record_id)
            dangling.append(record_id)
        return tuple(dangling)

    def _read(self, record_id: str) -> Record | None:
        key = self._key(record_id)
        payload = self._backend.get(key)
        if payload is None:
            return None
        return decode_record(payload, key)

    def _key(self, record_id: str) -> str:
        return record_key(self.name, record_id)


def _require_id(collection: str, record: Mapping[str, Any]) -> str:
    record_id = record.get(RECORD_ID_FIELD)
    if not isinstance(record_id, str) or not record_id:
        raise RegistrarStoreError(
            f"Cannot store '{collection}' record without a non-empty string id. "
            "Generate an id before calling create."
        )
    return record_id
