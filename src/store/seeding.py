"""One-time seeding of canonical collection data.

A collection counts as seeded once its index holds any id. Seeding
writes every seed record first and registers ids afterwards, in seed
order, so a repeated or interrupted run converges to the same state.
Seed rows deleted later are never re-created individually.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping, Sequence

from core.constants import RECORD_ID_FIELD
from core.errors import RegistrarSeedError, RegistrarStoreError
from core.logging_config import get_logger
from store.locks import KeyedLocks
from store.record_payload import encode_record
from store.record_store import RecordStore

_LOGGER = get_logger(__name__)


class SeedGuard:
    """Tracks which collections were checked in this process."""

    def __init__(self) -> None:
        self._locks = KeyedLocks()
        self._checked: set[str] = set()
        self._checked_lock = threading.Lock()

    def is_checked(self, collection: str) -> bool:
        with self._checked_lock:
            return collection in self._checked

    def mark_checked(self, collection: str) -> None:
        with self._checked_lock:
            self._checked.add(collection)

    def reset(self, collection: str) -> None:
        """Force the next ensure_seed call to re-check the index."""
        with self._checked_lock:
            self._checked.discard(collection)

    def hold(self, collection: str) -> Any:
        return self._locks.hold(collection)


def ensure_seed(
    store: RecordStore,
    seed_records: Sequence[Mapping[str, Any]],
    guard: SeedGuard,
) -> bool:
    """Seed a collection if its index is absent or empty.

    Args:
        store: Record store for the collection.
        seed_records: Canonical records in listing order.
        guard: Process-wide guard serializing concurrent first use.

    Returns:
        True when seed records were written by this call.

    Raises:
        RegistrarSeedError: If seed records lack ids, repeat an id, or hold
            values that cannot be stored. Nothing is written in that case.
    """
    collection = store.name
    if guard.is_checked(collection):
        return False
    with guard.hold(collection):
        if guard.is_checked(collection):
            return False
        if store.index.has_entries():
            guard.mark_checked(collection)
            _LOGGER.debug("collection_seed_skipped", collection=collection)
            return False
        seed_ids = validate_seed_records(collection, seed_records)
        for record in seed_records:
            store.write_raw(record)
        for record_id in seed_ids:
            store.index.add_id(record_id)
        guard.mark_checked(collection)
    _LOGGER.info("collection_seeded", collection=collection, record_count=len(seed_ids))
    return True


def validate_seed_records(
    collection: str,
    seed_records: Sequence[Mapping[str, Any]],
) -> list[str]:
    """Return seed ids in order after checking ids and payload encoding.

    Raises:
        RegistrarSeedError: If any record lacks an id, an id repeats, or a
            field value is not JSON serializable.
    """
    seed_ids: list[str] = []
    for position, record in enumerate(seed_records):
        record_id = record.get(RECORD_ID_FIELD)
        if not isinstance(record_id, str) or not record_id:
            raise RegistrarSeedError(
                f"Seed record #{position} for '{collection}' has no non-empty string id."
            )
        if record_id in seed_ids:
            raise RegistrarSeedError(
                f"Seed id '{record_id}' appears more than once for '{collection}'."
            )
        try:
            encode_record(record)
        except RegistrarStoreError as error:
            raise RegistrarSeedError(
                f"Seed record '{record_id}' for '{collection}' cannot be stored: {error}"
            ) from error
        seed_ids.append(record_id)
    return seed_ids
