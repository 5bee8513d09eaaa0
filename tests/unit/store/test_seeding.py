"""Unit tests for one-time collection seeding."""

from __future__ import annotations

import threading
from datetime import date

import pytest

from core.errors import RegistrarSeedError
from core.types import CollectionSpec
from store.backend import InMemoryBackend
from store.locks import KeyedLocks
from store.record_store import RecordStore
from store.seeding import SeedGuard, ensure_seed

_SEED = (
    {"id": "staff-1", "name": "Mr. John Doe"},
    {"id": "staff-2", "name": "Mrs. Jane Smith"},
)


def _store(backend: InMemoryBackend, locks: KeyedLocks | None = None) -> RecordStore:
    return RecordStore(backend, CollectionSpec("staff", "staff_members"), locks)


def test_ensure_seed_writes_records_in_seed_order() -> None:
    """First call should seed and list records in seed order."""
    store = _store(InMemoryBackend())

    seeded = ensure_seed(store, _SEED, SeedGuard())

    assert seeded and [item["id"] for item in store.list().items] == ["staff-1", "staff-2"]


def test_ensure_seed_is_idempotent_within_process() -> None:
    """Repeated calls should not write again."""
    store = _store(InMemoryBackend())
    guard = SeedGuard()
    ensure_seed(store, _SEED, guard)

    assert ensure_seed(store, _SEED, guard) is False and len(store.list().items) == 2


def test_ensure_seed_skips_when_index_has_entries() -> None:
    """A fresh process should not reseed a populated collection."""
    backend = InMemoryBackend()
    ensure_seed(_store(backend), _SEED, SeedGuard())
    _store(backend).delete("staff-1")

    seeded = ensure_seed(_store(backend), _SEED, SeedGuard())

    assert seeded is False and [item["id"] for item in _store(backend).list().items] == ["staff-2"]


def test_ensure_seed_completes_partial_previous_seed() -> None:
    """Records written without index entries should be registered on retry."""
    backend = InMemoryBackend()
    store = _store(backend)
    for record in _SEED:
        store.write_raw(record)

    ensure_seed(store, _SEED, SeedGuard())

    assert list(store.index.list_ids()) == ["staff-1", "staff-2"]


def test_ensure_seed_rejects_duplicate_ids() -> None:
    """Seed tables with repeated ids are invalid."""
    store = _store(InMemoryBackend())

    with pytest.raises(RegistrarSeedError):
        ensure_seed(store, _SEED + ({"id": "staff-1"},), SeedGuard())

    assert store.index.has_entries() is False


def test_guard_reset_allows_recheck() -> None:
    """After reset, an emptied collection is seeded again."""
    backend = InMemoryBackend()
    guard = SeedGuard()
    store = _store(backend)
    ensure_seed(store, _SEED, guard)
    store.delete("staff-1")
    store.delete("staff-2")
    guard.reset("staff")

    assert ensure_seed(store, _SEED, guard) is True


def test_concurrent_first_use_seeds_once() -> None:
    """Concurrent first callers must not duplicate seed ids."""
    backend = InMemoryBackend()
    locks = KeyedLocks()
    guard = SeedGuard()
    outcomes: list[bool] = []

    def _seed() -> None:
        outcomes.append(ensure_seed(_store(backend, locks), _SEED, guard))

    threads = [threading.Thread(target=_seed) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count(True) == 1 and list(_store(backend).index.list_ids()) == [
        "staff-1",
        "staff-2",
    ]


def test_ensure_seed_rejects_unstorable_values_before_writing() -> None:
    """A seed row JSON cannot encode must fail before any record is written."""
    store = _store(InMemoryBackend())
    seed = ({"id": "staff-1"}, {"id": "staff-2", "joined": date(2024, 1, 1)})

    with pytest.raises(RegistrarSeedError):
        ensure_seed(store, seed, SeedGuard())

    assert not store.exists("staff-1") and store.index.has_entries() is False
