"""Unit tests for record store persistence and index coordination."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from core.errors import (
    InconsistentIndexError,
    RecordAlreadyExistsError,
    RecordNotFoundError,
    RegistrarStoreError,
    StorageUnavailableError,
)
from core.types import CollectionSpec
from store.backend import FileSystemBackend, InMemoryBackend
from store.record_payload import record_key
from store.record_store import RecordStore

_SPEC = CollectionSpec(name="student", index_name="students", secret_fields=("password",))


def _store(backend: InMemoryBackend | None = None) -> RecordStore:
    return RecordStore(backend or InMemoryBackend(), _SPEC)


def _student(record_id: str, **fields: object) -> dict[str, object]:
    return {"id": record_id, "name": "Student", "class": "SS1", **fields}


def test_create_makes_record_visible() -> None:
    """Created records should exist and be listed exactly once."""
    store = _store()

    store.create(_student("student-1"))

    assert store.exists("student-1") and list(store.index.list_ids()) == ["student-1"]


def test_create_rejects_duplicate_id() -> None:
    """Creating an existing id should fail without touching the index."""
    store = _store()
    store.create(_student("student-1"))

    with pytest.raises(RecordAlreadyExistsError):
        store.create(_student("student-1", name="Other"))

    assert store.get("student-1")["name"] == "Student"


def test_create_requires_non_empty_id() -> None:
    """Records without an id cannot be stored."""
    store = _store()

    with pytest.raises(RegistrarStoreError):
        store.create({"id": "", "name": "Nobody"})


def test_get_missing_raises_not_found() -> None:
    """Reading an unknown id should raise."""
    with pytest.raises(RecordNotFoundError):
        _store().get("student-9")


def test_patch_missing_raises_and_creates_nothing() -> None:
    """Patching an absent id must not create the record."""
    store = _store()
    store.create(_student("student-1"))

    with pytest.raises(RecordNotFoundError):
        store.patch("does-not-exist", {"class": "SS2"})

    assert list(store.index.list_ids()) == ["student-1"] and not store.exists("does-not-exist")


def test_patch_persists_merged_record() -> None:
    """Patch should write the merged record back to storage."""
    store = _store()
    store.create(_student("student-1", password="secret"))

    returned = store.patch("student-1", {"class": "SS2", "password": ""})

    expected = {"id": "student-1", "name": "Student", "class": "SS2", "password": "secret"}
    assert returned == store.get("student-1") == expected


def test_delete_removes_record_and_id() -> None:
    """Delete should deregister the id and remove the record."""
    store = _store()
    store.create(_student("student-1"))

    removed = store.delete("student-1")

    assert removed and not store.exists("student-1") and list(store.index.list_ids()) == []


def test_delete_missing_returns_false() -> None:
    """Deleting twice should report False the second time."""
    store = _store()
    store.create(_student("student-1"))
    store.delete("student-1")

    assert store.delete("student-1") is False


def test_list_skips_orphaned_index_entries() -> None:
    """Listing should omit ids whose record is gone."""
    backend = InMemoryBackend()
    store = _store(backend)
    store.create(_student("student-1"))
    store.create(_student("student-2"))
    backend.delete(record_key("student", "student-1"))

    page = store.list()

    assert [item["id"] for item in page.items] == ["student-2"] and page.next_cursor is None


def test_unlisted_record_is_invisible_to_listing() -> None:
    """A record written without index registration is not listed."""
    store = _store()
    store.write_raw(_student("student-7"))

    assert store.exists("student-7") and store.list().items == ()


def test_dangling_ids_strict_raises() -> None:
    """Strict verification should raise on an indexed id without a record."""
    store = _store()
    store.index.add_id("ghost")

    with pytest.raises(InconsistentIndexError):
        store.dangling_ids(strict=True)


def test_dangling_ids_collects_missing_records() -> None:
    """Lenient verification should report dangling ids."""
    store = _store()
    store.create(_student("student-1"))
    store.index.add_id("ghost")

    assert store.dangling_ids() == ("ghost",)


def test_ids_with_separators_stay_single_keys() -> None:
    """Ids containing key separators should not collide with other keys."""
    store = _store()
    store.create(_student("a/b"))

    assert store.get("a/b")["id"] == "a/b"


def test_concurrent_creates_all_listed() -> None:
    """Parallel creates of distinct ids should all reach the index."""
    store = _store()
    ids = [f"student-{number}" for number in range(30)]
    threads = [
        threading.Thread(target=store.create, args=(_student(record_id),)) for record_id in ids
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(item["id"] for item in store.list().items) == sorted(ids)


class _FailingDeleteBackend(InMemoryBackend):
    """Backend whose record deletes fail while index writes succeed."""

    def delete(self, key: str) -> bool:
        raise StorageUnavailableError(f"delete failed for {key}")


def test_delete_deregisters_id_before_removing_record() -> None:
    """A failed record delete should leave an unlisted record, not a dangling id."""
    store = _store(_FailingDeleteBackend())
    store.create(_student("student-1"))

    with pytest.raises(StorageUnavailableError):
        store.delete("student-1")

    assert list(store.index.list_ids()) == [] and store.exists("student-1")


def test_concurrent_patches_on_one_id_keep_every_field() -> None:
    """Patches to the same id should serialize without losing fields."""
    store = _store()
    store.create(_student("student-1"))
    fields = [f"field_{number}" for number in range(40)]
    threads = [
        threading.Thread(target=store.patch, args=("student-1", {name: True})) for name in fields
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    record = store.get("student-1")
    assert all(record.get(name) is True for name in fields)


def test_dot_ids_are_stored_on_file_backend(tmp_path: Path) -> None:
    """Ids made of dots should map to regular files below the root."""
    store = _store(FileSystemBackend(tmp_path))
    store.create(_student("."))
    store.create(_student(".."))

    assert (store.get(".")["id"], store.get("..")["id"]) == (".", "..") and list(
        store.index.list_ids()
    ) == [".", ".."]
