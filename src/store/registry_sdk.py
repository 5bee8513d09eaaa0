"""Python SDK for school record collections.

This module exposes high-level APIs for seeding, listing, and
mutating collections backed by the indexed record store.
"""

from __future__ import annotations

import uuid
from typing import Any, Mapping

from core.config import RegistrarConfig
from core.constants import RECORD_ID_FIELD
from core.errors import RegistrarStoreError
from core.types import CollectionSpec, Record, RecordPage
from school.collection_specs import default_collections
from school.seed_file import apply_seed_tables, load_seed_file
from store.backend import KeyValueBackend, build_backend
from store.locks import KeyedLocks
from store.record_store import RecordStore
from store.seeding import SeedGuard, ensure_seed


class RegistrarClient:
    """Primary SDK entry point for collection workflows."""

    def __init__(
        self,
        config: RegistrarConfig | None = None,
        backend: KeyValueBackend | None = None,
        collections: Mapping[str, CollectionSpec] | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            backend: Optional backend; built from config when omitted.
            collections: Optional collection specs; school collections by default.
        """
        self._config = config or RegistrarConfig.from_env()
        self._backend = backend if backend is not None else build_backend(self._config)
        specs = dict(collections) if collections is not None else default_collections()
        if self._config.seed_file is not None:
            specs = apply_seed_tables(specs, load_seed_file(self._config.seed_file, specs))
        self._collections = specs
        self._locks = KeyedLocks()
        self._seed_guard = SeedGuard()

    @property
    def config(self) -> RegistrarConfig:
        return self._config

    def collection_names(self) -> tuple[str, ...]:
        """Return configured collection names in declaration order."""
        return tuple(self._collections)

    def collection(self, name: str) -> "CollectionHandle":
        """Get collection handle by name.

        Args:
            name: Collection name.

        Returns:
            Collection handle.

        Raises:
            RegistrarStoreError: If the collection is not configured.
        """
        spec = self._collections.get(name)
        if spec is None:
            raise RegistrarStoreError(
                f"Unknown collection '{name}'. "
                f"Expected one of: {', '.join(self._collections)}."
            )
        store = RecordStore(self._backend, spec, self._locks)
        return CollectionHandle(store, self._seed_guard)

    def ensure_seeded(self) -> dict[str, bool]:
        """Seed every configured collection that has never been seeded.

        Returns:
            Mapping of collection name to whether this call wrote seed data.
        """
        return {name: self.collection(name).ensure_seed() for name in self._collections}


class CollectionHandle:
    """Collection-scoped operations over one record store."""

    def __init__(self, store: RecordStore, seed_guard: SeedGuard) -> None:
        self._store = store
        self._seed_guard = seed_guard

    @property
    def name(self) -> str:
        return self._store.name

    def ensure_seed(self) -> bool:
        """Write canonical seed records if the collection was never seeded."""
        return ensure_seed(self._store, self._store.spec.seed_records, self._seed_guard)

    def list(self) -> RecordPage:
        """List records in index order."""
        return self._store.list()

    def list_ids(self) -> tuple[str, ...]:
        """List live ids in index order."""
        return tuple(self._store.index.list_ids())

    def exists(self, record_id: str) -> bool:
        return self._store.exists(record_id)

    def get(self, record_id: str) -> Record:
        return self._store.get(record_id)

    def create(self, record: Mapping[str, Any]) -> Record:
        return self._store.create(record)

    def add(self, fields: Mapping[str, Any]) -> Record:
        """Create a record under a freshly generated id.

        Collection defaults fill missing or blank fields and fixed fields
        such as the user role always win.

        Args:
            fields: Record fields; any id given here is replaced.

        Returns:
            Stored record including its new id.
        """
        spec = self._store.spec
        record = dict(fields)
        for name, default in spec.blank_defaults.items():
            if record.get(name) in ("", None):
                record[name] = default
        record.update(spec.fixed_fields)
        record[RECORD_ID_FIELD] = str(uuid.uuid4())
        return self._store.create(record)

    def patch(self, record_id: str, fields: Mapping[str, Any]) -> Record:
        return self._store.patch(record_id, fields)

    def delete(self, record_id: str) -> bool:
        return self._store.delete(record_id)

    def find(self, **criteria: Any) -> RecordPage:
        """List records whose fields equal every criterion.

        Returns:
            Page of matching records in index order.
        """
        items = tuple(
            record
            for record in self._store.iter_records()
            if all(record.get(name) == value for name, value in criteria.items())
        )
        return RecordPage(items=items)

    def find_one(self, **criteria: Any) -> Record | None:
        """Return the first record matching every criterion, if any."""
        for record in self._store.iter_records():
            if all(record.get(name) == value for name, value in criteria.items()):
                return record
        return None

    def count(self) -> int:
        """Return the number of listed records."""
        return sum(1 for _ in self._store.iter_records())

    def public_view(self, record: Mapping[str, Any]) -> Record:
        """Return a copy of record without secret fields."""
        secret_fields = self._store.spec.secret_fields
        return {name: value for name, value in record.items() if name not in secret_fields}

    def verify(self, strict: bool = False) -> tuple[str, ...]:
        """Return indexed ids with no stored record.

        Raises:
            InconsistentIndexError: In strict mode, when any id is dangling.
        """
        return self._store.dangling_ids(strict=strict)
