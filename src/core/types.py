"""Shared typed models.

This module defines immutable data models used by the store,
seeding, SDK, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

Record = dict[str, Any]
"""A schema-free entity record: field names to JSON values plus a string ``id``."""

SeedTable = tuple[Mapping[str, Any], ...]


@dataclass(frozen=True)
class RecordPage:
    """Page-shaped listing envelope.

    Attributes:
        items: Resolved records in index order.
        next_cursor: Continuation token; always None until paging is added.
    """

    items: tuple[Record, ...]
    next_cursor: str | None = None

    def to_payload(self) -> dict[str, object]:
        """Return the JSON-safe envelope."""
        return {"items": [dict(item) for item in self.items], "next_cursor": self.next_cursor}


@dataclass(frozen=True)
class CollectionSpec:
    """Static description of one collection.

    Attributes:
        name: Collection name, also the record key namespace.
        index_name: Name of the persisted id index for the collection.
        seed_records: Canonical records written once on first use.
        secret_fields: Fields dropped from patches when blank and hidden from views.
        fixed_fields: Values stamped onto every record added with a generated id.
        blank_defaults: Values used on add when a field is missing or blank.
    """

    name: str
    index_name: str
    seed_records: SeedTable = ()
    secret_fields: tuple[str, ...] = field(default_factory=tuple)
    fixed_fields: Mapping[str, Any] = field(default_factory=dict)
    blank_defaults: Mapping[str, Any] = field(default_factory=dict)


def freeze_record(record: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return a read-only view over a copy of a record.

    Args:
        record: Record mapping to freeze.

    Returns:
        Immutable mapping proxy.
    """
    return MappingProxyType(dict(record))
