"""Shared JSON serialization for record and index payloads.

This module centralizes record and index byte encoding.
It is reused by the record store and the index manager.
"""

from __future__ import annotations

import json
from typing import Any, Mapping
from urllib.parse import quote

from core.constants import (
    INDEX_KEY_SEGMENT,
    KEY_SEPARATOR,
    PAYLOAD_ENCODING,
    RECORD_ID_FIELD,
    RECORDS_KEY_SEGMENT,
)
from core.errors import RegistrarStoreError
from core.types import Record


def record_key(collection: str, record_id: str) -> str:
    """Build the backend key for one record.

    Args:
        collection: Collection name.
        record_id: Record id; percent-encoded so it stays one key segment.

    Returns:
        Backend key string.
    """
    segment = quote(record_id, safe="")
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return KEY_SEPARATOR.join((collection, RECORDS_KEY_SEGMENT, segment))


def index_key(collection: str, index_name: str) -> str:
    """Build the backend key for a collection index."""
    return KEY_SEPARATOR.join((collection, INDEX_KEY_SEGMENT, index_name))


def encode_record(record: Mapping[str, Any]) -> bytes:
    """Serialize a record into JSON bytes.

    Args:
        record: Record mapping.

    Returns:
        UTF-8 encoded JSON object.

    Raises:
        RegistrarStoreError: If a field value is not JSON serializable.
    """
    try:
        return json.dumps(dict(record), sort_keys=True).encode(PAYLOAD_ENCODING)
    except (TypeError, ValueError) as error:
        raise RegistrarStoreError(
            f"Record '{record.get(RECORD_ID_FIELD)}' is not JSON serializable: {error}. "
            "Use strings, numbers, booleans, lists, or mappings as field values."
        ) from error


def decode_record(payload: bytes, key: str) -> Record:
    """Deserialize record bytes.

    Args:
        payload: Stored bytes.
        key: Backend key, used in error messages.

    Returns:
        Parsed record dictionary.

    Raises:
        RegistrarStoreError: If payload is not a JSON object with an id.
    """
    parsed = _parse_json(payload, key)
    if not isinstance(parsed, dict) or not isinstance(parsed.get(RECORD_ID_FIELD), str):
        raise RegistrarStoreError(
            f"Invalid record payload at '{key}': expected JSON object with string id."
        )
    return parsed


def encode_index(collection: str, index_name: str, ids: list[str]) -> bytes:
    """Serialize an ordered id index into JSON bytes."""
    payload = {"collection": collection, "index": index_name, "ids": ids}
    return json.dumps(payload, sort_keys=True).encode(PAYLOAD_ENCODING)


def decode_index(payload: bytes, key: str) -> list[str]:
    """Deserialize index bytes into an ordered id list.

    Args:
        payload: Stored bytes.
        key: Backend key, used in error messages.

    Returns:
        Ordered id list.

    Raises:
        RegistrarStoreError: If payload is not a valid index object.
    """
    parsed = _parse_json(payload, key)
    ids = parsed.get("ids") if isinstance(parsed, dict) else None
    if not isinstance(ids, list) or not all(isinstance(item, str) for item in ids):
        raise RegistrarStoreError(
            f"Invalid index payload at '{key}': expected JSON object with string ids. "
            "Rebuild the index from stored records."
        )
    return ids


def _parse_json(payload: bytes, key: str) -> Any:
    try:
        return json.loads(payload.decode(PAYLOAD_ENCODING))
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise RegistrarStoreError(f"Failed to parse stored payload at '{key}': {error}.") from error
