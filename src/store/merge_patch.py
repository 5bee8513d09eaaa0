"""Field-level merge for record patches."""

from __future__ import annotations

from typing import Any, Mapping

from core.constants import RECORD_ID_FIELD
from core.errors import RegistrarStoreError
from core.types import Record


def merge_patch(
    current: Mapping[str, Any],
    fields: Mapping[str, Any],
    secret_fields: tuple[str, ...] = (),
) -> Record:
    """Merge patch fields over a stored record.

    Fields missing from the patch keep their stored value. Fields present
    in the patch overwrite, even when empty or falsy, except secret fields
    whose patch value is blank ("" or None); those keep the stored value.

    Args:
        current: Stored record.
        fields: Patch fields.
        secret_fields: Fields ignored when blank.

    Returns:
        New merged record.

    Raises:
        RegistrarStoreError: If the patch tries to change the record id.
    """
    record_id = current[RECORD_ID_FIELD]
    if RECORD_ID_FIELD in fields and fields[RECORD_ID_FIELD] != record_id:
        raise RegistrarStoreError(
            f"Cannot change id of record '{record_id}' through a patch. "
            "Create a new record and delete the old one instead."
        )
    merged = dict(current)
    for name, value in fields.items():
        if name in secret_fields and value in ("", None):
            continue
        merged[name] = value
    return merged
