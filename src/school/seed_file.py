"""YAML seed file loading.

A seed file maps collection names to lists of records and replaces
the built-in seed tables for the collections it names:

    student:
      - id: student-1
        name: Alice Johnson
        class: SS3
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Mapping, cast

import yaml

from core.errors import RegistrarSeedError
from core.types import CollectionSpec, SeedTable, freeze_record
from store.seeding import validate_seed_records


def load_seed_file(
    seed_path: Path,
    known_collections: Mapping[str, CollectionSpec],
) -> dict[str, SeedTable]:
    """Load and validate seed tables from a YAML file.

    Args:
        seed_path: YAML file path.
        known_collections: Collections the file may name.

    Returns:
        Frozen seed tables keyed by collection name.

    Raises:
        RegistrarSeedError: If the file is missing, malformed, or names
            an unknown collection.
    """
    payload = _load_yaml_payload(seed_path)
    if not isinstance(payload, dict):
        raise RegistrarSeedError(
            f"Seed file {seed_path} must contain a mapping of collection names to record lists."
        )
    tables: dict[str, SeedTable] = {}
    for collection, rows in payload.items():
        if collection not in known_collections:
            raise RegistrarSeedError(
                f"Seed file {seed_path} names unknown collection '{collection}'. "
                f"Expected one of: {', '.join(known_collections)}."
            )
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise RegistrarSeedError(
                f"Seed file {seed_path}: '{collection}' must be a list of record mappings."
            )
        validate_seed_records(str(collection), rows)
        tables[str(collection)] = tuple(freeze_record(row) for row in rows)
    return tables


def apply_seed_tables(
    collections: Mapping[str, CollectionSpec],
    tables: Mapping[str, SeedTable],
) -> dict[str, CollectionSpec]:
    """Return collection specs with seed tables replaced where given."""
    return {
        name: replace(spec, seed_records=tables[name]) if name in tables else spec
        for name, spec in collections.items()
    }


def _load_yaml_payload(seed_path: Path) -> object:
    if not seed_path.exists():
        raise RegistrarSeedError(
            f"Seed file not found at {seed_path}. Unset REGISTRAR_SEED_FILE to use built-in seeds."
        )
    try:
        return cast(object, yaml.safe_load(seed_path.read_text(encoding="utf-8")))
    except yaml.YAMLError as error:
        raise RegistrarSeedError(f"Failed to parse seed file {seed_path}: {error}") from error
