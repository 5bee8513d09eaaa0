"""Unit tests for school collections and seed file loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import RegistrarSeedError
from school.collection_specs import STUDENT_SEED, default_collections
from school.seed_file import apply_seed_tables, load_seed_file


def test_default_collections_declare_index_names() -> None:
    """Each collection should carry its persisted index name."""
    specs = default_collections()

    assert {name: spec.index_name for name, spec in specs.items()} == {
        "admin": "admins",
        "staff": "staff_members",
        "student": "students",
        "result": "results",
    }


def test_student_seed_table_is_read_only() -> None:
    """Seed rows should not be mutable at runtime."""
    with pytest.raises(TypeError):
        STUDENT_SEED[0]["class"] = "SS1"  # type: ignore[index]


def test_student_seed_rows_follow_numbering() -> None:
    """Student seed rows should pair ids with school numbers."""
    assert [(row["id"], row["studentId"]) for row in STUDENT_SEED[:2]] == [
        ("student-1", "GDSS001"),
        ("student-2", "GDSS002"),
    ]


def test_load_seed_file_parses_tables(tmp_path: Path) -> None:
    """Seed files should load into frozen tables per collection."""
    seed_path = tmp_path / "seed.yaml"
    seed_path.write_text(
        "result:\n  - id: result-7\n    studentId: student-4\n    score: 64\n",
        encoding="utf-8",
    )

    tables = load_seed_file(seed_path, default_collections())

    assert tables["result"][0]["score"] == 64


def test_load_seed_file_rejects_unknown_collection(tmp_path: Path) -> None:
    """Seed files may only name configured collections."""
    seed_path = tmp_path / "seed.yaml"
    seed_path.write_text("parents:\n  - id: parent-1\n", encoding="utf-8")

    with pytest.raises(RegistrarSeedError):
        load_seed_file(seed_path, default_collections())


def test_load_seed_file_rejects_missing_ids(tmp_path: Path) -> None:
    """Every seed record needs a string id."""
    seed_path = tmp_path / "seed.yaml"
    seed_path.write_text("staff:\n  - name: No Id\n", encoding="utf-8")

    with pytest.raises(RegistrarSeedError):
        load_seed_file(seed_path, default_collections())


def test_load_seed_file_rejects_invalid_yaml(tmp_path: Path) -> None:
    """Malformed YAML should raise a seed error."""
    seed_path = tmp_path / "seed.yaml"
    seed_path.write_text("student: [unclosed\n", encoding="utf-8")

    with pytest.raises(RegistrarSeedError):
        load_seed_file(seed_path, default_collections())


def test_load_seed_file_requires_existing_file(tmp_path: Path) -> None:
    """Missing seed files should raise a seed error."""
    with pytest.raises(RegistrarSeedError):
        load_seed_file(tmp_path / "missing.yaml", default_collections())


def test_apply_seed_tables_keeps_other_collections() -> None:
    """Collections not named by the file should keep built-in seeds."""
    specs = default_collections()

    updated = apply_seed_tables(specs, {"admin": ()})

    assert updated["admin"].seed_records == () and updated["student"] is specs["student"]


def test_load_seed_file_rejects_yaml_dates(tmp_path: Path) -> None:
    """YAML date values cannot be stored and should fail at load time."""
    seed_path = tmp_path / "seed.yaml"
    seed_path.write_text("result:\n  - id: result-9\n    session: 2024-01-01\n", encoding="utf-8")

    with pytest.raises(RegistrarSeedError):
        load_seed_file(seed_path, default_collections())


def test_user_collections_stamp_role_and_default_password() -> None:
    """User collections should carry add-time defaults; results should not."""
    specs = default_collections()

    assert (
        dict(specs["staff"].fixed_fields),
        dict(specs["staff"].blank_defaults),
        dict(specs["result"].fixed_fields),
    ) == ({"role": "staff"}, {"password": "password"}, {})
