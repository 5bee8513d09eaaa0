"""Collection declarations and canonical seed tables.

Seed tables are tuples of read-only mappings; nothing here is mutated
at runtime. Seed order is the initial listing order.
"""

from __future__ import annotations

from core.types import CollectionSpec, SeedTable, freeze_record

ADMIN_COLLECTION = "admin"
STAFF_COLLECTION = "staff"
STUDENT_COLLECTION = "student"
RESULT_COLLECTION = "result"
PASSWORD_FIELD = "password"
ROLE_FIELD = "role"
DEFAULT_PASSWORD = "password"

ADMIN_SEED: SeedTable = (
    freeze_record(
        {
            "id": "admin-1",
            "name": "Waziri Ibrahim",
            "email": "admin@gdss.com",
            "role": "admin",
            "photoUrl": "https://i.pravatar.cc/150?u=admin-1",
            "password": "password",
        }
    ),
)

STAFF_SEED: SeedTable = (
    freeze_record(
        {
            "id": "staff-1",
            "name": "Mr. John Doe",
            "email": "staff@gdss.com",
            "role": "staff",
            "title": "Mathematics Teacher",
            "photoUrl": "https://i.pravatar.cc/150?u=staff-1",
            "password": "password",
            "phone": "123-456-7890",
        }
    ),
    freeze_record(
        {
            "id": "staff-2",
            "name": "Mrs. Jane Smith",
            "email": "j.smith@gdss.com",
            "role": "staff",
            "title": "English Teacher",
            "photoUrl": "https://i.pravatar.cc/150?u=staff-2",
            "password": "password",
            "phone": "098-765-4321",
        }
    ),
)


def _student(number: int, name: str, email: str, student_class: str) -> dict[str, object]:
    record_id = f"student-{number}"
    return {
        "id": record_id,
        "name": name,
        "email": email,
        "role": "student",
        "studentId": f"GDSS{number:03d}",
        "class": student_class,
        "photoUrl": f"https://i.pravatar.cc/150?u={record_id}",
        "password": "password",
    }


STUDENT_SEED: SeedTable = tuple(
    freeze_record(_student(*row))
    for row in (
        (1, "Alice Johnson", "student@gdss.com", "SS3"),
        (2, "Bob Williams", "b.williams@gdss.com", "SS2"),
        (3, "Charlie Brown", "c.brown@gdss.com", "SS1"),
        (4, "Diana Miller", "d.miller@gdss.com", "SS3"),
        (5, "Ethan Davis", "e.davis@gdss.com", "SS2"),
    )
)

RESULT_SEED: SeedTable = (
    freeze_record(
        {
            "id": "result-1",
            "studentId": "student-1",
            "subject": "Mathematics",
            "score": 85,
            "term": "First",
            "session": "2023/2024",
            "grade": "A",
            "remarks": "Excellent work.",
        }
    ),
    freeze_record(
        {
            "id": "result-2",
            "studentId": "student-1",
            "subject": "English",
            "score": 92,
            "term": "First",
            "session": "2023/2024",
            "grade": "A+",
            "remarks": "Outstanding performance.",
        }
    ),
    freeze_record(
        {
            "id": "result-3",
            "studentId": "student-2",
            "subject": "Mathematics",
            "score": 78,
            "term": "First",
            "session": "2023/2024",
            "grade": "B",
            "remarks": "Good effort.",
        }
    ),
)


def _user_collection(name: str, index_name: str, seed: SeedTable) -> CollectionSpec:
    """Declare a login-bearing collection whose role matches its name."""
    return CollectionSpec(
        name,
        index_name,
        seed,
        secret_fields=(PASSWORD_FIELD,),
        fixed_fields=freeze_record({ROLE_FIELD: name}),
        blank_defaults=freeze_record({PASSWORD_FIELD: DEFAULT_PASSWORD}),
    )


SCHOOL_COLLECTIONS: tuple[CollectionSpec, ...] = (
    _user_collection(ADMIN_COLLECTION, "admins", ADMIN_SEED),
    _user_collection(STAFF_COLLECTION, "staff_members", STAFF_SEED),
    _user_collection(STUDENT_COLLECTION, "students", STUDENT_SEED),
    CollectionSpec(RESULT_COLLECTION, "results", RESULT_SEED),
)


def default_collections() -> dict[str, CollectionSpec]:
    """Return collection specs keyed by name, in declaration order."""
    return {spec.name: spec for spec in SCHOOL_COLLECTIONS}
