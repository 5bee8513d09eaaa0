"""Registrar CLI entry points.
This module exposes seed, listing, and record mutation commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import RegistrarConfig, check_backend_settings, parse_backend_name
from core.constants import SUPPORTED_BACKENDS
from core.errors import RegistrarError
from core.logging_config import set_log_level
from store.registry_sdk import CollectionHandle, RegistrarClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="registrar", description="School records store CLI")
    parser.add_argument("--data-root", help="Override REGISTRAR_DATA_ROOT for this command")
    parser.add_argument(
        "--backend",
        choices=SUPPORTED_BACKENDS,
        help="Override REGISTRAR_BACKEND for this command",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Print store events at or above this level to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_seed_command(subparsers)
    _add_list_command(subparsers)
    _add_get_command(subparsers)
    _add_create_command(subparsers)
    _add_patch_command(subparsers)
    _add_delete_command(subparsers)
    _add_count_command(subparsers)
    _add_check_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Registrar CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        set_log_level(args.log_level)
    try:
        client = _build_client(args.data_root, args.backend)
        client.ensure_seeded()
        return _dispatch(client, args)
    except RegistrarError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


def _dispatch(client: RegistrarClient, args: argparse.Namespace) -> int:
    """Route parsed args to a command handler."""
    if args.command == "seed":
        return _run_seed_command(client)
    collection = client.collection(args.collection)
    if args.command == "list":
        return _run_list_command(collection, args)
    if args.command == "get":
        _print_record(collection, collection.get(args.id))
        return 0
    if args.command == "create":
        return _run_create_command(collection, args)
    if args.command == "patch":
        _print_record(collection, collection.patch(args.id, _parse_assignments(args.set)))
        return 0
    if args.command == "delete":
        return _run_delete_command(collection, args)
    if args.command == "count":
        print(collection.count())
        return 0
    if args.command == "check":
        return _run_check_command(collection)
    raise RegistrarError(f"Unsupported command: {args.command}")


def _build_client(data_root: str | None, backend: str | None) -> RegistrarClient:
    """Build SDK client with optional overrides.

    Args:
        data_root: Optional data root override path.
        backend: Optional backend name override.

    Returns:
        Configured SDK client.
    """
    config = RegistrarConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    if backend:
        config = replace(config, backend=parse_backend_name(backend))
        check_backend_settings(config.backend, config.s3_bucket)
    return RegistrarClient(config)


def _run_seed_command(client: RegistrarClient) -> int:
    """Handle seed command; seeding itself already ran in main."""
    for name in client.collection_names():
        print(f"{name}\t{client.collection(name).count()}")
    return 0


def _run_list_command(collection: CollectionHandle, args: argparse.Namespace) -> int:
    """Handle list command.

    Args:
        collection: Collection handle.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    criteria = _parse_assignments(args.where)
    page = collection.find(**criteria) if criteria else collection.list()
    payload = {
        "items": [collection.public_view(record) for record in page.items],
        "next_cursor": page.next_cursor,
    }
    print(json.dumps(payload, indent=2, sort_keys=True))
    return 0


def _run_create_command(collection: CollectionHandle, args: argparse.Namespace) -> int:
    """Handle create command."""
    fields = _parse_assignments(args.set)
    if args.id:
        record = collection.create({**fields, "id": args.id})
    else:
        record = collection.add(fields)
    _print_record(collection, record)
    return 0


def _run_delete_command(collection: CollectionHandle, args: argparse.Namespace) -> int:
    """Handle delete command; a missing id exits with code 1."""
    if not collection.delete(args.id):
        print(f"error: no '{collection.name}' record with id '{args.id}'", file=sys.stderr)
        return 1
    print(json.dumps({"id": args.id}))
    return 0


def _run_check_command(collection: CollectionHandle) -> int:
    """Handle check command; dangling index ids exit with code 1."""
    dangling = collection.verify()
    for record_id in dangling:
        print(f"dangling\t{record_id}")
    return 1 if dangling else 0


def _print_record(collection: CollectionHandle, record: dict[str, Any]) -> None:
    print(json.dumps(collection.public_view(record), indent=2, sort_keys=True))


def _parse_assignments(assignments: Sequence[str] | None) -> dict[str, Any]:
    """Parse repeated ``field=value`` arguments.

    Values that parse as JSON keep their JSON type; others stay strings.

    Raises:
        RegistrarError: If an assignment has no ``=`` or an empty field.
    """
    fields: dict[str, Any] = {}
    for assignment in assignments or ():
        name, separator, raw_value = assignment.partition("=")
        if not separator or not name:
            raise RegistrarError(f"Invalid assignment '{assignment}': expected field=value.")
        fields[name] = _parse_value(raw_value)
    return fields


def _parse_value(raw_value: str) -> Any:
    try:
        return json.loads(raw_value)
    except json.JSONDecodeError:
        return raw_value


def _add_seed_command(subparsers: Any) -> None:
    """Register seed subcommand."""
    subparsers.add_parser("seed", help="Seed collections and print record counts")


def _add_list_command(subparsers: Any) -> None:
    """Register list subcommand."""
    parser = subparsers.add_parser("list", help="List records in a collection")
    parser.add_argument("collection", help="Collection name")
    parser.add_argument(
        "--where",
        action="append",
        metavar="FIELD=VALUE",
        help="Only list records whose field equals value (repeatable)",
    )


def _add_get_command(subparsers: Any) -> None:
    """Register get subcommand."""
    parser = subparsers.add_parser("get", help="Show one record")
    parser.add_argument("collection", help="Collection name")
    parser.add_argument("id", help="Record id")


def _add_create_command(subparsers: Any) -> None:
    """Register create subcommand."""
    parser = subparsers.add_parser("create", help="Create a record")
    parser.add_argument("collection", help="Collection name")
    parser.add_argument("--id", help="Explicit record id; a UUID is generated when omitted")
    parser.add_argument(
        "--set",
        action="append",
        metavar="FIELD=VALUE",
        help="Record field assignment (repeatable)",
    )


def _add_patch_command(subparsers: Any) -> None:
    """Register patch subcommand."""
    parser = subparsers.add_parser("patch", help="Merge fields into a record")
    parser.add_argument("collection", help="Collection name")
    parser.add_argument("id", help="Record id")
    parser.add_argument(
        "--set",
        action="append",
        metavar="FIELD=VALUE",
        help="Field assignment to merge (repeatable)",
    )


def _add_delete_command(subparsers: Any) -> None:
    """Register delete subcommand."""
    parser = subparsers.add_parser("delete", help="Delete a record")
    parser.add_argument("collection", help="Collection name")
    parser.add_argument("id", help="Record id")


def _add_count_command(subparsers: Any) -> None:
    """Register count subcommand."""
    parser = subparsers.add_parser("count", help="Print the number of records")
    parser.add_argument("collection", help="Collection name")


def _add_check_command(subparsers: Any) -> None:
    """Register check subcommand."""
    parser = subparsers.add_parser("check", help="Report indexed ids with no stored record")
    parser.add_argument("collection", help="Collection name")
