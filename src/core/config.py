"""Runtime configuration model for Registrar.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_BACKEND,
    DEFAULT_DATA_ROOT,
    DEFAULT_S3_PREFIX,
    SUPPORTED_BACKENDS,
)
from core.errors import RegistrarConfigError


@dataclass(frozen=True)
class RegistrarConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for the filesystem backend.
        backend: Storage backend name (memory, file, or s3).
        s3_bucket: Bucket used by the s3 backend.
        s3_prefix: Key prefix inside the bucket.
        s3_region: Optional default AWS region for S3 operations.
        s3_profile: Optional AWS profile for boto3 session initialization.
        seed_file: Optional YAML file replacing the built-in seed tables.
    """

    data_root: Path
    backend: str
    s3_bucket: str | None
    s3_prefix: str
    s3_region: str | None
    s3_profile: str | None
    seed_file: Path | None

    @classmethod
    def from_env(cls) -> "RegistrarConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            RegistrarConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("REGISTRAR_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        backend = parse_backend_name(os.getenv("REGISTRAR_BACKEND", DEFAULT_BACKEND))
        s3_bucket = os.getenv("REGISTRAR_S3_BUCKET") or None
        s3_prefix = os.getenv("REGISTRAR_S3_PREFIX", DEFAULT_S3_PREFIX).strip("/")
        seed_file_value = os.getenv("REGISTRAR_SEED_FILE")
        check_backend_settings(backend, s3_bucket)
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            backend=backend,
            s3_bucket=s3_bucket,
            s3_prefix=s3_prefix,
            s3_region=os.getenv("REGISTRAR_S3_REGION"),
            s3_profile=os.getenv("REGISTRAR_S3_PROFILE"),
            seed_file=Path(seed_file_value).expanduser() if seed_file_value else None,
        )


def check_backend_settings(backend: str, s3_bucket: str | None) -> None:
    """Reject backend choices missing their required settings.

    Raises:
        RegistrarConfigError: If the s3 backend has no bucket.
    """
    if backend == "s3" and s3_bucket is None:
        raise RegistrarConfigError(
            "REGISTRAR_BACKEND=s3 requires REGISTRAR_S3_BUCKET. "
            "Set the bucket name or choose the file backend."
        )


def parse_backend_name(raw_value: str) -> str:
    """Parse and validate a backend name.

    Args:
        raw_value: Raw backend name from environment or CLI.

    Returns:
        Normalized backend name.

    Raises:
        RegistrarConfigError: If the backend is not supported.
    """
    backend = raw_value.strip().lower()
    if backend not in SUPPORTED_BACKENDS:
        raise RegistrarConfigError(
            "Invalid REGISTRAR_BACKEND value: "
            f"expected one of {', '.join(SUPPORTED_BACKENDS)}, got '{raw_value}'."
        )
    return backend
