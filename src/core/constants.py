"""Core constants used across Registrar modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".registrar")
DEFAULT_BACKEND = "file"
SUPPORTED_BACKENDS = ("memory", "file", "s3")
DEFAULT_S3_PREFIX = "registrar"
RECORDS_KEY_SEGMENT = "records"
INDEX_KEY_SEGMENT = "_index"
KEY_SEPARATOR = "/"
RECORD_ID_FIELD = "id"
RECORD_FILE_SUFFIX = ".json"
TEMP_FILE_SUFFIX = ".tmp"
PAYLOAD_ENCODING = "utf-8"
MISSING_OBJECT_ERROR_CODES = ("NoSuchKey", "404", "NotFound")
