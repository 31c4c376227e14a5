"""
Import identifier generation (CRITICAL).

This module defines THE deterministic import_id function.
YNAB rejects a transaction whose import_id already exists on the account and
reports it in duplicate_import_ids, which makes re-imports of the same file
safe.

Format: YND:{hash}:{date}
   - hash = SHA256(timestamp|amount_milliunits|description)[:16]
   - date = YYYY-MM-DD (kept readable for debugging in YNAB)

The import_id must be:
- Stable: Same row always produces the same id
- Collision-resistant: Different rows produce different ids
- Short: YNAB limits import_id to 36 characters
"""

import hashlib
from datetime import datetime

# Prefix marking ids produced by this importer
IMPORT_ID_PREFIX = "YND"

# Separator between id components
IMPORT_ID_SEPARATOR = ":"

# Length of the hash prefix to use
HASH_PREFIX_LENGTH = 16

# YNAB API limit for import_id
MAX_IMPORT_ID_LENGTH = 36


def _normalize_string(value: str | None) -> str:
    """Normalize a string for hashing (lowercase, collapse whitespace)."""
    if not value:
        return ""
    return " ".join(value.split()).lower()


def compute_row_hash(date_time: datetime, amount_milliunits: int, description: str) -> str:
    """
    Compute a deterministic hash for a transaction row.

    Hash components (in order):
    - date_time: ISO-8601 with microseconds
    - amount_milliunits: Signed integer amount
    - description: Normalized description

    Returns:
        64-character lowercase hex SHA256 hash
    """
    hash_input = "|".join(
        [
            date_time.isoformat(timespec="microseconds"),
            str(amount_milliunits),
            _normalize_string(description),
        ]
    )
    return hashlib.sha256(hash_input.encode("utf-8")).hexdigest()


def generate_import_id(date_time: datetime, amount_milliunits: int, description: str) -> str:
    """
    Generate the YNAB import_id for a transaction row.

    Examples:
        >>> generate_import_id(datetime(2026, 1, 1, 10, 34, 50), -3000, "TFL")
        'YND:...:2026-01-01'
    """
    row_hash = compute_row_hash(date_time, amount_milliunits, description)
    return IMPORT_ID_SEPARATOR.join(
        [
            IMPORT_ID_PREFIX,
            row_hash[:HASH_PREFIX_LENGTH],
            date_time.date().isoformat(),
        ]
    )


def is_yonder_import_id(import_id: str | None) -> bool:
    """Check whether an import_id was produced by this importer."""
    if not import_id:
        return False
    parts = import_id.split(IMPORT_ID_SEPARATOR)
    return (
        len(parts) == 3
        and parts[0] == IMPORT_ID_PREFIX
        and len(parts[1]) == HASH_PREFIX_LENGTH
    )
