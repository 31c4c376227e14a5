"""
Test fixtures for Yonder CSV exports.

- yonder.csv: single debit row, as exported by the Yonder app
- yonder_mixed.csv: debits, a refund credit, a foreign currency charge and
  a description containing the delimiter
"""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent


def load_fixture_bytes(name: str) -> bytes:
    """Load a fixture file as raw bytes (as uploaded)."""
    return (FIXTURES_DIR / name).read_bytes()


def get_single_row_export() -> bytes:
    """Get the single-row Yonder export."""
    return load_fixture_bytes("yonder.csv")


def get_mixed_export() -> bytes:
    """Get the multi-row Yonder export."""
    return load_fixture_bytes("yonder_mixed.csv")
