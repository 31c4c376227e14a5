"""
SSOT (Single Source of Truth) schemas for the import pipeline.

Yonder CSV rows come in, YNAB transactions go out. No other module defines
transaction shapes.
"""

from .dedupe import (
    HASH_PREFIX_LENGTH,
    IMPORT_ID_PREFIX,
    MAX_IMPORT_ID_LENGTH,
    compute_row_hash,
    generate_import_id,
    is_yonder_import_id,
)
from .ynab_payload import (
    MILLIUNITS_PER_UNIT,
    ImportBatch,
    ImportResult,
    YnabTransaction,
    build_import_batch,
    build_memo,
    build_ynab_transaction,
    to_milliunits,
    validate_import_batch,
    validate_ynab_transaction,
)
from .yonder_csv import (
    YONDER_COLUMNS,
    ParseError,
    TransactionKind,
    YonderTransaction,
    iter_yonder_transactions,
    parse_yonder_csv,
)

__all__ = [
    # Yonder CSV (canonical input schema)
    "YONDER_COLUMNS",
    "ParseError",
    "TransactionKind",
    "YonderTransaction",
    "iter_yonder_transactions",
    "parse_yonder_csv",
    # YNAB payload (canonical output schema)
    "MILLIUNITS_PER_UNIT",
    "YnabTransaction",
    "ImportBatch",
    "ImportResult",
    "build_ynab_transaction",
    "build_import_batch",
    "build_memo",
    "to_milliunits",
    "validate_ynab_transaction",
    "validate_import_batch",
    # Dedupe
    "IMPORT_ID_PREFIX",
    "HASH_PREFIX_LENGTH",
    "MAX_IMPORT_ID_LENGTH",
    "compute_row_hash",
    "generate_import_id",
    "is_yonder_import_id",
]
