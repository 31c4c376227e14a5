"""
YNAB transaction payload builder (SSOT).

This is THE single builder that maps YonderTransaction → YNAB SaveTransaction JSON.

Rules:
- Amounts are YNAB milliunits (1000 = 1.00 GBP), integer, exact decimal math
- Sign convention: Debit is an outflow (negative), Credit an inflow (positive)
- Date is the transaction timestamp truncated to the calendar day
- payee_name is the description; memo is "description (category)"
- Always set import_id so YNAB can skip re-imported rows
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from .dedupe import MAX_IMPORT_ID_LENGTH, generate_import_id, is_yonder_import_id
from .yonder_csv import ACCOUNT_CURRENCY, ParseError, TransactionKind, YonderTransaction

logger = logging.getLogger(__name__)

# YNAB milliunits per currency unit
MILLIUNITS_PER_UNIT = 1000

# YNAB API field limits
MAX_PAYEE_NAME_LENGTH = 200
MAX_MEMO_LENGTH = 500


@dataclass
class YnabTransaction:
    """
    Single transaction for the YNAB API.

    Maps to SaveTransaction in the YNAB API.
    """

    account_id: str
    date: date
    amount: int  # milliunits, negative = outflow
    payee_name: str | None = None
    memo: str | None = None
    cleared: str = "cleared"
    approved: bool = False
    import_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to YNAB API JSON format."""
        result: dict[str, Any] = {
            "account_id": self.account_id,
            "date": self.date.isoformat(),
            "amount": self.amount,
            "cleared": self.cleared,
            "approved": self.approved,
        }

        optional_fields = [
            ("payee_name", self.payee_name),
            ("memo", self.memo),
            ("import_id", self.import_id),
        ]
        for field_name, value in optional_fields:
            if value is not None:
                result[field_name] = value

        return result


@dataclass
class ImportBatch:
    """
    Ordered transactions built from one uploaded file.

    Maps to PostTransactionsWrapper in the YNAB API.
    """

    transactions: list[YnabTransaction] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.transactions)

    def to_dict(self) -> dict[str, Any]:
        return {"transactions": [t.to_dict() for t in self.transactions]}

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


@dataclass
class ImportResult:
    """Outcome of one import as reported by YNAB."""

    transaction_ids: list[str] = field(default_factory=list)
    duplicate_import_ids: list[str] = field(default_factory=list)
    rows: int = 0

    @property
    def imported(self) -> int:
        return len(self.transaction_ids)

    @property
    def duplicates(self) -> int:
        return len(self.duplicate_import_ids)

    def __str__(self) -> str:
        return (
            f"Imported new transactions: {self.imported}\n"
            f"Skipped duplicate transactions: {self.duplicates}"
        )


def to_milliunits(amount: Decimal, kind: TransactionKind, line_number: int = 0) -> int:
    """
    Convert a non-negative Yonder amount into signed YNAB milliunits.

    Args:
        amount: Amount in GBP as printed in the export
        kind: Debit (outflow, negative) or Credit (inflow, positive)
        line_number: CSV line, for error reporting

    Raises:
        ParseError: If the amount has sub-milliunit precision
    """
    scaled = amount * MILLIUNITS_PER_UNIT
    if scaled != scaled.to_integral_value():
        raise ParseError(line_number, f"amount {amount} has more than 3 decimal places")

    milliunits = int(scaled)
    return -milliunits if kind is TransactionKind.DEBIT else milliunits


def _truncate(value: str, limit: int) -> str:
    if len(value) <= limit:
        return value
    return value[: limit - 1] + "…"


def build_memo(row: YonderTransaction) -> str:
    """Compose the memo from description and category.

    Foreign currency charges keep the original amount in brackets.
    """
    memo = f"{row.description} ({row.category})" if row.category else row.description
    if row.currency and row.currency != ACCOUNT_CURRENCY:
        memo += f" [{row.amount_charged:.2f} {row.currency}]"
    return _truncate(memo, MAX_MEMO_LENGTH)


def build_ynab_transaction(
    row: YonderTransaction,
    account_id: str,
    cleared: str = "cleared",
    approved: bool = False,
) -> YnabTransaction:
    """
    Build a YNAB transaction from a Yonder CSV row.

    This is THE canonical mapper. All imports use this function.

    Args:
        row: Parsed Yonder transaction
        account_id: Destination YNAB account (from configuration, never the CSV)
        cleared: Cleared status for the new transaction
        approved: Whether YNAB should mark it approved

    Returns:
        YnabTransaction ready for submission
    """
    amount = to_milliunits(row.amount_gbp, row.kind, row.line_number)

    return YnabTransaction(
        account_id=account_id,
        date=row.date_time.date(),
        amount=amount,
        payee_name=_truncate(row.description, MAX_PAYEE_NAME_LENGTH) or None,
        memo=build_memo(row) or None,
        cleared=cleared,
        approved=approved,
        import_id=generate_import_id(row.date_time, amount, row.description),
    )


def build_import_batch(
    rows: Iterable[YonderTransaction],
    account_id: str,
    cleared: str = "cleared",
    approved: bool = False,
) -> ImportBatch:
    """Map every row, preserving file order."""
    batch = ImportBatch(
        transactions=[
            build_ynab_transaction(row, account_id, cleared=cleared, approved=approved)
            for row in rows
        ]
    )
    logger.debug(f"Built import batch with {len(batch)} transactions")
    return batch


def validate_ynab_transaction(transaction: YnabTransaction) -> list[str]:
    """
    Validate a transaction before sending it to YNAB.

    Returns:
        List of validation errors (empty if valid)
    """
    errors: list[str] = []

    if not transaction.account_id:
        errors.append("account_id is required")
    if not isinstance(transaction.date, date):
        errors.append("date must be a date")
    if transaction.import_id is not None:
        if len(transaction.import_id) > MAX_IMPORT_ID_LENGTH:
            errors.append(
                f"import_id longer than {MAX_IMPORT_ID_LENGTH} characters: {transaction.import_id}"
            )
        if not is_yonder_import_id(transaction.import_id):
            errors.append(f"import_id has unexpected format: {transaction.import_id}")
    if transaction.payee_name and len(transaction.payee_name) > MAX_PAYEE_NAME_LENGTH:
        errors.append(f"payee_name longer than {MAX_PAYEE_NAME_LENGTH} characters")
    if transaction.memo and len(transaction.memo) > MAX_MEMO_LENGTH:
        errors.append(f"memo longer than {MAX_MEMO_LENGTH} characters")

    return errors


def validate_import_batch(batch: ImportBatch) -> list[str]:
    """Validate every transaction in a batch, prefixing errors with the position."""
    errors: list[str] = []
    for index, transaction in enumerate(batch.transactions, start=1):
        errors.extend(f"transaction {index}: {e}" for e in validate_ynab_transaction(transaction))
    return errors
