"""
Yonder CSV export parser.

Yonder exports a fixed eight-column CSV:

    Date/Time of transaction,Description,Amount (GBP),Amount (in Charged Currency),
    Currency,Category,Debit or Credit,Country

Rules:
- Line 1 is the header and is skipped by position (never validated)
- Every data row must have exactly eight fields
- Amounts are non-negative decimals; the direction column carries the sign
- Direction is exactly "Debit" or "Credit"
- Any malformed row raises ParseError naming its line number
"""

import csv
import io
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum

logger = logging.getLogger(__name__)

YONDER_COLUMNS = (
    "Date/Time of transaction",
    "Description",
    "Amount (GBP)",
    "Amount (in Charged Currency)",
    "Currency",
    "Category",
    "Debit or Credit",
    "Country",
)

# Currency of the "Amount (GBP)" column (the account currency)
ACCOUNT_CURRENCY = "GBP"


class ParseError(Exception):
    """CSV content could not be parsed as a Yonder export."""

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        self.message = message
        super().__init__(f"line {line_number}: {message}")


class TransactionKind(str, Enum):
    """Direction of a Yonder transaction."""

    DEBIT = "Debit"
    CREDIT = "Credit"


@dataclass(frozen=True)
class YonderTransaction:
    """One row of a Yonder CSV export."""

    date_time: datetime
    description: str
    amount_gbp: Decimal
    amount_charged: Decimal
    currency: str
    category: str
    kind: TransactionKind
    country: str
    line_number: int = 0


def _parse_amount(value: str, column: str, line_number: int) -> Decimal:
    try:
        amount = Decimal(value.strip())
    except InvalidOperation as e:
        raise ParseError(line_number, f"invalid amount in '{column}': {value!r}") from e

    if not amount.is_finite():
        raise ParseError(line_number, f"invalid amount in '{column}': {value!r}")
    if amount < 0:
        raise ParseError(line_number, f"negative amount in '{column}': {value!r}")
    return amount


def _parse_timestamp(value: str, line_number: int) -> datetime:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError as e:
        raise ParseError(line_number, f"invalid transaction date/time: {value!r}") from e


def _parse_kind(value: str, line_number: int) -> TransactionKind:
    try:
        return TransactionKind(value)
    except ValueError as e:
        raise ParseError(
            line_number, f"unknown direction {value!r} (expected 'Debit' or 'Credit')"
        ) from e


def parse_row(fields: list[str], line_number: int) -> YonderTransaction:
    """Parse one CSV record (already split into fields)."""
    if len(fields) != len(YONDER_COLUMNS):
        raise ParseError(
            line_number,
            f"expected {len(YONDER_COLUMNS)} fields, got {len(fields)}",
        )

    date_time, description, amount_gbp, amount_charged, currency, category, kind, country = fields

    return YonderTransaction(
        date_time=_parse_timestamp(date_time, line_number),
        description=description.strip(),
        amount_gbp=_parse_amount(amount_gbp, YONDER_COLUMNS[2], line_number),
        amount_charged=_parse_amount(amount_charged, YONDER_COLUMNS[3], line_number),
        currency=currency.strip().upper(),
        category=category.strip(),
        kind=_parse_kind(kind, line_number),
        country=country.strip().upper(),
        line_number=line_number,
    )


def _decode(data: bytes | str) -> str:
    if isinstance(data, str):
        return data
    try:
        # utf-8-sig tolerates the BOM some spreadsheet tools prepend
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(1, f"file is not valid UTF-8: {e.reason}") from e


def iter_yonder_transactions(data: bytes | str) -> Iterator[YonderTransaction]:
    """
    Lazily parse a Yonder CSV export.

    Args:
        data: Raw CSV bytes (UTF-8) or text

    Yields:
        YonderTransaction per non-blank data row, in file order

    Raises:
        ParseError: On the first malformed row
    """
    text = _decode(data)
    reader = csv.reader(io.StringIO(text, newline=""))

    # Header row is skipped by position
    try:
        next(reader)
    except StopIteration:
        return
    except csv.Error as e:
        raise ParseError(reader.line_num, f"malformed CSV: {e}") from e

    while True:
        try:
            fields = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise ParseError(reader.line_num, f"malformed CSV: {e}") from e

        if not fields or all(not f.strip() for f in fields):
            continue

        yield parse_row(fields, reader.line_num)


def parse_yonder_csv(data: bytes | str) -> list[YonderTransaction]:
    """Parse a whole Yonder CSV export (all-or-nothing)."""
    transactions = list(iter_yonder_transactions(data))
    logger.debug(f"Parsed {len(transactions)} Yonder transactions")
    return transactions
