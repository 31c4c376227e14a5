"""Tests for the Yonder CSV parser."""

from datetime import datetime
from decimal import Decimal

import pytest

from fixtures import get_mixed_export, get_single_row_export
from yonder_ynab.schemas.yonder_csv import (
    ParseError,
    TransactionKind,
    YonderTransaction,
    iter_yonder_transactions,
    parse_yonder_csv,
)

HEADER = (
    "Date/Time of transaction,Description,Amount (GBP),Amount (in Charged Currency),"
    "Currency,Category,Debit or Credit,Country"
)


def make_csv(*rows: str, header: str = HEADER) -> str:
    return "\n".join([header, *rows]) + "\n"


class TestParseYonderCsv:
    """Tests for well-formed exports."""

    def test_parse_single_row_export(self):
        """The exported sample parses into one typed row."""
        transactions = parse_yonder_csv(get_single_row_export())

        assert transactions == [
            YonderTransaction(
                date_time=datetime(2026, 1, 1, 10, 34, 50, 211697),
                description="TFL - Transport for London",
                amount_gbp=Decimal("3.00"),
                amount_charged=Decimal("3.00"),
                currency="GBP",
                category="Transport",
                kind=TransactionKind.DEBIT,
                country="GBR",
                line_number=2,
            )
        ]

    def test_rows_keep_file_order(self):
        transactions = parse_yonder_csv(get_mixed_export())

        assert [t.description for t in transactions] == [
            "TFL - Transport for London",
            "Pret A Manger, Kings Cross",
            "Amazon refund",
            'Boulangerie "Chez Paul"',
        ]
        assert [t.line_number for t in transactions] == [2, 3, 4, 5]

    def test_quoted_delimiter_and_escaped_quotes(self):
        """Standard CSV quoting: embedded commas and doubled quotes."""
        transactions = parse_yonder_csv(get_mixed_export())

        assert transactions[1].description == "Pret A Manger, Kings Cross"
        assert transactions[3].description == 'Boulangerie "Chez Paul"'

    def test_credit_and_foreign_currency(self):
        transactions = parse_yonder_csv(get_mixed_export())

        refund = transactions[2]
        assert refund.kind is TransactionKind.CREDIT
        assert refund.amount_gbp == Decimal("12.99")

        foreign = transactions[3]
        assert foreign.currency == "EUR"
        assert foreign.amount_gbp == Decimal("4.26")
        assert foreign.amount_charged == Decimal("5.00")
        assert foreign.country == "FRA"

    def test_unquoted_fields(self):
        csv_text = make_csv(
            "2026-02-01T12:00:00,Coffee,2.50,2.50,GBP,Eating Out,Debit,GBR"
        )

        (row,) = parse_yonder_csv(csv_text)
        assert row.description == "Coffee"
        assert row.amount_gbp == Decimal("2.50")

    def test_header_only_yields_nothing(self):
        assert parse_yonder_csv(make_csv()) == []

    def test_empty_input_yields_nothing(self):
        assert parse_yonder_csv(b"") == []

    def test_header_is_not_validated(self):
        """Line 1 is skipped by position, whatever it contains."""
        csv_text = make_csv(
            "2026-02-01T12:00:00,Coffee,2.50,2.50,GBP,Eating Out,Debit,GBR",
            header="completely,different,header",
        )

        assert len(parse_yonder_csv(csv_text)) == 1

    def test_blank_lines_are_skipped(self):
        csv_text = (
            HEADER
            + "\n\n"
            + "2026-02-01T12:00:00,Coffee,2.50,2.50,GBP,Eating Out,Debit,GBR\n\n"
        )

        assert len(parse_yonder_csv(csv_text)) == 1

    def test_utf8_bom_is_tolerated(self):
        data = "\ufeff".encode("utf-8") + get_single_row_export()

        assert len(parse_yonder_csv(data)) == 1

    def test_crlf_line_endings(self):
        data = get_single_row_export().replace(b"\n", b"\r\n")

        (row,) = parse_yonder_csv(data)
        assert row.country == "GBR"

    def test_iteration_is_lazy(self):
        """Rows before a malformed line are produced before the error."""
        csv_text = make_csv(
            "2026-02-01T12:00:00,Coffee,2.50,2.50,GBP,Eating Out,Debit,GBR",
            "2026-02-02T12:00:00,Tea,abc,2.50,GBP,Eating Out,Debit,GBR",
        )

        rows = iter_yonder_transactions(csv_text)
        first = next(rows)
        assert first.description == "Coffee"

        with pytest.raises(ParseError):
            next(rows)


class TestParseErrors:
    """Malformed rows fail with the offending line number."""

    def test_malformed_amount_reports_line(self):
        csv_text = make_csv(
            "2026-02-01T12:00:00,Coffee,2.50,2.50,GBP,Eating Out,Debit,GBR",
            "2026-02-02T12:00:00,Tea,2.50,2.50,GBP,Eating Out,Debit,GBR",
            "2026-02-03T12:00:00,Cake,three,3.00,GBP,Eating Out,Debit,GBR",
        )

        with pytest.raises(ParseError) as exc_info:
            parse_yonder_csv(csv_text)

        assert exc_info.value.line_number == 4
        assert "Amount (GBP)" in exc_info.value.message
        assert "line 4" in str(exc_info.value)

    def test_malformed_charged_amount(self):
        csv_text = make_csv("2026-02-01T12:00:00,Coffee,2.50,,GBP,Eating Out,Debit,GBR")

        with pytest.raises(ParseError) as exc_info:
            parse_yonder_csv(csv_text)

        assert exc_info.value.line_number == 2
        assert "Amount (in Charged Currency)" in exc_info.value.message

    def test_negative_amount_rejected(self):
        csv_text = make_csv("2026-02-01T12:00:00,Coffee,-2.50,2.50,GBP,Eating Out,Debit,GBR")

        with pytest.raises(ParseError, match="negative amount"):
            parse_yonder_csv(csv_text)

    @pytest.mark.parametrize("value", ["NaN", "Infinity"])
    def test_non_finite_amount_rejected(self, value):
        csv_text = make_csv(f"2026-02-01T12:00:00,Coffee,{value},2.50,GBP,Eating Out,Debit,GBR")

        with pytest.raises(ParseError, match="invalid amount"):
            parse_yonder_csv(csv_text)

    @pytest.mark.parametrize("token", ["debit", "DEBIT", "Refund", ""])
    def test_unknown_direction_rejected(self, token):
        csv_text = make_csv(f"2026-02-01T12:00:00,Coffee,2.50,2.50,GBP,Eating Out,{token},GBR")

        with pytest.raises(ParseError) as exc_info:
            parse_yonder_csv(csv_text)

        assert "unknown direction" in exc_info.value.message

    def test_too_few_fields(self):
        csv_text = make_csv("2026-02-01T12:00:00,Coffee,2.50,2.50,GBP,Eating Out,Debit")

        with pytest.raises(ParseError) as exc_info:
            parse_yonder_csv(csv_text)

        assert exc_info.value.line_number == 2
        assert "expected 8 fields, got 7" in exc_info.value.message

    def test_too_many_fields(self):
        csv_text = make_csv("2026-02-01T12:00:00,Coffee,2.50,2.50,GBP,Eating Out,Debit,GBR,x")

        with pytest.raises(ParseError, match="got 9"):
            parse_yonder_csv(csv_text)

    def test_invalid_timestamp(self):
        csv_text = make_csv("yesterday,Coffee,2.50,2.50,GBP,Eating Out,Debit,GBR")

        with pytest.raises(ParseError, match="date/time"):
            parse_yonder_csv(csv_text)

    def test_invalid_utf8(self):
        data = HEADER.encode() + b"\n\xff\xfe,broken\n"

        with pytest.raises(ParseError) as exc_info:
            parse_yonder_csv(data)

        assert exc_info.value.line_number == 1
        assert "UTF-8" in exc_info.value.message
