"""Tests for user-facing import messages."""

import pytest
from django.core.exceptions import RequestDataTooBig

from yonder_ynab.config import ConfigValidationError
from yonder_ynab.schemas.ynab_payload import ImportResult
from yonder_ynab.schemas.yonder_csv import ParseError
from yonder_ynab.services.importer import BatchValidationError
from yonder_ynab.services.notifier import (
    FAILURE_PREFIX,
    MAX_DETAIL_LENGTH,
    describe_error,
    format_failure,
    format_success,
    redact,
    status_for_error,
)
from yonder_ynab.telegram_client import TelegramError
from yonder_ynab.ynab_client import YnabAPIError, YnabConnectionError


class TestFormatSuccess:
    def test_summary(self):
        result = ImportResult(transaction_ids=["a"], duplicate_import_ids=["b", "c"])

        assert format_success(result) == (
            "Imported new transactions: 1\nSkipped duplicate transactions: 2"
        )


class TestFormatFailure:
    def test_parse_error_names_line(self):
        message = format_failure(ParseError(4, "invalid amount in 'Amount (GBP)': 'abc'"))

        assert message.startswith(f"{FAILURE_PREFIX}\n\n")
        assert "line 4" in message
        assert "'abc'" in message

    def test_api_error_includes_status_and_body(self):
        error = YnabAPIError(400, "Bad request", response_body='{"error": {"detail": "x"}}')

        message = format_failure(error)

        assert "HTTP 400" in message
        assert '{"error": {"detail": "x"}}' in message

    def test_api_error_body_not_repeated(self):
        error = YnabAPIError(401, "Unauthorized", response_body="Unauthorized")

        assert describe_error(error).count("Unauthorized") == 1

    def test_connection_error_is_generic(self):
        error = YnabConnectionError("Failed to connect to YNAB at http://10.0.0.1: refused")

        message = format_failure(error)

        assert "Could not reach YNAB" in message
        assert "10.0.0.1" not in message

    def test_secrets_redacted(self):
        error = YnabAPIError(401, "token ynab-secret rejected", response_body="ynab-secret")

        message = format_failure(error, secrets=["ynab-secret"])

        assert "ynab-secret" not in message
        assert "***" in message

    def test_long_detail_truncated(self):
        error = YnabAPIError(500, "boom", response_body="x" * 5000)

        message = format_failure(error)

        detail = message.split("\n\n", 1)[1]
        assert len(detail) == MAX_DETAIL_LENGTH
        assert detail.endswith("…")

    def test_unexpected_error_hides_details(self):
        message = format_failure(RuntimeError("internal path /srv/app/secret.py"))

        assert "/srv/app" not in message
        assert "Unexpected error" in message

    def test_config_error_hides_details(self):
        message = format_failure(ConfigValidationError(["ynab.api_key is required"]))

        assert "not configured" in message
        assert "api_key" not in message

    def test_oversized_upload(self):
        assert "too large" in format_failure(RequestDataTooBig("Request body exceeded"))

    def test_telegram_error(self):
        assert "Telegram" in format_failure(TelegramError("Telegram getFile timed out"))


class TestRedact:
    def test_ignores_empty_secrets(self):
        assert redact("hello", ["", None]) == "hello"

    def test_replaces_all_occurrences(self):
        assert redact("k1 and k1", ["k1"]) == "*** and ***"


class TestStatusForError:
    @pytest.mark.parametrize(
        "error,status",
        [
            (ParseError(2, "bad"), 400),
            (BatchValidationError(["x"]), 400),
            (YnabAPIError(401, "Unauthorized"), 502),
            (YnabConnectionError("down"), 504),
            (ConfigValidationError(["x"]), 503),
            (RequestDataTooBig("too big"), 413),
            (RuntimeError("?"), 500),
        ],
    )
    def test_mapping(self, error, status):
        assert status_for_error(error) == status
