"""
User-facing messages for import outcomes.

Shared by the Telegram and webhook channels. Messages never contain
configured secrets and error details are truncated.
"""

from django.core.exceptions import RequestDataTooBig

from ..config import ConfigValidationError
from ..schemas.ynab_payload import ImportResult
from ..schemas.yonder_csv import ParseError
from ..telegram_client import TelegramError
from ..ynab_client import YnabAPIError, YnabConnectionError, YnabError
from .importer import BatchValidationError

HELP_MESSAGE = "Send Yonder CSV export as a document"
FAILURE_PREFIX = "Failed to import transactions:"
REDACTED = "***"

# Longest error detail shown to users
MAX_DETAIL_LENGTH = 500


def redact(text: str, secrets: list[str] | None) -> str:
    """Replace every secret value in text."""
    for secret in secrets or []:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def truncate(text: str, limit: int = MAX_DETAIL_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def describe_error(error: Exception) -> str:
    """Short description naming the kind of failure."""
    if isinstance(error, ParseError):
        return f"Invalid Yonder CSV at line {error.line_number}: {error.message}"
    if isinstance(error, BatchValidationError):
        return str(error)
    if isinstance(error, YnabAPIError):
        detail = error.message
        if error.response_body and error.response_body not in detail:
            detail = f"{detail}\n{error.response_body}"
        return f"YNAB rejected the transactions (HTTP {error.status_code}): {detail}"
    if isinstance(error, YnabConnectionError):
        return "Could not reach YNAB, please try again later"
    if isinstance(error, YnabError):
        return f"YNAB error: {error}"
    if isinstance(error, ConfigValidationError):
        return "Importer is not configured"
    if isinstance(error, RequestDataTooBig):
        return "The uploaded file is too large"
    if isinstance(error, TelegramError):
        return f"Could not fetch the document from Telegram: {error}"
    return "Unexpected error while importing"


def format_success(result: ImportResult) -> str:
    return str(result)


def format_failure(error: Exception, secrets: list[str] | None = None) -> str:
    """Failure message for users: error kind, redacted and truncated detail."""
    detail = truncate(redact(describe_error(error), secrets))
    return f"{FAILURE_PREFIX}\n\n{detail}"


def status_for_error(error: Exception) -> int:
    """HTTP status code for an import failure."""
    if isinstance(error, (ParseError, BatchValidationError)):
        return 400
    if isinstance(error, YnabAPIError):
        return 502
    if isinstance(error, YnabConnectionError):
        return 504
    if isinstance(error, ConfigValidationError):
        return 503
    if isinstance(error, RequestDataTooBig):
        return 413
    return 500
