"""
Ingress adapters: the boundary between a channel and the import pipeline.

Each request moves through:

    Authenticating → Parsing → Mapping → Submitting → Replying

Any failure short-circuits to Replying. handle() never raises; every error
becomes a channel-appropriate reply.
"""

import hmac
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse

from ..config import Config
from ..schemas.ynab_payload import ImportResult
from ..services.importer import CsvImporter
from ..services.notifier import (
    HELP_MESSAGE,
    format_failure,
    format_success,
    status_for_error,
)
from ..telegram_client import TelegramClient, TelegramError

logger = logging.getLogger(__name__)


def secrets_match(provided: str | None, expected: str | None) -> bool:
    """Constant-time secret comparison; fails closed when either side is unset."""
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


@dataclass
class IngressMessage:
    """What a channel request carries, before the CSV is fetched."""

    # Where replies go (Telegram chat id); None for synchronous HTTP replies
    reply_to: Any = None
    # Channel-specific file reference (Telegram file_id)
    reference: str | None = None
    # False for requests that carry nothing to act on (e.g. Telegram service updates)
    actionable: bool = True


class IngressAdapter(ABC):
    """
    Base class for import channels.

    Subclasses decide how callers authenticate, where the CSV bytes come from
    and how replies are delivered. The import pipeline itself is shared.
    """

    channel = "base"

    def __init__(self, config: Config, importer: CsvImporter):
        self.config = config
        self.importer = importer

    @abstractmethod
    def authenticate(self, request: HttpRequest, **kwargs) -> bool:
        """Check the caller's shared secret."""

    @abstractmethod
    def read_message(self, request: HttpRequest) -> IngressMessage:
        """Parse the inbound request envelope."""

    @abstractmethod
    def extract_payload(self, request: HttpRequest, message: IngressMessage) -> bytes | None:
        """Return the CSV bytes, or None if the request carries no file."""

    @abstractmethod
    def reply_success(self, message: IngressMessage, result: ImportResult) -> HttpResponse:
        ...

    @abstractmethod
    def reply_failure(self, message: IngressMessage, error: Exception) -> HttpResponse:
        ...

    @abstractmethod
    def reply_no_payload(self, message: IngressMessage) -> HttpResponse:
        ...

    @abstractmethod
    def reply_unauthorized(self, request: HttpRequest) -> HttpResponse:
        ...

    def handle(self, request: HttpRequest, **kwargs) -> HttpResponse:
        """Run one request through the pipeline."""
        if not self.authenticate(request, **kwargs):
            logger.warning(f"[{self.channel}] Rejected unauthenticated request")
            return self.reply_unauthorized(request)

        try:
            message = self.read_message(request)
        except ValueError as e:
            logger.warning(f"[{self.channel}] Malformed request: {e}")
            return JsonResponse({"error": "Malformed request"}, status=400)

        if not message.actionable:
            return self.reply_no_payload(message)

        try:
            payload = self.extract_payload(request, message)
            if not payload:
                return self.reply_no_payload(message)

            self.config.ensure_valid()
            result = self.importer.import_csv(payload)
        except Exception as e:
            logger.exception(f"[{self.channel}] Import failed")
            return self.reply_failure(message, e)

        logger.info(
            f"[{self.channel}] Import done: {result.imported} imported, "
            f"{result.duplicates} duplicates"
        )
        return self.reply_success(message, result)


class WebhookIngress(IngressAdapter):
    """
    Authenticated HTTP import endpoint.

    The key is taken from the `api_key` query parameter or the X-API-Key
    header. The CSV is the uploaded `file` field of a multipart request, or
    the raw request body.
    """

    channel = "webhook"
    API_KEY_PARAM = "api_key"
    API_KEY_HEADER = "X-API-Key"
    FILE_FIELD = "file"

    def authenticate(self, request: HttpRequest, **kwargs) -> bool:
        provided = request.GET.get(self.API_KEY_PARAM) or request.headers.get(self.API_KEY_HEADER)
        return secrets_match(provided, self.config.webhook.api_key)

    def read_message(self, request: HttpRequest) -> IngressMessage:
        return IngressMessage()

    def extract_payload(self, request: HttpRequest, message: IngressMessage) -> bytes | None:
        if request.content_type == "multipart/form-data":
            upload = request.FILES.get(self.FILE_FIELD)
            return upload.read() if upload else None
        return request.body

    def reply_success(self, message: IngressMessage, result: ImportResult) -> HttpResponse:
        return JsonResponse(
            {
                "message": format_success(result),
                "imported": result.imported,
                "duplicates": result.duplicates,
            }
        )

    def reply_failure(self, message: IngressMessage, error: Exception) -> HttpResponse:
        return JsonResponse(
            {"error": format_failure(error, self.config.secrets())},
            status=status_for_error(error),
        )

    def reply_no_payload(self, message: IngressMessage) -> HttpResponse:
        return JsonResponse({"error": "Request body must contain a Yonder CSV export"}, status=400)

    def reply_unauthorized(self, request: HttpRequest) -> HttpResponse:
        if not self.config.webhook.api_key:
            return JsonResponse({"error": "Webhook API key is not set"}, status=401)
        return JsonResponse({"error": "Invalid API key"}, status=401)


class TelegramIngress(IngressAdapter):
    """
    Telegram bot webhook.

    Telegram calls /telegram/<webhook_secret>. Once authenticated the
    response is always 200 so Telegram does not redeliver the update;
    outcomes are reported back to the chat with sendMessage.
    """

    channel = "telegram"
    SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"

    def __init__(self, config: Config, importer: CsvImporter, telegram: TelegramClient):
        super().__init__(config, importer)
        self.telegram = telegram

    def authenticate(self, request: HttpRequest, **kwargs) -> bool:
        # Without a bot token there is no way to fetch documents or reply
        if not self.config.telegram.enabled:
            return False

        expected = self.config.telegram.webhook_secret
        if not secrets_match(kwargs.get("token"), expected):
            return False

        # Optional second factor when setWebhook was called with secret_token
        header_secret = request.headers.get(self.SECRET_HEADER)
        if header_secret is not None and not secrets_match(header_secret, expected):
            return False

        return True

    def read_message(self, request: HttpRequest) -> IngressMessage:
        try:
            update = json.loads(request.body or b"{}")
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValueError(f"update is not valid JSON: {e}") from e

        msg = update.get("message") if isinstance(update, dict) else None
        if not isinstance(msg, dict):
            logger.debug("Ignoring Telegram update without message")
            return IngressMessage(actionable=False)

        chat = msg.get("chat")
        chat_id = chat.get("id") if isinstance(chat, dict) else None
        if chat_id is None:
            return IngressMessage(actionable=False)

        document = msg.get("document")
        file_id = document.get("file_id") if isinstance(document, dict) else None
        return IngressMessage(
            reply_to=chat_id,
            reference=file_id if isinstance(file_id, str) else None,
        )

    def extract_payload(self, request: HttpRequest, message: IngressMessage) -> bytes | None:
        if not message.reference:
            return None
        return self.telegram.download_file(message.reference)

    def _reply(self, message: IngressMessage, text: str) -> HttpResponse:
        if message.reply_to is not None:
            try:
                self.telegram.send_message(message.reply_to, text)
            except TelegramError as e:
                logger.error(f"Failed to send Telegram reply: {e}")
        return JsonResponse({"ok": True})

    def reply_success(self, message: IngressMessage, result: ImportResult) -> HttpResponse:
        return self._reply(message, format_success(result))

    def reply_failure(self, message: IngressMessage, error: Exception) -> HttpResponse:
        return self._reply(message, format_failure(error, self.config.secrets()))

    def reply_no_payload(self, message: IngressMessage) -> HttpResponse:
        if not message.actionable:
            return JsonResponse({"ok": True})
        return self._reply(message, HELP_MESSAGE)

    def reply_unauthorized(self, request: HttpRequest) -> HttpResponse:
        return JsonResponse({"error": "Unauthorized"}, status=401)
