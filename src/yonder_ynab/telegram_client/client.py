"""
Telegram Bot API client implementation.

The bot token is part of every Bot API URL, so request URLs and requests
exception messages are never logged or echoed in errors.
"""

import logging

import requests

logger = logging.getLogger(__name__)

# Telegram rejects messages longer than this
MAX_MESSAGE_LENGTH = 4096


class TelegramError(Exception):
    """Base exception for Telegram client errors."""

    pass


class TelegramAPIError(TelegramError):
    """Bot API returned an error response."""

    def __init__(self, status_code: int, description: str):
        self.status_code = status_code
        self.description = description
        super().__init__(f"Telegram API error {status_code}: {description}")


class TelegramClient:
    """
    Minimal client for the Telegram Bot API.

    Features:
    - Resolve and download files sent to the bot
    - Send text replies
    """

    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        bot_token: str,
        api_url: str = "https://api.telegram.org",
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._bot_token = bot_token
        self.session = requests.Session()

    def _method_url(self, method: str) -> str:
        return f"{self.api_url}/bot{self._bot_token}/{method}"

    def _file_url(self, file_path: str) -> str:
        return f"{self.api_url}/file/bot{self._bot_token}/{file_path}"

    def _send(self, method: str, url: str, label: str, **kwargs) -> requests.Response:
        logger.debug(f"Telegram request: {label}")
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error(f"Telegram {label} timed out")
            raise TelegramError(f"Telegram {label} timed out") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Telegram {label} failed: {type(e).__name__}")
            raise TelegramError(f"Telegram {label} failed: {type(e).__name__}") from e

    def _call(self, api_method: str, params: dict | None = None, json_data: dict | None = None):
        """Call a Bot API method and return its `result`."""
        http_method = "POST" if json_data is not None else "GET"
        response = self._send(
            http_method,
            self._method_url(api_method),
            api_method,
            params=params,
            json=json_data,
        )

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if not response.ok or not payload.get("ok"):
            description = payload.get("description") or response.reason or "Unknown error"
            logger.error(f"Telegram {api_method} error {response.status_code}: {description}")
            raise TelegramAPIError(response.status_code, description)

        return payload.get("result")

    def get_file_path(self, file_id: str) -> str:
        """Resolve a file_id to its download path (getFile)."""
        result = self._call("getFile", params={"file_id": file_id}) or {}
        file_path = result.get("file_path")
        if not file_path:
            raise TelegramError("No file path found for document")
        return file_path

    def download_file(self, file_id: str) -> bytes:
        """
        Download a file sent to the bot.

        Args:
            file_id: Telegram file_id from the message document

        Returns:
            Raw file bytes
        """
        file_path = self.get_file_path(file_id)
        response = self._send("GET", self._file_url(file_path), "file download")

        if not response.ok:
            logger.error(f"Telegram file download error {response.status_code}")
            raise TelegramAPIError(response.status_code, response.reason or "File download failed")

        logger.info(f"Downloaded Telegram file ({len(response.content)} bytes)")
        return response.content

    def send_message(self, chat_id: int | str, text: str) -> dict:
        """Send a plain text message (sendMessage)."""
        if len(text) > MAX_MESSAGE_LENGTH:
            text = text[: MAX_MESSAGE_LENGTH - 1] + "…"
        return self._call("sendMessage", json_data={"chat_id": chat_id, "text": text}) or {}
