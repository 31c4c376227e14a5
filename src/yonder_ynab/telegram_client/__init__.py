"""
Telegram Bot API Client.

Provides:
- getFile + file download for documents sent to the bot
- sendMessage for replies
"""

from .client import MAX_MESSAGE_LENGTH, TelegramAPIError, TelegramClient, TelegramError

__all__ = [
    "MAX_MESSAGE_LENGTH",
    "TelegramClient",
    "TelegramError",
    "TelegramAPIError",
]
