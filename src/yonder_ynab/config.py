"""
Configuration management (SSOT).

This module defines ALL configuration for the importer.
All config keys are defined here; no other module should invent config keys.

Secrets (API keys, bot token, webhook key) are normally supplied by the
hosting platform through environment variables. The YAML file is optional
and mainly useful for local development.
"""

import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path

import yaml

# Environment variable names for secrets
ENV_API_KEY = "API_KEY"  # Telegram bot token
ENV_YNAB_API_KEY = "YNAB_API_KEY"
ENV_YNAB_BUDGET_ID = "YNAB_BUDGET_ID"  # "last-used" selects the last used budget
ENV_YNAB_ACCOUNT_ID = "YNAB_ACCOUNT_ID"
ENV_WEBHOOK_API_KEY = "WEBHOOK_API_KEY"
ENV_TELEGRAM_WEBHOOK_SECRET = "TELEGRAM_WEBHOOK_SECRET"

# Default config file location (overridable with YONDER_YNAB_CONFIG)
ENV_CONFIG_PATH = "YONDER_YNAB_CONFIG"
DEFAULT_CONFIG_PATH = Path("config.yaml")

YNAB_DEFAULT_BASE_URL = "https://api.ynab.com/v1"
TELEGRAM_DEFAULT_API_URL = "https://api.telegram.org"


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid configuration: " + "; ".join(errors))


@dataclass
class YnabConfig:
    """YNAB API configuration.

    - budget_id: YNAB budget UUID, or "last-used"
    - account_id: Destination account UUID (transactions are created here)
    """

    api_key: str
    account_id: str
    budget_id: str = "last-used"
    base_url: str = YNAB_DEFAULT_BASE_URL
    # Request timeout (seconds)
    timeout: int = 30
    # Cleared status for imported transactions: cleared, uncleared, reconciled
    cleared: str = "cleared"
    # Mark imported transactions as approved
    approved: bool = False


@dataclass
class TelegramConfig:
    """Telegram bot configuration.

    - bot_token: Bot API token (used for getFile / sendMessage)
    - webhook_secret: Token embedded in the webhook URL path
    """

    bot_token: str | None = None
    webhook_secret: str | None = None
    api_url: str = TELEGRAM_DEFAULT_API_URL
    timeout: int = 30

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.webhook_secret)


@dataclass
class WebhookConfig:
    """HTTP import webhook configuration."""

    # Pre-shared key; requests are rejected while this is unset
    api_key: str | None = None


@dataclass
class Config:
    """Application configuration (SSOT)."""

    ynab: YnabConfig
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    webhook: WebhookConfig = field(default_factory=WebhookConfig)

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if not self.ynab.api_key:
            errors.append("ynab.api_key is required")
        if not self.ynab.budget_id:
            errors.append("ynab.budget_id is required")
        if not self.ynab.account_id:
            errors.append("ynab.account_id is required")
        else:
            try:
                uuid.UUID(self.ynab.account_id)
            except ValueError:
                errors.append(f"ynab.account_id is not a valid UUID: {self.ynab.account_id!r}")

        if self.ynab.cleared not in ("cleared", "uncleared", "reconciled"):
            errors.append(f"ynab.cleared must be cleared/uncleared/reconciled, got {self.ynab.cleared!r}")

        if self.telegram.bot_token and not self.telegram.webhook_secret:
            errors.append("telegram.webhook_secret is required when telegram.bot_token is set")
        if self.telegram.webhook_secret and not self.telegram.bot_token:
            errors.append("telegram.bot_token is required when telegram.webhook_secret is set")

        return errors

    def ensure_valid(self) -> None:
        """Raise ConfigValidationError if the configuration is unusable."""
        errors = self.validate()
        if errors:
            raise ConfigValidationError(errors)

    def secrets(self) -> list[str]:
        """All configured secret values, for redaction in user-facing text."""
        values = [
            self.ynab.api_key,
            self.telegram.bot_token,
            self.telegram.webhook_secret,
            self.webhook.api_key,
        ]
        return [v for v in values if v]


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_timeout(value, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigValidationError([f"{key} must be an integer, got {value!r}"]) from e


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from YAML file.

    Environment variables override config values:
    - API_KEY (Telegram bot token)
    - YNAB_API_KEY
    - YNAB_BUDGET_ID
    - YNAB_ACCOUNT_ID
    - YNAB_URL
    - YNAB_APPROVED (true/false)
    - WEBHOOK_API_KEY
    - TELEGRAM_WEBHOOK_SECRET
    - TELEGRAM_API_URL
    """
    if config_path is None:
        config_path = Path(os.environ.get(ENV_CONFIG_PATH, DEFAULT_CONFIG_PATH))

    if config_path.exists():
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigValidationError([f"cannot read {config_path}: {e}"]) from e
    else:
        data = {}

    if not isinstance(data, dict) or not all(
        isinstance(data.get(section) or {}, dict) for section in ("ynab", "telegram", "webhook")
    ):
        raise ConfigValidationError([f"{config_path} must be a mapping of sections"])

    # YNAB config
    ynab_data = data.get("ynab") or {}
    approved = ynab_data.get("approved", False)
    approved_env = os.environ.get("YNAB_APPROVED", "")
    if approved_env:
        approved = _parse_bool(approved_env)

    ynab = YnabConfig(
        api_key=os.environ.get(ENV_YNAB_API_KEY, ynab_data.get("api_key", "")),
        budget_id=os.environ.get(ENV_YNAB_BUDGET_ID, ynab_data.get("budget_id", "last-used")),
        account_id=os.environ.get(ENV_YNAB_ACCOUNT_ID, ynab_data.get("account_id", "")),
        base_url=os.environ.get("YNAB_URL", ynab_data.get("base_url", YNAB_DEFAULT_BASE_URL)),
        timeout=_parse_timeout(ynab_data.get("timeout", 30), "ynab.timeout"),
        cleared=ynab_data.get("cleared", "cleared"),
        approved=approved,
    )

    # Telegram config
    telegram_data = data.get("telegram") or {}
    telegram = TelegramConfig(
        bot_token=os.environ.get(ENV_API_KEY, telegram_data.get("bot_token")),
        webhook_secret=os.environ.get(
            ENV_TELEGRAM_WEBHOOK_SECRET, telegram_data.get("webhook_secret")
        ),
        api_url=os.environ.get(
            "TELEGRAM_API_URL", telegram_data.get("api_url", TELEGRAM_DEFAULT_API_URL)
        ),
        timeout=_parse_timeout(telegram_data.get("timeout", 30), "telegram.timeout"),
    )

    # Webhook config
    webhook_data = data.get("webhook") or {}
    webhook = WebhookConfig(
        api_key=os.environ.get(ENV_WEBHOOK_API_KEY, webhook_data.get("api_key")),
    )

    return Config(ynab=ynab, telegram=telegram, webhook=webhook)


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Yonder CSV → YNAB importer configuration
#
# Every secret below can (and in production should) be supplied through
# environment variables instead:
#   YNAB_API_KEY, YNAB_BUDGET_ID, YNAB_ACCOUNT_ID,
#   API_KEY (Telegram bot token), TELEGRAM_WEBHOOK_SECRET, WEBHOOK_API_KEY

ynab:
  api_key: "YOUR_YNAB_PERSONAL_ACCESS_TOKEN"
  budget_id: "last-used"                   # Budget UUID or "last-used"
  account_id: "00000000-0000-0000-0000-000000000000"
  base_url: "https://api.ynab.com/v1"
  timeout: 30
  cleared: "cleared"                       # cleared, uncleared or reconciled
  approved: false

telegram:
  bot_token: null                          # Set to enable the Telegram bot
  webhook_secret: null                     # Path token: /telegram/<webhook_secret>
  api_url: "https://api.telegram.org"

webhook:
  api_key: null                            # Pre-shared key for POST /import
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
