"""Test fixtures and utilities."""

import os

import pytest

from yonder_ynab.config import Config, TelegramConfig, WebhookConfig, YnabConfig

YNAB_BASE_URL = "http://ynab.test/v1"
TELEGRAM_API_URL = "http://telegram.test"
BUDGET_ID = "last-used"
ACCOUNT_ID = "4a4f0c5e-1c9b-4a5e-9a7e-6f3c2b1d0e9f"

YNAB_TOKEN = "ynab-secret-token-123"
BOT_TOKEN = "123456:telegram-bot-token"
TELEGRAM_SECRET = "tg-path-secret"
WEBHOOK_KEY = "webhook-key-456"

CSV_HEADER = (
    "Date/Time of transaction,Description,Amount (GBP),Amount (in Charged Currency),"
    "Currency,Category,Debit or Credit,Country"
)
TFL_ROW = (
    '"2026-01-01T10:34:50.211697","TFL - Transport for London","3.00","3.00",'
    '"GBP","Transport","Debit","GBR"'
)

SAMPLE_CSV = f"{CSV_HEADER}\n{TFL_ROW}\n"

# Secrets read by load_config; cleared so the developer's shell cannot leak into tests
CONFIG_ENV_VARS = [
    "API_KEY",
    "YNAB_API_KEY",
    "YNAB_BUDGET_ID",
    "YNAB_ACCOUNT_ID",
    "YNAB_URL",
    "YNAB_APPROVED",
    "WEBHOOK_API_KEY",
    "TELEGRAM_WEBHOOK_SECRET",
    "TELEGRAM_API_URL",
    "YONDER_YNAB_CONFIG",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove importer environment variables for the test."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return os.environ


@pytest.fixture
def config() -> Config:
    """Fully configured importer."""
    return Config(
        ynab=YnabConfig(
            api_key=YNAB_TOKEN,
            account_id=ACCOUNT_ID,
            budget_id=BUDGET_ID,
            base_url=YNAB_BASE_URL,
        ),
        telegram=TelegramConfig(
            bot_token=BOT_TOKEN,
            webhook_secret=TELEGRAM_SECRET,
            api_url=TELEGRAM_API_URL,
        ),
        webhook=WebhookConfig(api_key=WEBHOOK_KEY),
    )


@pytest.fixture
def sample_csv() -> str:
    """Single-row Yonder export."""
    return SAMPLE_CSV


@pytest.fixture
def ynab_created_response() -> dict:
    """YNAB response for a batch where the transaction was created."""
    return {
        "data": {
            "transaction_ids": ["b8f0a1e2-0000-4000-8000-000000000001"],
            "duplicate_import_ids": [],
            "transactions": [],
            "server_knowledge": 42,
        }
    }
