"""
YNAB API Client.

Provides:
- Create transactions in one batched call (POST /budgets/{id}/transactions)
- Account lookup
- Connection test

Treats YNAB errors as loud failures; creation is never retried automatically.
"""

from .client import (
    YnabAPIError,
    YnabClient,
    YnabConnectionError,
    YnabError,
)

__all__ = [
    "YnabClient",
    "YnabError",
    "YnabAPIError",
    "YnabConnectionError",
]
