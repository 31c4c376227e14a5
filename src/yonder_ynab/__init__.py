"""
Yonder CSV → YNAB Import

Imports Yonder credit card CSV exports into a YNAB account, either from a
Telegram bot conversation or from an authenticated HTTP webhook.
"""

__version__ = "0.1.0"
