"""
CLI runner module.

Provides commands:
- serve: Run the webhook service
- import: Import a local CSV file
- check: Validate config and YNAB access
- init-config: Write a default config file
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
