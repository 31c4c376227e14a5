"""
CSV import service.

Runs the stateless pipeline shared by every ingress channel:

    parse (whole file) → map → validate → submit (one request)

A malformed row aborts the whole import before anything is sent to YNAB.
"""

import logging

from ..config import Config
from ..schemas.ynab_payload import (
    ImportBatch,
    ImportResult,
    build_import_batch,
    validate_import_batch,
)
from ..schemas.yonder_csv import parse_yonder_csv
from ..ynab_client import YnabClient

logger = logging.getLogger(__name__)


class BatchValidationError(ValueError):
    """Mapped transactions failed pre-submission validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid transactions: " + "; ".join(errors))


class CsvImporter:
    """Import Yonder CSV exports into the configured YNAB account."""

    def __init__(self, config: Config, ynab_client: YnabClient):
        self.config = config
        self.ynab_client = ynab_client

    def build_batch(self, data: bytes | str) -> ImportBatch:
        """Parse and map a CSV export without submitting it."""
        rows = parse_yonder_csv(data)
        logger.info(f"Parsed {len(rows)} row(s) from Yonder CSV")

        batch = build_import_batch(
            rows,
            account_id=self.config.ynab.account_id,
            cleared=self.config.ynab.cleared,
            approved=self.config.ynab.approved,
        )

        errors = validate_import_batch(batch)
        if errors:
            raise BatchValidationError(errors)

        return batch

    def import_csv(self, data: bytes | str) -> ImportResult:
        """
        Parse a Yonder CSV export and create its transactions in YNAB.

        Args:
            data: Raw CSV content

        Returns:
            ImportResult as reported by YNAB

        Raises:
            ParseError: If any row is malformed (nothing is submitted)
            BatchValidationError: If a mapped transaction is invalid
            YnabError: If YNAB rejects the batch or cannot be reached
        """
        batch = self.build_batch(data)
        result = self.ynab_client.create_transactions(self.config.ynab.budget_id, batch)
        result.rows = len(batch)
        return result


def create_importer(config: Config) -> CsvImporter:
    """Build an importer with a YNAB client from configuration."""
    client = YnabClient(
        base_url=config.ynab.base_url,
        token=config.ynab.api_key,
        timeout=config.ynab.timeout,
    )
    return CsvImporter(config, client)
