"""
YNAB API client implementation.
"""

import json
import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..schemas.ynab_payload import ImportBatch, ImportResult

logger = logging.getLogger(__name__)


class YnabError(Exception):
    """Base exception for YNAB client errors."""

    pass


class YnabAPIError(YnabError):
    """API returned an error response."""

    def __init__(
        self,
        status_code: int,
        message: str,
        response_body: str | None = None,
    ):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        super().__init__(f"YNAB API error {status_code}: {message}")


class YnabConnectionError(YnabError):
    """Failed to connect to YNAB."""

    pass


class YnabClient:
    """
    Client for the YNAB API.

    Features:
    - Batched transaction creation (one POST per import)
    - Account lookup
    - Retry with backoff for read-only requests only
    """

    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
    ):
        """
        Initialize YNAB client.

        Args:
            base_url: YNAB API URL (e.g., "https://api.ynab.com/v1")
            token: Personal access token
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts for GET requests
            backoff_factor: Backoff factor for retries
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

        # POST is deliberately excluded: creating transactions is never retried here
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict | None = None,
        json_data: dict | None = None,
    ) -> requests.Response:
        """Make an API request with error handling."""
        url = f"{self.base_url}{endpoint}"

        logger.debug(f"API Request: {method} {url}")
        if json_data:
            logger.debug(f"Request body: {json.dumps(json_data, indent=2)}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error to {url}: {e}")
            raise YnabConnectionError(f"Failed to connect to YNAB at {self.base_url}: {e}") from e
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout for {url}: {e}")
            raise YnabConnectionError(f"Request to YNAB timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error for {url}: {e}")
            raise YnabConnectionError(f"Request to YNAB failed: {e}") from e

        logger.debug(f"Response status: {response.status_code}")

        if not response.ok:
            error_body = response.text
            message = response.reason or "Unknown error"

            # YNAB error shape: {"error": {"id": "...", "name": "...", "detail": "..."}}
            try:
                error = response.json().get("error", {})
                message = error.get("detail") or error.get("name") or message
            except (ValueError, AttributeError):
                pass

            logger.error(f"API Error {response.status_code}: {message}")
            logger.debug(f"Full response body: {error_body}")

            raise YnabAPIError(
                status_code=response.status_code,
                message=message,
                response_body=error_body,
            )

        return response

    def test_connection(self) -> bool:
        """Test connection and token validity."""
        try:
            self._request("GET", "/user")
            return True
        except YnabError:
            return False

    def get_account(self, budget_id: str, account_id: str) -> dict:
        """
        Get a single account.

        Returns:
            Account dictionary (id, name, type, closed, balance in milliunits)
        """
        response = self._request("GET", f"/budgets/{budget_id}/accounts/{account_id}")
        return response.json().get("data", {}).get("account", {})

    def create_transactions(self, budget_id: str, batch: ImportBatch) -> ImportResult:
        """
        Create all transactions of a batch in a single request.

        YNAB skips transactions whose import_id already exists on the account
        and lists them in duplicate_import_ids.

        Args:
            budget_id: Budget UUID or "last-used"
            batch: Transactions to create

        Returns:
            ImportResult with created ids and skipped duplicates

        Raises:
            YnabAPIError: If the API rejects the batch
            YnabConnectionError: If YNAB cannot be reached
        """
        if not batch.transactions:
            logger.info("Empty batch, nothing to submit")
            return ImportResult()

        response = self._request(
            "POST",
            f"/budgets/{budget_id}/transactions",
            json_data=batch.to_dict(),
        )

        try:
            data = response.json().get("data", {})
        except ValueError as e:
            raise YnabAPIError(
                status_code=response.status_code,
                message="Response is not valid JSON",
                response_body=response.text,
            ) from e

        result = ImportResult(
            transaction_ids=list(data.get("transaction_ids") or []),
            duplicate_import_ids=list(data.get("duplicate_import_ids") or []),
            rows=len(batch),
        )

        logger.info(
            f"YNAB import: {result.imported} created, {result.duplicates} duplicates skipped"
        )
        return result
