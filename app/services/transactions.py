"""
Transaction sources for the analytics tools.

Transactions come either from the banking ledger API (forwarding the
caller's bearer token) or from a local CSV file used for offline demos.
Both return raw mappings; normalization happens in ``app.analytics.records``.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import pandas as pd

from app.core.config import settings
from app.core.exceptions import TransactionSourceError

logger = logging.getLogger(__name__)

NUMERIC_COLUMNS = {"amount", "balance_after"}


def _parse_number(value: str) -> Any:
    """Return a float when the cell parses as one, otherwise the raw string."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return value


def load_transactions_from_csv(path: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Load transactions from a CSV export.

    Expected header:
        timestamp,type,amount,currency,counterparty,description,category,balance_after

    Args:
        path: CSV file path; defaults to ``settings.TRANSACTIONS_CSV_PATH``

    Returns:
        One dict per row keyed by the header columns.

    Raises:
        TransactionSourceError: if the file is missing or has no header
    """
    csv_path = Path(path or settings.TRANSACTIONS_CSV_PATH)
    if not csv_path.exists():
        raise TransactionSourceError(f"failed to open CSV file: {csv_path} not found")

    try:
        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False).fillna("")
    except pd.errors.EmptyDataError as e:
        raise TransactionSourceError(f"failed to read CSV header: {e}") from e
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        raise TransactionSourceError(f"error reading CSV row: {e}") from e

    transactions = []
    for row in df.to_dict(orient="records"):
        transactions.append({
            column: _parse_number(value) if column in NUMERIC_COLUMNS else value
            for column, value in row.items()
        })

    logger.info(f"Loaded {len(transactions)} transactions from CSV file {csv_path}")
    return transactions


class LedgerClient:
    """
    Minimal async client for the banking API's transaction history.

    Authentication is the caller's: the bearer token from the login flow is
    forwarded as-is.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        transactions_path: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.LIMINAL_BASE_URL).rstrip("/")
        self.transactions_path = transactions_path or settings.LIMINAL_TRANSACTIONS_PATH
        self.timeout = timeout or settings.LIMINAL_TIMEOUT_SECONDS
        self.transport = transport

    async def fetch_transactions(
        self,
        access_token: Optional[str],
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch the user's most recent transactions.

        Raises:
            TransactionSourceError: on missing token, transport failure,
                                    error status or an unsuccessful body
        """
        if not access_token:
            raise TransactionSourceError(
                "failed to fetch transactions: missing authentication token"
            )

        limit = limit or settings.LEDGER_FETCH_LIMIT
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.get(
                    self.transactions_path,
                    params={"limit": limit},
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TransactionSourceError(
                f"transaction fetch failed: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise TransactionSourceError(f"failed to fetch transactions: {e}") from e
        except ValueError as e:
            raise TransactionSourceError(f"transaction fetch failed: invalid JSON ({e})") from e

        if not isinstance(payload, dict):
            raise TransactionSourceError("transaction fetch failed: unexpected response body")
        if payload.get("success") is False:
            raise TransactionSourceError(
                f"transaction fetch failed: {payload.get('error', 'unknown error')}"
            )

        raw = payload.get("transactions")
        transactions = [tx for tx in raw if isinstance(tx, dict)] if isinstance(raw, list) else []

        logger.info(f"Fetched {len(transactions)} transactions from ledger API")
        return transactions


async def get_transactions(
    use_csv: bool,
    access_token: Optional[str] = None,
    ledger: Optional[LedgerClient] = None,
) -> List[Dict[str, Any]]:
    """Resolve transaction provenance: local CSV file or ledger API."""
    if use_csv:
        return load_transactions_from_csv()
    ledger = ledger or LedgerClient()
    return await ledger.fetch_transactions(access_token)
