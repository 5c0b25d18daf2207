"""Credential source backed by the Google Sheets values API."""

from __future__ import annotations

import logging
from typing import Any, List
from urllib.parse import quote

import httpx

from .config import DEFAULT_FETCH_TIMEOUT_SECONDS, DEFAULT_SHEETS_BASE_URL, sanitize_base_url
from .exceptions import FetchError

logger = logging.getLogger(__name__)

CredentialGrid = List[List[str]]

API_KEY_HEADER = "X-Goog-Api-Key"


def _cell_to_str(cell: Any) -> str:
    if cell is None:
        return ""
    return cell if isinstance(cell, str) else str(cell)


def build_values_url(base_url: str, sheet_id: str, sheet_range: str) -> str:
    """Build the values endpoint URL for a sheet and A1 range."""
    return f"{sanitize_base_url(base_url)}/spreadsheets/{quote(sheet_id, safe='')}/values/{quote(sheet_range, safe='!:')}"


def parse_values(payload: Any) -> CredentialGrid:
    """Turn a values API payload into a grid of string cells.

    Raises:
        FetchError: With reason ``"empty-dataset"`` when the payload has no
            ``values`` field or zero rows.
    """
    values = payload.get("values") if isinstance(payload, dict) else None
    if not values or not isinstance(values, list):
        raise FetchError(FetchError.EMPTY_DATASET)

    grid: CredentialGrid = []
    for row in values:
        if isinstance(row, list):
            grid.append([_cell_to_str(cell) for cell in row])
        else:
            grid.append([])
    return grid


class SheetsCredentialSource:
    """Fetches the credential grid from a spreadsheet.

    Every call goes to the network; nothing is cached. A single attempt is
    made and any failure surfaces as :class:`FetchError`.

    Example:
        >>> source = SheetsCredentialSource(timeout=5.0)
        >>> grid = source.fetch("1AbC...", "Sheet1!A:C", "AIza...")
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_SHEETS_BASE_URL,
        timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = sanitize_base_url(base_url)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def fetch(self, sheet_id: str, sheet_range: str, api_key: str) -> CredentialGrid:
        """Fetch the cell grid for ``sheet_range`` of spreadsheet ``sheet_id``.

        Args:
            sheet_id: Spreadsheet identifier.
            sheet_range: A1 notation range, e.g. ``"Sheet1!A:C"``.
            api_key: Google API key with read access to the sheet.

        Returns:
            Rows of string cells; row 0 holds the headers.

        Raises:
            ValueError: If any argument is empty.
            FetchError: On timeout, transport failure, non-2xx status,
                undecodable body or an empty dataset.
        """
        if not sheet_id or not sheet_range or not api_key:
            raise ValueError("sheet_id, sheet_range and api_key are required")

        url = build_values_url(self._base_url, sheet_id, sheet_range)
        logger.debug("Fetching credential grid for range %s", sheet_range)

        try:
            response = self._client.get(url, headers={API_KEY_HEADER: api_key})
        except httpx.TimeoutException as e:
            logger.error("Credential source timed out: %s", type(e).__name__)
            raise FetchError("timeout") from e
        except httpx.HTTPError as e:
            logger.error("Credential source transport error: %s", type(e).__name__)
            raise FetchError("transport-error") from e

        if response.status_code < 200 or response.status_code >= 300:
            logger.error("Credential source returned HTTP %s", response.status_code)
            raise FetchError("http-error", status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("Credential source returned a non-JSON body")
            raise FetchError("invalid-response", status_code=response.status_code) from e

        grid = parse_values(payload)
        logger.debug("Fetched %d rows from credential source", len(grid))
        return grid

    def close(self) -> None:
        """Release the underlying HTTP client if this source created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> SheetsCredentialSource:
        return self

    def __exit__(self, exc_type: type | None, exc: BaseException | None, traceback: Any) -> None:
        self.close()
