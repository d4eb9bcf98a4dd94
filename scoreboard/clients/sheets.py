"""
Google Sheets v4 adapter over httpx.

Authentication is not handled here: pass either an API key (public
spreadsheets) or an OAuth access token obtained elsewhere. Timeouts are the
httpx client's; there are no retries at this layer.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from scoreboard.core.errors import RemoteFetchError
from scoreboard.schemas.sheets import GetSpreadsheetByDataFilterRequest, Spreadsheet

logger = logging.getLogger(__name__)

TITLES_FIELDS = "spreadsheetId,sheets.properties(sheetId,title,index)"
GRID_FIELDS = (
    "sheets(properties(sheetId,title),"
    "data(startRow,startColumn,rowData(values(formattedValue,effectiveValue,effectiveFormat.numberFormat))))"
)


class HttpSheetsClient:
    def __init__(
        self,
        base_url: str = "https://sheets.googleapis.com/v4",
        api_key: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout: float = 30.0,
        http: Optional[httpx.AsyncClient] = None,
    ):
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
        self._params = {"key": api_key} if api_key else {}
        self._http = http or httpx.AsyncClient(base_url=base_url, headers=headers, timeout=timeout)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Spreadsheet:
        params = {**self._params, **kwargs.pop("params", {})}
        try:
            response = await self._http.request(method, url, params=params, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteFetchError(
                f"Sheets API returned {exc.response.status_code} for {method} {url}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteFetchError(f"Sheets API request failed: {exc}") from exc
        try:
            return Spreadsheet.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise RemoteFetchError(f"Unexpected Sheets API payload for {method} {url}: {exc}") from exc

    async def fetch_spreadsheet(self, spreadsheet_id: str) -> Spreadsheet:
        logger.debug("Fetching sheet titles of %s", spreadsheet_id)
        return await self._request(
            "GET",
            f"/spreadsheets/{spreadsheet_id}",
            params={"includeGridData": "false", "fields": TITLES_FIELDS},
        )

    async def fetch_by_data_filter(
        self,
        spreadsheet_id: str,
        request: GetSpreadsheetByDataFilterRequest,
    ) -> Spreadsheet:
        return await self._request(
            "POST",
            f"/spreadsheets/{spreadsheet_id}:getByDataFilter",
            params={"fields": GRID_FIELDS},
            json=request.model_dump(by_alias=True, exclude_none=True),
        )
