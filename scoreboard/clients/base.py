"""
Capabilities the core consumes. Anything with these coroutine methods can
be plugged in: the httpx adapters in this package, or the fakes used in
tests.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from scoreboard.schemas.sheets import GetSpreadsheetByDataFilterRequest, Spreadsheet


@runtime_checkable
class SheetsClient(Protocol):
    async def fetch_spreadsheet(self, spreadsheet_id: str) -> Spreadsheet:
        """Sheet properties (ids and titles) without grid data."""
        ...

    async def fetch_by_data_filter(
        self,
        spreadsheet_id: str,
        request: GetSpreadsheetByDataFilterRequest,
    ) -> Spreadsheet:
        """Grid data for the windows described by `request`."""
        ...


@runtime_checkable
class MessageSender(Protocol):
    async def send_message(self, destination: str, text: str) -> None:
        ...
