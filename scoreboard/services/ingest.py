"""
Ingestion loop: walks the current month's sheet block by block and builds
a complete Dashboard.

Flow
----
1. fetch sheet titles, derive the current month title, resolve its sheet_id
2. for each window (one person per block, left to right):
     first row      → person name (empty name = terminator, stop)
     remaining rows → DailyRecord via parse_record()
3. return Dashboard.from_tables(tables)

Any structural absence or parse error aborts the whole cycle and the partial
tables are discarded; the caller keeps publishing the previous snapshot.
Parse errors may be downgraded to placeholder records with
skip_parse_errors=True.

Public API
----------
DashboardFetcher.fetch_dashboard()            → Dashboard
DashboardFetcher.resolve_sheet_id()           → int
DashboardFetcher.fetch_score_table(request)   → ScoreTable
read_score_table(spreadsheet, skip)           → ScoreTable   (pure)
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from scoreboard.clients.base import SheetsClient
from scoreboard.core.errors import (
    EmptyCellDataError,
    EmptyGridDataError,
    EmptyPersonNameCellError,
    EmptyRowDataError,
    EmptySheetsError,
    InvalidVectorSizeError,
    RecordParseError,
    SheetNotFoundError,
    TooManyTablesError,
)
from scoreboard.models import DailyRecord, Dashboard, Person, ScoreTable
from scoreboard.schemas.sheets import CellData, Spreadsheet
from scoreboard.services.parser import parse_person_name, parse_record
from scoreboard.services.periods import current_time, derive_title_name, find_sheet_id
from scoreboard.services.window import RequestFactory, ScoreTableRequest

logger = logging.getLogger(__name__)

DEFAULT_MAX_TABLES = 100


# ---------------------------------------------------------------------------
# Pure block reader
# ---------------------------------------------------------------------------

def _block_rows(spreadsheet: Spreadsheet) -> list[list[CellData]]:
    """Unwrap sheets → grid data → rows → cells, classifying what's missing."""
    sheets = spreadsheet.sheets
    if sheets is None:
        raise EmptySheetsError()
    if len(sheets) != 1:
        raise InvalidVectorSizeError(expected=1, received=len(sheets))

    grid_data = sheets[0].data
    if not grid_data:
        raise EmptyGridDataError()

    row_data = grid_data[0].row_data
    if row_data is None:
        raise EmptyRowDataError()

    rows: list[list[CellData]] = []
    for i, row in enumerate(row_data):
        if row.values is None:
            raise EmptyCellDataError(row=i)
        rows.append(row.values)
    return rows


def read_score_table(spreadsheet: Spreadsheet, skip_parse_errors: bool = False) -> ScoreTable:
    """
    Turn one fetched block into a ScoreTable.
    Raises EmptyPersonNameCellError when the block has no person (end of data).
    """
    rows = _block_rows(spreadsheet)
    if not rows:
        raise EmptyCellDataError(row=0)

    person = Person(parse_person_name(rows[0]))
    records: list[DailyRecord] = []

    for row in rows[1:]:
        try:
            record = parse_record(row)
        except RecordParseError as exc:
            logger.error("Parse error for %s (skipped=%s): %s", person.name, skip_parse_errors, exc)
            if not skip_parse_errors:
                raise
            record = DailyRecord()
        records.append(record)

    return ScoreTable.build(person, records)


# ---------------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------------

class DashboardFetcher:
    def __init__(
        self,
        client: SheetsClient,
        spreadsheet_id: str,
        skip_parse_errors: bool = False,
        locale: str = "ru",
        max_tables: int = DEFAULT_MAX_TABLES,
        clock: Callable = current_time,
    ):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.skip_parse_errors = skip_parse_errors
        self.locale = locale
        self.max_tables = max_tables
        self.clock = clock

    async def resolve_sheet_id(self) -> int:
        spreadsheet = await self.client.fetch_spreadsheet(self.spreadsheet_id)
        if spreadsheet.sheets is None:
            raise EmptySheetsError()
        logger.debug("Fetched %d sheet(s)", len(spreadsheet.sheets))

        title = derive_title_name(self.clock(), self.locale)
        sheet_id = find_sheet_id(spreadsheet.sheets, title)
        if sheet_id is None:
            raise SheetNotFoundError(title)
        return sheet_id

    async def fetch_score_table(self, request: ScoreTableRequest) -> ScoreTable:
        logger.debug("Fetching score table window %r", request)
        spreadsheet = await self.client.fetch_by_data_filter(self.spreadsheet_id, request.build())
        return read_score_table(spreadsheet, self.skip_parse_errors)

    async def fetch_dashboard(self, sheet_id: Optional[int] = None) -> Dashboard:
        logger.info("Start fetching dashboard data (spreadsheet=%s)", self.spreadsheet_id)
        if sheet_id is None:
            sheet_id = await self.resolve_sheet_id()

        request = RequestFactory(sheet_id).score_table_request(include_grid_data=True)
        tables: list[ScoreTable] = []

        while True:
            try:
                table = await self.fetch_score_table(request)
            except EmptyPersonNameCellError:
                logger.debug("Empty person name cell reached, stopping at %r", request)
                break
            except Exception as exc:
                logger.error("Dashboard fetch aborted after %d table(s): %s", len(tables), exc)
                raise

            if len(tables) == self.max_tables:
                raise TooManyTablesError(self.max_tables)
            logger.debug("Parsed score table for %s (%d records)", table.person.name, len(table))
            tables.append(table)
            request.advance()

        logger.info("Dashboard fetched: %d participant(s) from sheet_id=%s", len(tables), sheet_id)
        return Dashboard.from_tables(tables)
