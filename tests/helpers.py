"""
Builders and fakes shared by the test modules.

No network: the Sheets API is replaced by FakeSheetsClient, which serves
person blocks by the window's column index, and outbound messages go to
RecordingSender.
"""
from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from scoreboard.models import Dashboard, DailyRecord, Percentage, Person, ScoreTable, Scores
from scoreboard.schemas.sheets import (
    CellData,
    CellFormat,
    ExtendedValue,
    GetSpreadsheetByDataFilterRequest,
    GridData,
    NumberFormat,
    RowData,
    Sheet,
    SheetProperties,
    Spreadsheet,
)
from scoreboard.services.tasks import PeriodicTask
from scoreboard.services.window import ScoreTableRequest

# 2024-03-15 12:00 UTC → sheet "Март 24"
FIXED_NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)
MARCH_SHEET_ID = 777


def fixed_clock() -> datetime:
    return FIXED_NOW


# ---------------------------------------------------------------------------
# Cell / row builders
# ---------------------------------------------------------------------------

def date_cell(value: Optional[str], cell_type: Optional[str] = "DATE") -> CellData:
    return CellData(
        formatted_value=value,
        effective_format=CellFormat(number_format=NumberFormat(type=cell_type, pattern="dd.mm.yyyy")),
    )


def value_cell(value: Optional[str] = None, number: Optional[float] = None) -> CellData:
    return CellData(
        formatted_value=value,
        effective_value=ExtendedValue(number_value=number) if number is not None else None,
    )


def make_row(day: str, scores=("5", "3", "4", "2", "1", "0"), total="15", percent="60%") -> list[CellData]:
    return [date_cell(day), *(value_cell(s) for s in scores), value_cell(total), value_cell(percent)]


def empty_day_row(day: str) -> list[CellData]:
    return [date_cell(day), *(value_cell() for _ in range(7)), value_cell()]


def name_row(name: Optional[str]) -> list[CellData]:
    return [value_cell(name)] + [value_cell() for _ in range(8)]


def block_spreadsheet(rows: list[list[CellData]]) -> Spreadsheet:
    return Spreadsheet(
        sheets=[Sheet(data=[GridData(row_data=[RowData(values=r) for r in rows])])]
    )


def titles_spreadsheet(*titles: tuple[int, str]) -> Spreadsheet:
    return Spreadsheet(
        sheets=[Sheet(properties=SheetProperties(sheet_id=sid, title=t)) for sid, t in titles]
    )


def make_record(day: date, total: float = 15.0, percent: int = 60) -> DailyRecord:
    return DailyRecord(
        date=day,
        scores=Scores(5, 3, 4, 2, 1, 0),
        total_score=total,
        percent=Percentage(percent),
    )


def make_dashboard(*tables: tuple[str, list[DailyRecord]]) -> Dashboard:
    return Dashboard.from_tables(ScoreTable.build(Person(n), recs) for n, recs in tables)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeSheetsClient:
    """
    Serves `blocks[i]` (a list of rows) for the i-th window. Windows past the
    last block return an empty name row, i.e. the terminator.
    """

    def __init__(self, blocks=None, titles=None, overrides=None, errors=None):
        self.blocks = blocks or []
        self.titles = titles if titles is not None else titles_spreadsheet(
            (1, "Февраль 24"), (MARCH_SHEET_ID, "Март 24")
        )
        self.overrides: dict[int, Spreadsheet] = overrides or {}
        self.errors: dict[int, Exception] = errors or {}
        self.requests: list[GetSpreadsheetByDataFilterRequest] = []
        self.title_calls = 0
        self.closed = False

    async def aclose(self) -> None:
        self.closed = True

    async def fetch_spreadsheet(self, spreadsheet_id: str) -> Spreadsheet:
        self.title_calls += 1
        return self.titles

    async def fetch_by_data_filter(self, spreadsheet_id, request):
        self.requests.append(request)
        grid = request.data_filters[0].grid_range
        index = (grid.start_column_index - ScoreTableRequest.INITIAL_START_COLUMN_INDEX) // ScoreTableRequest.COLUMN_OFFSET
        if index in self.errors:
            raise self.errors[index]
        if index in self.overrides:
            return self.overrides[index]
        if index < len(self.blocks):
            return block_spreadsheet(self.blocks[index])
        return block_spreadsheet([name_row(None), empty_day_row("01.03.2024")])


class RecordingSender:
    def __init__(self, error: Optional[Exception] = None):
        self.sent: list[tuple[str, str]] = []
        self.error = error
        self.closed = False

    async def aclose(self) -> None:
        self.closed = True

    async def send_message(self, destination: str, text: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((destination, text))


class CountingTask(PeriodicTask):
    def __init__(self, name="counting", fail=False, gate=None, **kwargs):
        super().__init__(name, **kwargs)
        self.calls = 0
        self.fail = fail
        self.gate = gate

    async def execute(self):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise RuntimeError("boom")


class ManualClock:
    """Wall clock that only moves when advanced."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class ScriptedClock:
    """Returns the given readings in order, then keeps repeating the last one."""

    def __init__(self, *readings: datetime):
        self.readings = list(readings)

    def __call__(self) -> datetime:
        if len(self.readings) > 1:
            return self.readings.pop(0)
        return self.readings[0]


class FakeSleep:
    """
    Records requested delays; parks forever after `block_after` calls.
    With a ManualClock, each completed sleep advances it by the delay.
    """

    def __init__(self, block_after: int, clock: Optional[ManualClock] = None):
        self.delays: list[float] = []
        self.block_after = block_after
        self.clock = clock

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if len(self.delays) > self.block_after:
            await asyncio.Event().wait()
        if self.clock is not None:
            self.clock.advance(delay)
        await asyncio.sleep(0)
