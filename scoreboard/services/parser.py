"""
Row parser: one sheet row of cells → DailyRecord.

Column contract
---------------
0      date       DATE-typed cell, formatted as dd.mm.yyyy
1..6   scores     float; falls back to the cell's numeric value; empty → 0.0
7      total      same rule as the scores
8      percent    "<int>%"; empty → 0
9+     —          UnexpectedFieldIndexError

Short rows leave the remaining fields at their defaults. The first row of a
person's block is the name row and goes through parse_person_name() instead.

Public API
----------
parse_record(row)       → DailyRecord        (raises RecordParseError)
parse_person_name(row)  → str                (raises EmptyPersonNameCellError)
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from scoreboard.core.errors import (
    DateParseError,
    EmptyCellDataError,
    EmptyEffectiveFormatError,
    EmptyPersonNameCellError,
    InvalidDateCellError,
    InvalidPercentCellError,
    PercentParseError,
    ScoreParseError,
    UnexpectedFieldIndexError,
)
from scoreboard.models.record import (
    SCORE_CATEGORIES,
    UNINITIALIZED_SCORE,
    DailyRecord,
    Percentage,
    Scores,
)
from scoreboard.schemas.sheets import CellData

DATE_COLUMN = 0
SCORE_COLUMNS = range(1, 1 + len(SCORE_CATEGORIES))
TOTAL_COLUMN = 7
PERCENT_COLUMN = 8

DATE_FORMAT = "%d.%m.%Y"
DATE_CELL_TYPE = "DATE"


# ---------------------------------------------------------------------------
# Cell parsers
# ---------------------------------------------------------------------------

def _parse_date(cell: CellData) -> date:
    cell_format = cell.effective_format
    if cell_format is None:
        raise EmptyEffectiveFormatError(DATE_COLUMN)
    number_format = cell_format.number_format
    if number_format is None:
        raise InvalidDateCellError("date cell should have a number format")
    if number_format.type != DATE_CELL_TYPE:
        raise InvalidDateCellError(f"cell type is {number_format.type!r}, not DATE")
    if cell.formatted_value is None:
        raise InvalidDateCellError("formatted value can't be empty")
    # TODO: derive the format from number_format.pattern instead of assuming dd.mm.yyyy
    try:
        return datetime.strptime(cell.formatted_value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise DateParseError(cell.formatted_value) from None


def _parse_score(cell: CellData, index: int) -> float:
    raw = cell.formatted_value
    if raw is None:
        return UNINITIALIZED_SCORE
    try:
        return float(raw.strip())
    except ValueError:
        fallback = cell.effective_value.number_value if cell.effective_value else None
        if fallback is not None:
            return float(fallback)
        raise ScoreParseError(index, raw) from None


def _parse_percentage(cell: CellData) -> Percentage:
    raw = cell.formatted_value
    if raw is None:
        return Percentage(0)
    value = raw.strip()
    if not value.endswith("%"):
        raise InvalidPercentCellError(raw)
    try:
        return Percentage(int(value[:-1]))
    except ValueError:
        raise PercentParseError(raw) from None


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def parse_record(row: Sequence[CellData]) -> DailyRecord:
    """Parse one day row. Pure: the same row always yields an equal record."""
    day = date.min
    scores = [UNINITIALIZED_SCORE] * len(SCORE_CATEGORIES)
    total = UNINITIALIZED_SCORE
    percent = Percentage(0)

    for i, cell in enumerate(row):
        if i == DATE_COLUMN:
            day = _parse_date(cell)
        elif i in SCORE_COLUMNS:
            scores[i - 1] = _parse_score(cell, i)
        elif i == TOTAL_COLUMN:
            total = _parse_score(cell, i)
        elif i == PERCENT_COLUMN:
            percent = _parse_percentage(cell)
        else:
            raise UnexpectedFieldIndexError(i)

    return DailyRecord(
        date=day,
        scores=Scores.from_sequence(scores),
        total_score=total,
        percent=percent,
    )


def parse_person_name(row: Sequence[CellData]) -> str:
    """Read the person name from the first cell of a block's first row."""
    if not row:
        raise EmptyCellDataError(row=0)
    name = row[0].formatted_value
    if name is None or not name.strip():
        raise EmptyPersonNameCellError()
    return name.strip()
