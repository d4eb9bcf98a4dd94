"""
Window cursor over the monthly sheet.

Every person owns a fixed-size block of columns laid out left to right:

    col 1..9   person #1   (name row, then one row per day)
    col 11..19 person #2
    ...

Row bounds never move; each advance() shifts both column bounds by
COLUMN_OFFSET so the next build() targets the next person's block.
"""
from __future__ import annotations

import logging

from scoreboard.schemas.sheets import (
    DataFilter,
    GetSpreadsheetByDataFilterRequest,
    GridRange,
)

logger = logging.getLogger(__name__)


class ScoreTableRequest:
    COLUMN_OFFSET = 10
    INITIAL_START_COLUMN_INDEX = 1
    INITIAL_END_COLUMN_INDEX = 10
    INITIAL_START_ROW_INDEX = 3
    INITIAL_END_ROW_INDEX = 35

    def __init__(self, sheet_id: int, include_grid_data: bool = True):
        self.sheet_id = sheet_id
        self.include_grid_data = include_grid_data
        self.start_column_index = self.INITIAL_START_COLUMN_INDEX
        self.end_column_index = self.INITIAL_END_COLUMN_INDEX
        self.start_row_index = self.INITIAL_START_ROW_INDEX
        self.end_row_index = self.INITIAL_END_ROW_INDEX

    def __repr__(self) -> str:
        return (
            f"ScoreTableRequest(sheet_id={self.sheet_id}, "
            f"columns=[{self.start_column_index}, {self.end_column_index}), "
            f"rows=[{self.start_row_index}, {self.end_row_index}))"
        )

    def advance(self) -> None:
        """Move the window onto the next person's block."""
        self.start_column_index += self.COLUMN_OFFSET
        self.end_column_index += self.COLUMN_OFFSET
        logger.debug("Window advanced: %r", self)

    def grid_range(self) -> GridRange:
        return GridRange(
            sheet_id=self.sheet_id,
            start_row_index=self.start_row_index,
            end_row_index=self.end_row_index,
            start_column_index=self.start_column_index,
            end_column_index=self.end_column_index,
        )

    def build(self) -> GetSpreadsheetByDataFilterRequest:
        return GetSpreadsheetByDataFilterRequest(
            data_filters=[DataFilter(grid_range=self.grid_range())],
            include_grid_data=self.include_grid_data,
        )


class RequestFactory:
    """Builds window cursors for one sheet of the spreadsheet."""

    def __init__(self, sheet_id: int):
        self.sheet_id = sheet_id

    def score_table_request(self, include_grid_data: bool = True) -> ScoreTableRequest:
        request = ScoreTableRequest(self.sheet_id, include_grid_data)
        logger.debug("New window cursor: %r", request)
        return request
