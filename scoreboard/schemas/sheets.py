"""
Google Sheets v4 payload schemas.

Only the fields the ingestion loop reads are modelled. Field names are
snake_case with camelCase aliases so raw API JSON validates directly
(`Spreadsheet.model_validate(resp.json())`) and requests serialize back with
`model_dump(by_alias=True, exclude_none=True)`.

Every nesting level is Optional on purpose: the loop classifies which level
was missing instead of failing validation.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _SheetsModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------

class NumberFormat(_SheetsModel):
    type: Optional[str] = Field(default=None, description='e.g. "DATE", "NUMBER", "PERCENT".')
    pattern: Optional[str] = None


class CellFormat(_SheetsModel):
    number_format: Optional[NumberFormat] = None


class ExtendedValue(_SheetsModel):
    number_value: Optional[float] = None
    string_value: Optional[str] = None
    bool_value: Optional[bool] = None
    formula_value: Optional[str] = None


class CellData(_SheetsModel):
    formatted_value: Optional[str] = None
    effective_value: Optional[ExtendedValue] = None
    effective_format: Optional[CellFormat] = None


class RowData(_SheetsModel):
    values: Optional[list[CellData]] = None


class GridData(_SheetsModel):
    start_row: Optional[int] = None
    start_column: Optional[int] = None
    row_data: Optional[list[RowData]] = None


# ---------------------------------------------------------------------------
# Sheets / spreadsheet
# ---------------------------------------------------------------------------

class SheetProperties(_SheetsModel):
    sheet_id: Optional[int] = None
    title: Optional[str] = None
    index: Optional[int] = None


class Sheet(_SheetsModel):
    properties: Optional[SheetProperties] = None
    data: Optional[list[GridData]] = None


class Spreadsheet(_SheetsModel):
    spreadsheet_id: Optional[str] = None
    sheets: Optional[list[Sheet]] = None


# ---------------------------------------------------------------------------
# getByDataFilter request
# ---------------------------------------------------------------------------

class GridRange(_SheetsModel):
    sheet_id: int
    start_row_index: int
    end_row_index: int
    start_column_index: int
    end_column_index: int


class DataFilter(_SheetsModel):
    grid_range: Optional[GridRange] = None
    a1_range: Optional[str] = None


class GetSpreadsheetByDataFilterRequest(_SheetsModel):
    data_filters: list[DataFilter]
    include_grid_data: bool = False
