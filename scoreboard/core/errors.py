"""
Custom exception hierarchy for Scoreboard Sync.

Rule: every error has a machine-readable `code` string so callers (the
HTTP layer, the task runner, log readers) can branch on it without parsing
English messages.

Families
--------
InvalidFetchedDataError  — structural absence in a fetched spreadsheet;
                           aborts the ingestion cycle.
RecordParseError         — a row violates the column contract; aborts the
                           cycle unless placeholder downgrade is enabled.
EmptyPersonNameCellError — the terminator. Raised by the block reader and
                           caught by the ingestion loop as clean success.
RemoteFetchError / MessageSendError — transport failures of the adapters.
Query and scheduling errors are raised by the read surface and the task
registry.
"""
from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class ScoreboardException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


# ---------------------------------------------------------------------------
# Structural absence (fetched data)
# ---------------------------------------------------------------------------

class InvalidFetchedDataError(ScoreboardException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "INVALID_FETCHED_DATA"


class EmptySheetsError(InvalidFetchedDataError):
    code = "EMPTY_SHEETS"

    def __init__(self):
        super().__init__(message="Spreadsheet response contains no sheets.")


class EmptyGridDataError(InvalidFetchedDataError):
    code = "EMPTY_GRID_DATA"

    def __init__(self):
        super().__init__(message="Sheet contains no grid data.")


class EmptyRowDataError(InvalidFetchedDataError):
    code = "EMPTY_ROW_DATA"

    def __init__(self):
        super().__init__(message="Grid data contains no rows.")


class EmptyCellDataError(InvalidFetchedDataError):
    code = "EMPTY_CELL_DATA"

    def __init__(self, row: int | None = None):
        super().__init__(
            message="Row contains no cell data.",
            details={"row": row} if row is not None else {},
        )


class EmptyPersonNameCellError(InvalidFetchedDataError):
    """The person name cell of a block is empty: there are no more tables."""
    code = "EMPTY_PERSON_NAME_CELL"

    def __init__(self):
        super().__init__(message="Person name cell is empty.")


class InvalidVectorSizeError(InvalidFetchedDataError):
    code = "INVALID_VECTOR_SIZE"

    def __init__(self, expected: int, received: int):
        super().__init__(
            message=f"Expected {expected} sheet(s) in the response, got {received}.",
            details={"expected": expected, "received": received},
        )


class SheetNotFoundError(InvalidFetchedDataError):
    code = "SHEET_NOT_FOUND"

    def __init__(self, title: str):
        super().__init__(
            message=f"Sheet id for the derived title {title!r} was not found.",
            details={"title": title},
        )


class TooManyTablesError(InvalidFetchedDataError):
    code = "TOO_MANY_TABLES"

    def __init__(self, limit: int):
        super().__init__(
            message=f"No terminator found after {limit} score tables.",
            details={"limit": limit},
        )


# ---------------------------------------------------------------------------
# Row parsing
# ---------------------------------------------------------------------------

class RecordParseError(ScoreboardException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "RECORD_PARSE_ERROR"


class UnexpectedFieldIndexError(RecordParseError):
    code = "UNEXPECTED_FIELD_INDEX"

    def __init__(self, index: int):
        super().__init__(
            message=f"Unexpected field index = {index}.",
            details={"index": index},
        )


class EmptyEffectiveFormatError(RecordParseError):
    code = "EMPTY_EFFECTIVE_FORMAT"

    def __init__(self, index: int):
        super().__init__(
            message=f"Effective format can't be empty (cell index={index}).",
            details={"index": index},
        )


class InvalidDateCellError(RecordParseError):
    code = "INVALID_DATE_CELL"

    def __init__(self, reason: str):
        super().__init__(
            message=f"The date cell is invalid: {reason}.",
            details={"reason": reason},
        )


class DateParseError(RecordParseError):
    code = "DATE_PARSE_ERROR"

    def __init__(self, raw: str):
        super().__init__(
            message=f"Unable to parse date from {raw!r}.",
            details={"raw": raw},
        )


class ScoreParseError(RecordParseError):
    code = "SCORE_PARSE_ERROR"

    def __init__(self, index: int, raw: str):
        super().__init__(
            message=f"Score parse error (cell index={index}): {raw!r}.",
            details={"index": index, "raw": raw},
        )


class InvalidPercentCellError(RecordParseError):
    code = "INVALID_PERCENT_CELL"

    def __init__(self, raw: str):
        super().__init__(
            message=f"Percent cell should end with '%', got {raw!r}.",
            details={"raw": raw},
        )


class PercentParseError(RecordParseError):
    code = "PERCENT_PARSE_ERROR"

    def __init__(self, raw: str):
        super().__init__(
            message=f"Unable to parse percent from {raw!r}.",
            details={"raw": raw},
        )


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class RemoteFetchError(ScoreboardException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "REMOTE_FETCH_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            details={"status_code": status_code} if status_code is not None else {},
        )


class MessageSendError(ScoreboardException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "MESSAGE_SEND_ERROR"

    def __init__(self, destination: str, reason: str):
        super().__init__(
            message=f"Unable to send message to {destination}: {reason}",
            details={"destination": destination},
        )


# ---------------------------------------------------------------------------
# Query surface
# ---------------------------------------------------------------------------

class DashboardNotInitializedError(ScoreboardException):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "DASHBOARD_NOT_INITIALIZED"

    def __init__(self):
        super().__init__(message="Dashboard has not been fetched yet.")


class EmptyParticipantsError(ScoreboardException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "EMPTY_PARTICIPANTS"

    def __init__(self):
        super().__init__(message="No participants have been identified.")


class PersonNotFoundError(ScoreboardException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "PERSON_NOT_FOUND"

    def __init__(self, name: str):
        super().__init__(
            message=f"Person {name!r} was not found.",
            details={"name": name},
        )


class RecordNotFoundError(ScoreboardException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "RECORD_NOT_FOUND"

    def __init__(self, name: str, day: date | None = None):
        details: dict[str, Any] = {"name": name}
        if day is not None:
            details["day"] = str(day)
        super().__init__(
            message=f"No filled record found for {name!r}"
            + (f" on {day}." if day is not None else "."),
            details=details,
        )


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------

class SchedulingConflictError(ScoreboardException):
    http_status = status.HTTP_409_CONFLICT
    code = "SCHEDULING_CONFLICT"

    def __init__(self, task_name: str, state: str):
        super().__init__(
            message=f"Task {task_name!r} can't be scheduled while {state}.",
            details={"task": task_name, "state": state},
        )


class DuplicateTaskError(ScoreboardException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE_TASK"

    def __init__(self, task_name: str):
        super().__init__(
            message=f"Task {task_name!r} is already registered.",
            details={"task": task_name},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def scoreboard_exception_handler(request: Request, exc: ScoreboardException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query", "path")),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
