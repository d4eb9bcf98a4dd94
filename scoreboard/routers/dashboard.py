"""
Dashboard router (read-only).

GET /dashboard/participants
GET /dashboard/participants/{name}/last
GET /dashboard/participants/{name}/records/{day}
GET /dashboard/summary
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from scoreboard.core.config import settings
from scoreboard.core.deps import get_cache
from scoreboard.core.errors import DashboardNotInitializedError, RecordNotFoundError
from scoreboard.models import DailyRecord, Person
from scoreboard.schemas.dashboard import (
    ParticipantsResponse,
    RecordResponse,
    ScoresOut,
    SummaryResponse,
)
from scoreboard.services.analyzer import DashboardAnalyzer, current_snapshot
from scoreboard.services.cache import SnapshotCache
from scoreboard.services.periods import current_time, local_date

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _record_to_response(person: Person, record: DailyRecord) -> RecordResponse:
    return RecordResponse(
        name=person.name,
        day=str(record.date),
        scores=ScoresOut.model_validate(record.scores),
        total_score=record.total_score,
        percent=record.percent.value,
    )


async def _analyzer(cache: SnapshotCache) -> DashboardAnalyzer:
    dashboard = await current_snapshot(cache)
    if not dashboard.is_initialized:
        raise DashboardNotInitializedError()
    return DashboardAnalyzer(dashboard)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get(
    "/participants",
    response_model=ParticipantsResponse,
    summary="Participants of the current month",
)
async def participants(cache: SnapshotCache = Depends(get_cache)):
    dashboard = await current_snapshot(cache)
    return ParticipantsResponse(
        initialized=dashboard.is_initialized,
        names=DashboardAnalyzer(dashboard).participants_names(),
    )


@router.get(
    "/participants/{name}/last",
    response_model=RecordResponse,
    summary="Last filled day of a participant",
    responses={
        404: {"description": "Unknown participant, or no day filled this month."},
        503: {"description": "No data fetched yet."},
    },
)
async def last_filled(name: str, cache: SnapshotCache = Depends(get_cache)):
    analyzer = await _analyzer(cache)
    person = analyzer.require_person(name)
    record = analyzer.last_filled_record(person)
    if record is None:
        raise RecordNotFoundError(name)
    return _record_to_response(person, record)


@router.get(
    "/participants/{name}/records/{day}",
    response_model=RecordResponse,
    summary="Filled record of a participant on a given day",
    responses={
        404: {"description": "Unknown participant, or the day was not filled."},
        503: {"description": "No data fetched yet."},
    },
)
async def record_on_date(name: str, day: date, cache: SnapshotCache = Depends(get_cache)):
    analyzer = await _analyzer(cache)
    person = analyzer.require_person(name)
    record = analyzer.record_on_date(person, day)
    if record is None:
        raise RecordNotFoundError(name, day)
    return _record_to_response(person, record)


@router.get(
    "/summary",
    response_model=SummaryResponse,
    summary="Who has filled in a given day",
    responses={
        404: {"description": "The snapshot has no participants."},
        503: {"description": "No data fetched yet."},
    },
)
async def summary(
    day: Optional[date] = Query(
        default=None,
        description="ISO date (YYYY-MM-DD). Defaults to today in the sheet's local time.",
        examples=["2024-03-01"],
    ),
    cache: SnapshotCache = Depends(get_cache),
):
    target = day or local_date(current_time(), settings.SHEET_UTC_OFFSET_H)
    analyzer = await _analyzer(cache)
    entries = analyzer.summary(target)
    return SummaryResponse(
        day=str(target),
        participants=len(analyzer.participants()),
        filled=[_record_to_response(p, r) for p, r in entries],
    )
