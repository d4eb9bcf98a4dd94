"""
Dashboard query schemas.

GET /dashboard/participants                     → ParticipantsResponse
GET /dashboard/participants/{name}/last         → RecordResponse
GET /dashboard/participants/{name}/records/{d}  → RecordResponse
GET /dashboard/summary                          → SummaryResponse
GET /tasks                                      → list[TaskResponse]
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from scoreboard.services.tasks import TaskCategory, TaskState


class ScoresOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sport: float
    professional_growth: float
    health: float
    spiritual_growth: float
    foreign_language: float
    personal_dev: float


class RecordResponse(BaseModel):
    """One filled day of a participant."""
    name: str = Field(description="Participant name as written in the sheet.")
    day: str = Field(description="ISO date of the record.")
    scores: ScoresOut
    total_score: float = Field(description="Total column of the sheet (authoritative).")
    percent: int = Field(description="Completion percentage, usually 0–100.")


class ParticipantsResponse(BaseModel):
    initialized: bool = Field(description="False until the first successful fetch.")
    names: list[str] = Field(description="Participants in sheet order.")


class SummaryResponse(BaseModel):
    day: str
    participants: int = Field(description="Participants in the current snapshot.")
    filled: list[RecordResponse] = Field(
        description="Participants who filled the day in, in sheet order."
    )


class TaskResponse(BaseModel):
    """Built from PeriodicTask.info()."""
    model_config = ConfigDict(from_attributes=True)

    name: str
    category: TaskCategory
    state: TaskState
    trigger: Optional[str] = Field(default=None, description='e.g. "every 10 min".')
    runs: int
    failures: int
    next_run_at: Optional[datetime] = None
    last_started_at: Optional[datetime] = None
    last_finished_at: Optional[datetime] = None
    last_error: Optional[str] = None
