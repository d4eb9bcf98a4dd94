"""
Tasks router — introspection of the background jobs.

GET /tasks?category=refresh|notification
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from scoreboard.core.deps import get_manager
from scoreboard.schemas.dashboard import TaskResponse
from scoreboard.services.manager import TaskManager
from scoreboard.services.tasks import TaskCategory

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=list[TaskResponse],
    summary="Active periodic tasks",
)
def active_tasks(
    category: Optional[TaskCategory] = Query(
        default=None,
        description="Restrict to one category.",
    ),
    manager: TaskManager = Depends(get_manager),
):
    """Scheduled or running tasks, optionally filtered by category."""
    return [TaskResponse.model_validate(t.info()) for t in manager.active_tasks(category)]
