"""
FastAPI dependencies. The lifespan in scoreboard.main stores the cache and
the task manager on app.state; tests set them directly.
"""
from __future__ import annotations

from fastapi import Request

from scoreboard.services.cache import SnapshotCache
from scoreboard.services.manager import TaskManager


def get_cache(request: Request) -> SnapshotCache:
    return request.app.state.cache


def get_manager(request: Request) -> TaskManager:
    return request.app.state.manager
