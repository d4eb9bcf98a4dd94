"""
Shared pytest fixtures. Builders and fakes live in helpers.py.
"""
import pytest
from fastapi.testclient import TestClient

from scoreboard.main import app
from scoreboard.services.cache import SnapshotCache
from scoreboard.services.manager import TaskManager

from helpers import RecordingSender, empty_day_row, make_row, name_row


@pytest.fixture()
def two_person_blocks():
    return [
        [name_row("Alice"), make_row("01.03.2024"), make_row("02.03.2024", total="12", percent="48%"), empty_day_row("03.03.2024")],
        [name_row("  Bob  "), make_row("01.03.2024", total="7", percent="28%"), empty_day_row("02.03.2024")],
    ]


@pytest.fixture()
def sender():
    return RecordingSender()


@pytest.fixture()
def cache():
    return SnapshotCache()


@pytest.fixture()
def client(cache, sender):
    """TestClient without the lifespan: no background jobs, no network."""
    app.state.cache = cache
    app.state.manager = TaskManager(sender, cache)
    yield TestClient(app)
