from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from core.ledger import HabitLedger
from core.storage import MemoryBlobStore, SnapshotStore
from core.time_utils import day_token
from main import app
from models.habit import Habit
from routes.deps import get_ledger


@pytest.fixture
def today():
    return date(2026, 3, 15)


@pytest.fixture
def blobs():
    return MemoryBlobStore()


@pytest.fixture
def ledger(blobs):
    return HabitLedger(store=SnapshotStore(blobs))


@pytest.fixture
def client(ledger):
    app.dependency_overrides[get_ledger] = lambda: ledger
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_habit(today, offsets=(), **kwargs):
    """A habit completed on `today - offset` for each offset."""
    habit = Habit(name=kwargs.pop("name", "Read"), **kwargs)
    habit.completed_dates = {day_token(today - timedelta(days=o)) for o in offsets}
    return habit
