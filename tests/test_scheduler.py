import asyncio
from datetime import timedelta

from core.scheduler import run_daily_maintenance
from core.time_utils import get_current_time
from models.experiment import Experiment
from tests.conftest import make_habit


def test_maintenance_refreshes_stale_streak(ledger, blobs):
    today = get_current_time().date()
    # Last completed two days ago, so the stored streak is stale.
    ledger.add_habit(make_habit(today, offsets=[2, 3]))
    ledger.profile.current_streak = 5
    ledger.profile.best_streak = 5

    asyncio.run(run_daily_maintenance(ledger))

    assert ledger.profile.current_streak == 0
    assert ledger.profile.best_streak == 5
    assert blobs.read("SavedProfile") is not None


def test_maintenance_ends_elapsed_experiments(ledger):
    now = get_current_time()
    old = ledger.add_experiment(Experiment(name="Old", duration_days=7, start_date=now - timedelta(days=8)))
    fresh = ledger.add_experiment(Experiment(name="Fresh", duration_days=7, start_date=now))

    asyncio.run(run_daily_maintenance(ledger))

    assert not old.is_active
    assert fresh.is_active


def test_maintenance_failure_is_logged_not_raised(ledger, monkeypatch):
    def boom(now=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(ledger, "refresh", boom)
    asyncio.run(run_daily_maintenance(ledger))
