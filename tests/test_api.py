from datetime import timedelta

from core.time_utils import get_current_time, get_today
from models.experiment import Experiment
from models.reward import Reward


def _create_habit(client, **fields):
    payload = {"name": "Read"}
    payload.update(fields)
    response = client.post("/habits/", json=payload)
    assert response.status_code == 201
    return response.json()


def test_create_habit_with_identity(client, ledger):
    habit = _create_habit(client, identity_statement="a reader", cue_location="the couch")

    assert habit["response"]["two_minute_version"] == "Read"
    assert habit["completed_dates"] == []

    identities = client.get("/profile/identities").json()
    assert len(identities) == 1
    assert identities[0]["linked_habit_ids"] == [habit["id"]]
    assert identities[0]["category"] == "other"


def test_create_habit_without_name_is_rejected(client, ledger):
    response = client.post("/habits/", json={"name": "  "})
    assert response.status_code == 422
    assert ledger.habits == []


def test_toggle_check_in_and_undo(client, ledger):
    habit = _create_habit(client)
    ledger.add_reward(Reward(name="Episode", points_required=5))

    response = client.post(f"/habits/{habit['id']}/toggle")
    assert response.status_code == 200
    body = response.json()
    assert body["completed"] is True
    assert body["current_streak"] == 1
    assert body["total_completions"] == 1
    assert body["habit"]["completed_dates"] == [get_today().isoformat()]

    body = client.post(f"/habits/{habit['id']}/toggle").json()
    assert body["completed"] is False
    assert body["total_completions"] == 0
    assert client.get("/rewards/").json()[0]["points_earned"] == 1


def test_toggle_past_day(client):
    habit = _create_habit(client)
    yesterday = get_today() - timedelta(days=1)

    body = client.post(f"/habits/{habit['id']}/toggle", json={"day": yesterday.isoformat()}).json()
    assert body["completed"] is True
    assert body["current_streak"] == 1

    stats = client.get(f"/habits/{habit['id']}/stats").json()
    assert stats["current_streak"] == 1
    assert stats["is_completed_today"] is False
    assert stats["is_streak_at_risk"] is False
    assert stats["weekly_completion_rate"] == 1 / 7


def test_level_up_until_mastered(client):
    habit = _create_habit(client, full_version="Read a chapter")
    for _ in range(4):
        response = client.post(f"/habits/{habit['id']}/level-up")
    assert response.json()["response"]["current_level"] == 3

    stats = client.get(f"/habits/{habit['id']}/stats").json()
    assert stats["response_level_name"] == "Mastered"
    assert stats["response_progress"] == 1.0
    assert stats["implementation_intention"] == "I will Read a chapter"
    assert client.post(f"/habits/{habit['id']}/level-up").status_code == 200


def test_update_archive_and_delete_habit(client):
    habit = _create_habit(client)

    updated = client.put(f"/habits/{habit['id']}", json={"description": "Before bed"}).json()
    assert updated["description"] == "Before bed"
    assert updated["name"] == "Read"

    client.post(f"/habits/{habit['id']}/archive")
    assert client.get("/habits/").json() == []
    assert len(client.get("/habits/", params={"include_archived": True}).json()) == 1

    assert client.delete(f"/habits/{habit['id']}").status_code == 200
    assert client.get(f"/habits/{habit['id']}").status_code == 404


def test_unknown_ids_return_404(client):
    assert client.get("/habits/missing").status_code == 404
    assert client.post("/habits/missing/toggle").status_code == 404
    assert client.post("/rewards/missing/redeem").status_code == 404
    assert client.post("/experiments/missing/start").status_code == 404
    assert client.delete("/profile/identities/missing").status_code == 404
    assert client.delete("/scorecard/behaviors/missing").status_code == 404


def test_redeem_requires_unlocked_reward(client, ledger):
    reward = client.post("/rewards/", json={"name": "Episode", "points_required": 2}).json()
    assert reward["is_unlocked"] is False
    assert client.post("/rewards/", json={"name": "Free", "points_required": 0}).status_code == 422

    response = client.post(f"/rewards/{reward['id']}/redeem")
    assert response.status_code == 400

    ledger.add_points_to_rewards(2)
    redeemed = client.post(f"/rewards/{reward['id']}/redeem").json()
    assert redeemed["points_earned"] == 0
    assert redeemed["is_unlocked"] is False


def test_listing_experiments_ends_elapsed_ones(client, ledger):
    now = get_current_time()
    ledger.add_experiment(Experiment(name="Old", duration_days=7, start_date=now - timedelta(days=9)))
    created = client.post("/experiments/", json={"name": "Walks", "duration_days": 14}).json()
    assert created["days_remaining"] in (13, 14)
    assert created["is_active"] is True

    active = client.get("/experiments/", params={"active_only": True}).json()
    assert [e["name"] for e in active] == ["Walks"]

    noted = client.post(f"/experiments/{created['id']}/notes", json={"content": "Day one"}).json()
    assert [n["content"] for n in noted["notes"]] == ["Day one"]

    ended = client.post(f"/experiments/{created['id']}/end").json()
    assert ended["is_active"] is False
    assert ended["days_remaining"] == 0


def test_profile_level_and_reset(client, ledger):
    ledger.profile.total_completions = 20
    profile = client.get("/profile/").json()
    assert profile["level"] == 2
    assert profile["level_title"] == "Apprentice"
    assert profile["completions_to_next_level"] == 10

    assert client.put("/profile/name", json={"name": "Sam"}).json()["name"] == "Sam"

    profile = client.post("/profile/reset").json()
    assert profile["name"] == "Sam"
    assert profile["total_completions"] == 0
    assert profile["level"] == 1


def test_scorecard_flow(client, ledger):
    habit = _create_habit(client)
    walk = client.post("/scorecard/behaviors", json={"behavior": "Walk", "rating": "positive"}).json()
    client.post("/scorecard/behaviors", json={"behavior": "Snooze", "rating": "negative"})

    scorecard = client.get("/scorecard/").json()
    assert scorecard["balance_score"] == 0
    assert [b["behavior"] for b in scorecard["habit_candidates"]] == ["Walk"]

    linked = client.post(f"/scorecard/behaviors/{walk['id']}/link", json={"habit_id": habit["id"]}).json()
    assert linked["linked_habit_id"] == habit["id"]
    assert client.post(f"/scorecard/behaviors/{walk['id']}/link", json={"habit_id": "missing"}).status_code == 404

    reviewed = client.post("/scorecard/review").json()
    assert reviewed["habit_candidates"] == []
    assert reviewed["last_review_date"] is not None


def test_analytics(client, ledger):
    first = _create_habit(client, name="Read")
    _create_habit(client, name="Stretch")
    client.post(f"/habits/{first['id']}/toggle")

    today = client.get("/analytics/today").json()
    assert today["completed_count"] == 1
    assert today["total_count"] == 2
    assert today["completion_rate"] == 0.5
    assert today["current_streak"] == 1

    month = client.get("/analytics/month").json()
    assert month["completion_rate"] == 1 / get_today().day

    days = client.get("/analytics/calendar").json()
    entry = next(d for d in days if d["day"] == get_today().isoformat())
    assert entry["completed_count"] == 1
    assert entry["total_habits"] == 2
    assert entry["is_future"] is False

    weekly = client.get("/analytics/weekly").json()
    assert {w["name"]: w["current_streak"] for w in weekly} == {"Read": 1, "Stretch": 0}

    assert client.get("/analytics/month", params={"month": 13}).status_code == 422


def test_missing_ledger_is_unavailable(monkeypatch):
    from fastapi.testclient import TestClient

    from main import app

    monkeypatch.setattr(app.state, "ledger", None, raising=False)
    response = TestClient(app).get("/habits/")
    assert response.status_code == 503


def test_editing_response_texts_keeps_level(client):
    habit = _create_habit(client)
    client.post(f"/habits/{habit['id']}/level-up")
    client.post(f"/habits/{habit['id']}/level-up")

    updated = client.put(
        f"/habits/{habit['id']}",
        json={"response": {"two_minute_version": "Open the book", "current_level": 0}},
    ).json()

    assert updated["response"]["current_level"] == 2
    assert updated["response"]["two_minute_version"] == "Open the book"
    assert updated["response"]["full_version"] == "Read"


def test_null_clears_optional_fields_only(client):
    habit = _create_habit(client)
    set_warning = client.put(f"/habits/{habit['id']}", json={"streak_warning": "Don't miss twice"}).json()
    assert set_warning["streak_warning"] == "Don't miss twice"

    cleared = client.put(f"/habits/{habit['id']}", json={"streak_warning": None}).json()
    assert cleared["streak_warning"] is None
    assert cleared["name"] == "Read"

    assert client.put(f"/habits/{habit['id']}", json={"name": None}).status_code == 422
    assert client.put(f"/habits/{habit['id']}", json={"response": {"full_version": None}}).status_code == 422

    reward = client.post("/rewards/", json={"name": "Episode", "points_required": 5, "linked_habit_id": habit["id"]}).json()
    unlinked = client.put(f"/rewards/{reward['id']}", json={"linked_habit_id": None}).json()
    assert unlinked["linked_habit_id"] is None
    assert client.put(f"/rewards/{reward['id']}", json={"points_required": None}).status_code == 422


def test_toggle_first_representable_day(client):
    habit = _create_habit(client)

    response = client.post(f"/habits/{habit['id']}/toggle", json={"day": "0001-01-01"})

    assert response.status_code == 200
    assert response.json()["completed"] is True


def test_month_outside_calendar_range_is_rejected(client):
    assert client.get("/analytics/month", params={"year": 10000}).status_code == 422
    assert client.get("/analytics/calendar", params={"year": 10000}).status_code == 422
    assert client.get("/analytics/month", params={"year": 9999, "month": 12}).status_code == 200
