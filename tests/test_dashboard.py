from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from personal_hub.config import settings
from personal_hub.core.clock import isoformat, utcnow
from personal_hub.core.dashboard import build_stats, goal_progress_percent
from personal_hub.db.models import PomodoroSession, User
from personal_hub.db.repositories import events_repo, pomodoro_repo, users_repo


@pytest.fixture()
def user(db_session: Session) -> User:
    return users_repo.create_user(db_session, email="dash@example.com", password="dash-password")


def _goal(client: TestClient, title: str, **fields) -> dict:
    payload = {
        "title": title,
        "type": "MONTHLY",
        "startDate": "2026-01-01T00:00:00Z",
        "endDate": "2026-01-31T00:00:00Z",
    }
    payload.update(fields)
    return client.post("/goals", json=payload).json()


def test_goal_progress_percent_rounds_half_up() -> None:
    assert goal_progress_percent(1, 8) == 13
    assert goal_progress_percent(5, 10) == 50
    assert goal_progress_percent(None, 10) == 0
    assert goal_progress_percent(3, None) == 0
    assert goal_progress_percent(0, 10) == 0


def test_limits_out_of_range_rejected(client: TestClient) -> None:
    assert client.get("/dashboard/stats", params={"recentItemsLimit": 0}).status_code == 400
    assert client.get("/dashboard/stats", params={"recentItemsLimit": 11}).status_code == 400
    assert client.get("/dashboard/activity", params={"activityLimit": 51}).status_code == 400


def test_stats_counts_sections(client: TestClient) -> None:
    client.post("/todos", json={"title": "open"})
    client.post("/todos", json={"title": "closed", "status": "DONE"})
    client.post("/todos", json={"title": "busy", "status": "IN_PROGRESS"})
    half = _goal(client, "half", targetValue=8)
    client.post(f"/goals/{half['id']}/progress", json={"value": 1})
    _goal(client, "finished", status="COMPLETED")
    soon = utcnow() + timedelta(days=2)
    client.post(
        "/events",
        json={"title": "Trip", "startDateTime": isoformat(soon), "endDateTime": isoformat(soon + timedelta(hours=3))},
    )
    client.post("/notes", json={"title": "n", "tags": ["x"]})
    client.post("/moments", json={"content": "today"})

    stats = client.get("/dashboard/stats", params={"recentItemsLimit": 2}).json()

    assert stats["todos"]["total"] == 3
    assert stats["todos"]["completed"] == 1
    assert stats["todos"]["pending"] == 2
    assert len(stats["todos"]["recentItems"]) == 2

    assert stats["goals"]["total"] == 2
    assert stats["goals"]["inProgress"] == 1
    assert stats["goals"]["completed"] == 1
    progress = {item["title"]: item["progress"] for item in stats["goals"]["recentItems"]}
    assert progress["half"] == 13

    assert stats["events"]["upcoming"] == 1
    assert stats["events"]["recentItems"][0]["title"] == "Trip"
    assert stats["notes"]["total"] == 1
    assert stats["moments"]["todayCount"] == 1
    assert stats["pomodoro"]["activeSession"] is None


def test_stats_pomodoro_section(client: TestClient) -> None:
    done = client.post("/pomodoro/sessions", json={"sessionType": "WORK", "duration": 25}).json()
    client.patch(f"/pomodoro/sessions/{done['id']}", json={"completed": True})
    running = client.post("/pomodoro/sessions", json={"sessionType": "SHORT_BREAK", "duration": 5}).json()

    pomodoro = client.get("/dashboard/stats").json()["pomodoro"]
    assert pomodoro["todaySessions"] == 1
    assert pomodoro["todayMinutes"] == 25
    assert pomodoro["weekSessions"] == 1
    assert pomodoro["activeSession"]["id"] == running["id"]
    assert pomodoro["activeSession"]["type"] == "SHORT_BREAK"
    assert 0 < pomodoro["activeSession"]["remainingSeconds"] <= 300


def test_activity_feed_merges_sources(client: TestClient) -> None:
    for i in range(3):
        client.post("/todos", json={"title": f"todo {i}"})
        _goal(client, f"goal {i}")
        client.post("/moments", json={"content": f"moment {i}"})

    small = client.get("/dashboard/activity", params={"activityLimit": 5}).json()
    assert len(small["items"]) == 5
    assert small["hasMore"] is True

    full = client.get("/dashboard/activity", params={"activityLimit": 50}).json()
    assert len(full["items"]) == 9
    assert full["hasMore"] is False
    timestamps = [item["timestamp"] for item in full["items"]]
    assert timestamps == sorted(timestamps, reverse=True)
    assert {item["type"] for item in full["items"]} == {"todo", "goal", "moment"}
    assert all(item["id"].startswith(f"{item['type']}-") for item in full["items"])


def test_activity_marks_completed_todos(client: TestClient) -> None:
    client.post("/todos", json={"title": "ship it", "status": "DONE"})
    item = client.get("/dashboard/activity").json()["items"][0]
    assert item["action"] == "completed"
    assert item["metadata"]["completed"] is True


def test_events_today_follows_reference_timezone(
    db_session: Session, user: User, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(settings, "timezone", "Asia/Tokyo")
    now = datetime(2026, 6, 10, 20, 0, tzinfo=timezone.utc)  # 05:00 on June 11 in Tokyo

    for title, start in (
        ("late June 10 in Tokyo", datetime(2026, 6, 10, 14, 59, tzinfo=timezone.utc)),
        ("early June 11 in Tokyo", datetime(2026, 6, 10, 16, 0, tzinfo=timezone.utc)),
        ("midnight June 12 in Tokyo", datetime(2026, 6, 11, 15, 0, tzinfo=timezone.utc)),
    ):
        events_repo.create_event(
            db_session,
            user.id,
            title=title,
            start_date_time=start,
            end_date_time=start + timedelta(minutes=30),
        )

    assert build_stats(db_session, user.id, now=now)["events"]["today"] == 1

    monkeypatch.setattr(settings, "timezone", "UTC")
    assert build_stats(db_session, user.id, now=now)["events"]["today"] == 2


def test_stats_expire_overdue_session(db_session: Session, user: User, session_factory: sessionmaker) -> None:
    start = datetime(2026, 6, 10, 9, 0, tzinfo=timezone.utc)
    row = pomodoro_repo.create_session(db_session, user.id, session_type="WORK", duration=25, now=start)

    pomodoro = build_stats(db_session, user.id, now=start + timedelta(minutes=26))["pomodoro"]
    assert pomodoro["activeSession"] is None
    assert pomodoro["todaySessions"] == 1
    assert pomodoro["todayMinutes"] == 25

    with session_factory() as session:
        stored = session.get(PomodoroSession, row.id)
        assert stored.completed is True
        assert stored.end_time == start + timedelta(minutes=25)


def test_dashboard_read_expires_backdated_session(client: TestClient, session_factory: sessionmaker) -> None:
    created = client.post("/pomodoro/sessions", json={"sessionType": "WORK", "duration": 25}).json()
    with session_factory() as session:
        row = session.get(PomodoroSession, created["id"])
        row.start_time = utcnow() - timedelta(minutes=26)
        session.commit()

    assert client.get("/dashboard/stats").json()["pomodoro"]["activeSession"] is None
    stored = client.get(f"/pomodoro/sessions/{created['id']}").json()
    assert stored["completed"] is True
    assert client.get("/pomodoro/sessions/active").status_code == 404
