from fastapi.testclient import TestClient


def _goal(client: TestClient, **fields) -> dict:
    payload = {
        "title": "Read books",
        "type": "ANNUAL",
        "targetValue": 12,
        "unit": "books",
        "startDate": "2026-01-01T00:00:00Z",
        "endDate": "2026-12-31T00:00:00Z",
    }
    payload.update(fields)
    resp = client.post("/goals", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_goal_defaults(client: TestClient) -> None:
    goal = _goal(client)
    assert goal["currentValue"] == 0
    assert goal["status"] == "ACTIVE"
    assert goal["targetValue"] == 12


def test_end_before_start_rejected(client: TestClient) -> None:
    resp = client.post(
        "/goals",
        json={
            "title": "Backwards",
            "type": "MONTHLY",
            "startDate": "2026-02-01T00:00:00Z",
            "endDate": "2026-01-01T00:00:00Z",
        },
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "End date must be after or equal to start date"


def test_same_start_and_end_allowed(client: TestClient) -> None:
    goal = _goal(client, type="DAILY", startDate="2026-03-01T00:00:00Z", endDate="2026-03-01T00:00:00Z")
    assert goal["startDate"] == goal["endDate"]


def test_progress_accumulates_and_is_embedded(client: TestClient) -> None:
    goal = _goal(client)
    first = client.post(f"/goals/{goal['id']}/progress", json={"value": 2, "note": "January"})
    assert first.status_code == 201
    assert first.json()["goal"]["currentValue"] == 2
    second = client.post(f"/goals/{goal['id']}/progress", json={"value": 1.5})
    assert second.json()["goal"]["currentValue"] == 3.5

    detail = client.get(f"/goals/{goal['id']}").json()
    assert detail["currentValue"] == 3.5
    assert len(detail["progress"]) == 2
    assert {entry["value"] for entry in detail["progress"]} == {2, 1.5}


def test_deleting_progress_never_goes_below_zero(client: TestClient) -> None:
    goal = _goal(client)
    entry = client.post(f"/goals/{goal['id']}/progress", json={"value": 5}).json()["progress"]
    client.patch(f"/goals/{goal['id']}", json={"currentValue": 1})

    resp = client.delete(f"/goals/{goal['id']}/progress/{entry['id']}")
    assert resp.status_code == 200
    assert resp.json()["goal"]["currentValue"] == 0

    missing = client.delete(f"/goals/{goal['id']}/progress/{entry['id']}")
    assert missing.status_code == 404
    assert missing.json()["error"] == "Progress entry not found"


def test_list_goals_filters(client: TestClient) -> None:
    _goal(client, title="yearly")
    _goal(client, title="paused", type="WEEKLY", status="PAUSED")

    paused = client.get("/goals", params={"status": "PAUSED"}).json()
    assert [g["title"] for g in paused["items"]] == ["paused"]
    weekly = client.get("/goals", params={"type": "WEEKLY"}).json()
    assert weekly["total"] == 1


def test_delete_goal(client: TestClient) -> None:
    goal = _goal(client)
    client.post(f"/goals/{goal['id']}/progress", json={"value": 1})
    resp = client.delete(f"/goals/{goal['id']}")
    assert resp.json() == {"message": "Goal deleted successfully"}
    assert client.get(f"/goals/{goal['id']}").status_code == 404


def test_invalid_color_rejected(client: TestClient) -> None:
    resp = client.post(
        "/goals",
        json={
            "title": "Colorful",
            "type": "WEEKLY",
            "startDate": "2026-01-01T00:00:00Z",
            "endDate": "2026-01-07T00:00:00Z",
            "color": "red",
        },
    )
    assert resp.status_code == 400
    assert "color" in resp.json()["details"]


def test_new_goal_ignores_client_current_value(client: TestClient) -> None:
    goal = _goal(client, currentValue=40)
    assert goal["currentValue"] == 0

    client.post(f"/goals/{goal['id']}/progress", json={"value": 2})
    detail = client.get(f"/goals/{goal['id']}").json()
    assert detail["currentValue"] == 2
    assert detail["currentValue"] == sum(entry["value"] for entry in detail["progress"])
