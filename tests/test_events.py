from fastapi.testclient import TestClient


def _event(client: TestClient, title: str, start: str, end: str, **fields) -> dict:
    payload = {"title": title, "startDateTime": start, "endDateTime": end}
    payload.update(fields)
    resp = client.post("/events", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_end_must_follow_start(client: TestClient) -> None:
    resp = client.post(
        "/events",
        json={"title": "Zero", "startDateTime": "2026-04-01T10:00:00Z", "endDateTime": "2026-04-01T10:00:00Z"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "End date must be after start date"


def test_update_validates_against_stored_bounds(client: TestClient) -> None:
    event = _event(client, "Standup", "2026-04-01T10:00:00Z", "2026-04-01T10:15:00Z")
    resp = client.patch(f"/events/{event['id']}", json={"endDateTime": "2026-04-01T09:00:00Z"})
    assert resp.status_code == 400

    resp = client.patch(f"/events/{event['id']}", json={"location": "Room 4"})
    assert resp.status_code == 200
    assert resp.json()["location"] == "Room 4"


def test_range_filter_returns_overlapping_events(client: TestClient) -> None:
    _event(client, "before", "2026-04-01T08:00:00Z", "2026-04-01T09:00:00Z")
    _event(client, "spanning", "2026-04-01T23:00:00Z", "2026-04-02T01:00:00Z")
    _event(client, "inside", "2026-04-02T12:00:00Z", "2026-04-02T13:00:00Z")
    _event(client, "after", "2026-04-03T12:00:00Z", "2026-04-03T13:00:00Z")

    resp = client.get(
        "/events",
        params={"startDate": "2026-04-02T00:00:00Z", "endDate": "2026-04-02T23:59:59Z"},
    )
    assert resp.status_code == 200
    assert [e["title"] for e in resp.json()["items"]] == ["spanning", "inside"]


def test_search_and_all_day_filters(client: TestClient) -> None:
    _event(client, "Dentist", "2026-05-01T08:00:00Z", "2026-05-01T09:00:00Z", location="Main street clinic")
    _event(client, "Holiday", "2026-05-02T00:00:00Z", "2026-05-03T00:00:00Z", allDay=True)

    found = client.get("/events", params={"search": "clinic"}).json()
    assert [e["title"] for e in found["items"]] == ["Dentist"]

    all_day = client.get("/events", params={"allDay": "true"}).json()
    assert [e["title"] for e in all_day["items"]] == ["Holiday"]


def test_delete_event(client: TestClient) -> None:
    event = _event(client, "Call", "2026-05-01T08:00:00Z", "2026-05-01T08:30:00Z")
    assert client.delete(f"/events/{event['id']}").json() == {"message": "Event deleted successfully"}
    missing = client.get(f"/events/{event['id']}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "Event not found"}
