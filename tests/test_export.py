import csv
import io

from fastapi.testclient import TestClient


def test_unknown_entity_is_not_found(client: TestClient) -> None:
    resp = client.get("/export/widgets")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Export type not found"}


def test_todos_csv_download(client: TestClient) -> None:
    client.post("/todos", json={"title": "Buy milk, eggs", "description": 'Say "hi"'})

    resp = client.get("/export/todos", params={"format": "csv"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert resp.headers["content-disposition"].startswith('attachment; filename="todos-export-')
    assert resp.headers["content-disposition"].endswith('.csv"')
    assert resp.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert resp.headers["pragma"] == "no-cache"
    assert resp.headers["expires"] == "0"

    assert '"Buy milk, eggs","Say ""hi"""' in resp.text
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert rows[0] == ["id", "title", "description", "status", "priority", "dueDate", "createdAt", "updatedAt"]
    assert rows[1][1] == "Buy milk, eggs"
    assert rows[1][2] == 'Say "hi"'
    assert rows[1][5] == ""


def test_json_export_has_metadata(client: TestClient) -> None:
    client.post("/todos", json={"title": "done one", "status": "DONE"})
    client.post("/todos", json={"title": "open one"})

    resp = client.get("/export/todos", params={"status": "DONE", "type": "ANNUAL"})
    assert resp.status_code == 200
    assert resp.headers["content-disposition"].endswith('.json"')
    body = resp.json()
    assert body["metadata"]["recordCount"] == 1
    assert body["metadata"]["filters"] == {"status": "DONE"}
    assert [row["title"] for row in body["data"]] == ["done one"]


def test_events_export_date_bounds(client: TestClient) -> None:
    client.post(
        "/events",
        json={"title": "in", "startDateTime": "2026-03-05T10:00:00Z", "endDateTime": "2026-03-05T11:00:00Z"},
    )
    client.post(
        "/events",
        json={"title": "out", "startDateTime": "2026-03-07T10:00:00Z", "endDateTime": "2026-03-07T11:00:00Z"},
    )

    body = client.get("/export/events", params={"dateFrom": "2026-03-05", "dateTo": "2026-03-05"}).json()
    assert [row["title"] for row in body["data"]] == ["in"]

    bad = client.get("/export/events", params={"dateFrom": "yesterday"})
    assert bad.status_code == 400
    assert bad.json()["details"] == {"dateFrom": ["Invalid date format"]}


def test_notes_export_tag_filter_and_csv_tags(client: TestClient) -> None:
    client.post("/notes", json={"title": "tagged", "tags": ["work", "urgent"]})
    client.post("/notes", json={"title": "plain"})

    resp = client.get("/export/notes", params={"format": "csv", "tags": "urgent"})
    rows = list(csv.reader(io.StringIO(resp.text)))
    assert len(rows) == 2
    assert rows[1][1] == "tagged"
    assert rows[1][3] == "work; urgent"


def test_empty_csv_export_keeps_header(client: TestClient) -> None:
    resp = client.get("/export/pomodoro", params={"format": "csv"})
    assert resp.text == "id,type,duration,startTime,endTime,completed,createdAt\r\n"


def test_invalid_enum_filters_rejected(client: TestClient) -> None:
    bad_status = client.get("/export/todos", params={"status": "BOGUS", "format": "csv"})
    assert bad_status.status_code == 400
    assert bad_status.json()["error"] == "Invalid input"
    assert "status" in bad_status.json()["details"]

    bad_type = client.get("/export/pomodoro", params={"sessionType": "nap"})
    assert bad_type.status_code == 400
    assert "sessionType" in bad_type.json()["details"]

    # goal statuses are not todo statuses
    assert client.get("/export/todos", params={"status": "PAUSED"}).status_code == 400
    assert client.get("/export/goals", params={"status": "PAUSED"}).status_code == 200


def test_metadata_reports_only_entity_filters(client: TestClient) -> None:
    body = client.get(
        "/export/pomodoro",
        params={"sessionType": "WORK", "completed": "false", "priority": "HIGH", "tags": "x"},
    ).json()
    assert body["metadata"]["filters"] == {"sessionType": "WORK", "completed": False}
