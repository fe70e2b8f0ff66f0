from fastapi.testclient import TestClient


def test_note_tags_are_normalized(client: TestClient) -> None:
    resp = client.post("/notes", json={"title": "Ideas", "content": "x", "tags": [" work ", "work", "", "home"]})
    assert resp.status_code == 201
    assert resp.json()["tags"] == ["work", "home"]


def test_note_tag_filter_matches_any(client: TestClient) -> None:
    client.post("/notes", json={"title": "A", "tags": ["work"]})
    client.post("/notes", json={"title": "B", "tags": ["home"]})
    client.post("/notes", json={"title": "C", "tags": ["workshop"]})

    resp = client.get("/notes", params={"tags": "work,home", "sortBy": "title", "sortOrder": "asc"})
    assert [n["title"] for n in resp.json()["items"]] == ["A", "B"]

    repeated = client.get("/notes", params=[("tags", "home")])
    assert [n["title"] for n in repeated.json()["items"]] == ["B"]


def test_note_search_and_update(client: TestClient) -> None:
    note = client.post("/notes", json={"title": "Groceries", "content": "100% juice"}).json()
    client.post("/notes", json={"title": "Other", "content": "nothing"})

    found = client.get("/notes", params={"search": "100%"}).json()
    assert [n["id"] for n in found["items"]] == [note["id"]]

    updated = client.patch(f"/notes/{note['id']}", json={"tags": ["food"]}).json()
    assert updated["tags"] == ["food"]
    assert updated["title"] == "Groceries"

    assert client.delete(f"/notes/{note['id']}").json() == {"message": "Note deleted successfully"}


def test_moment_defaults_and_tag_filter(client: TestClient) -> None:
    plain = client.post("/moments", json={"content": "Sunny morning"})
    assert plain.status_code == 201
    assert plain.json()["tags"] == []

    client.post("/moments", json={"content": "Coffee with Ann", "tags": ["friends"]})

    tagged = client.get("/moments", params={"tag": "friends"}).json()
    assert [m["content"] for m in tagged["items"]] == ["Coffee with Ann"]

    searched = client.get("/moments", params={"search": "sunny"}).json()
    assert searched["total"] == 1


def test_moment_content_required(client: TestClient) -> None:
    resp = client.post("/moments", json={"content": "   "})
    assert resp.status_code == 400
    assert "content" in resp.json()["details"]


def test_moment_update_and_delete(client: TestClient) -> None:
    moment = client.post("/moments", json={"content": "draft", "tags": ["a"]}).json()
    updated = client.put(f"/moments/{moment['id']}", json={"content": "final"}).json()
    assert updated["content"] == "final"
    assert updated["tags"] == ["a"]

    assert client.delete(f"/moments/{moment['id']}").json() == {"message": "Moment deleted successfully"}
    assert client.get(f"/moments/{moment['id']}").status_code == 404
