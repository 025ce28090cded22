"""End-to-end tests for the HTTP API."""

import json

API = "/api/v1"
LINE = [{"points": [[0, 0], [1, 1]]}]


def signup(client, email: str, password: str = "StrongPassw0rd!") -> dict:
    r = client.post(f"{API}/auth/register", json={"email": email, "password": password})
    assert r.status_code == 201
    r = client.post(f"{API}/auth/login", data={"username": email, "password": password})
    assert r.status_code == 200
    # rely on the bearer header, not the session cookie
    client.cookies.clear()
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def test_health(client):
    r = client.get(f"{API}/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "database": "ok"}


def test_register_rejects_duplicate_email(client):
    signup(client, "alice@example.com")
    r = client.post(f"{API}/auth/register", json={"email": "Alice@example.com", "password": "AnotherPass1"})
    assert r.status_code == 400


def test_login_wrong_password(client):
    signup(client, "alice@example.com")
    r = client.post(f"{API}/auth/login", data={"username": "alice@example.com", "password": "wrongwrong"})
    assert r.status_code == 401


def test_requires_authentication(client):
    assert client.get(f"{API}/notes/current").status_code == 401
    r = client.get(f"{API}/notes/current", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 403


def test_cookie_authentication(client):
    client.post(f"{API}/auth/register", json={"email": "alice@example.com", "password": "StrongPassw0rd!"})
    client.post(f"{API}/auth/login", data={"username": "alice@example.com", "password": "StrongPassw0rd!"})

    r = client.get(f"{API}/auth/me")
    assert r.status_code == 200
    assert r.json()["email"] == "alice@example.com"

    client.get(f"{API}/auth/logout")
    assert client.get(f"{API}/auth/me").status_code == 401


def test_owner_creates_saves_and_reads(client):
    alice = signup(client, "alice@example.com")

    assert client.get(f"{API}/notes/current", headers=alice).status_code == 404

    r = client.post(f"{API}/notes", headers=alice, json={"paths": LINE})
    assert r.status_code == 201
    note_id = r.json()["note_id"]

    r = client.put(f"{API}/notes/current", headers=alice, json={"paths": LINE + LINE})
    assert r.status_code == 200
    assert r.json()["note_id"] == note_id
    assert r.json()["revision"] == 2

    r = client.get(f"{API}/notes/current", headers=alice)
    assert r.status_code == 200
    body = r.json()
    assert body["role"] == "writer"
    assert body["paths"] == LINE + LINE


def test_save_without_note_is_forbidden(client):
    bob = signup(client, "bob@example.com")
    r = client.put(f"{API}/notes/current", headers=bob, json={"paths": LINE})
    assert r.status_code == 403


def test_share_flow(client):
    alice = signup(client, "alice@example.com")
    bob = signup(client, "bob@example.com")

    r = client.post(f"{API}/shares", headers=alice, json={"email": "bob@example.com", "role": "reader"})
    assert r.status_code == 409  # nothing saved yet

    client.post(f"{API}/notes", headers=alice, json={"paths": LINE})

    r = client.post(f"{API}/shares", headers=alice, json={"email": "bob@example.com", "role": "reader"})
    assert r.status_code == 201
    assert r.json()["role"] == "reader"
    assert r.json()["email"] == "bob@example.com"

    r = client.get(f"{API}/notes/current", headers=bob)
    assert r.json()["role"] == "reader"
    assert r.json()["paths"] == LINE

    r = client.put(f"{API}/notes/current", headers=bob, json={"paths": []})
    assert r.status_code == 403

    r = client.post(f"{API}/shares", headers=alice, json={"email": "bob@example.com", "role": "writer"})
    assert r.status_code == 201
    r = client.get(f"{API}/shares", headers=alice)
    assert [(s["email"], s["role"]) for s in r.json()] == [("bob@example.com", "writer")]

    r = client.put(f"{API}/notes/current", headers=bob, json={"paths": [{"points": [[4, 4]]}]})
    assert r.status_code == 200
    r = client.get(f"{API}/notes/current", headers=alice)
    assert r.json()["paths"] == [{"points": [[4, 4]]}]

    r = client.delete(f"{API}/shares/bob@example.com", headers=alice)
    assert r.status_code == 200
    assert client.get(f"{API}/notes/current", headers=bob).status_code == 404


def test_share_errors(client):
    alice = signup(client, "alice@example.com")
    client.post(f"{API}/notes", headers=alice, json={"paths": LINE})

    r = client.post(f"{API}/shares", headers=alice, json={"email": "ghost@example.com", "role": "reader"})
    assert r.status_code == 404

    r = client.post(f"{API}/shares", headers=alice, json={"email": "alice@example.com", "role": "writer"})
    assert r.status_code == 400

    r = client.post(f"{API}/shares", headers=alice, json={"email": "alice@example.com", "role": "owner"})
    assert r.status_code == 422


def test_export_and_import(client):
    alice = signup(client, "alice@example.com")
    client.post(f"{API}/notes", headers=alice, json={"paths": LINE})

    r = client.get(f"{API}/notes/current/export", headers=alice)
    assert r.status_code == 200
    assert "drawing.json" in r.headers["content-disposition"]
    assert json.loads(r.content) == LINE

    upload = json.dumps([{"points": [[6, 6]]}]).encode("utf-8")
    r = client.post(
        f"{API}/notes/current/import",
        headers=alice,
        files={"file": ("drawing.json", upload, "application/json")},
    )
    assert r.status_code == 200
    assert client.get(f"{API}/notes/current", headers=alice).json()["paths"] == [{"points": [[6, 6]]}]

    r = client.post(
        f"{API}/notes/current/import",
        headers=alice,
        files={"file": ("drawing.json", b"{oops", "application/json")},
    )
    assert r.status_code == 400
