"""HTTP surface: status codes, JSON shapes and bearer handling."""

import pytest


def _register(client, email="a@x.com", password="P@ss1"):
    return client.post("/api/auth/register", json={"email": email, "password": password})


def _token(client, email="a@x.com", password="P@ss1"):
    _register(client, email, password)
    res = client.post("/api/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200
    return res.get_json()["token"]


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def _create(client, token, **overrides):
    body = {
        "name": "Buy milk",
        "description": "2 litres",
        "due_date": "2030-05-22T09:38:24.405027Z",
        "priority": "HIGH",
    }
    body.update(overrides)
    return client.post("/api/todos", json=body, headers=_auth(token))


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


# ─── auth ───────────────────────────────────────────────────────

def test_register_and_duplicate(client):
    res = _register(client)
    assert res.status_code == 201
    assert res.get_json()["id"]

    dup = _register(client)
    assert dup.status_code == 409
    assert dup.get_json()["code"] == "EMAIL_ALREADY_EXISTS"


def test_register_normalizes_email(client):
    _register(client, email="  A@X.com ")
    res = client.post("/api/auth/login", json={"email": "a@x.com", "password": "P@ss1"})
    assert res.status_code == 200


def test_register_rejects_non_json_body(client):
    res = client.post("/api/auth/register", data="email=a", content_type="text/plain")
    assert res.status_code == 400
    assert res.get_json()["code"] == "VALIDATION_ERROR"


def test_register_requires_fields(client):
    res = client.post("/api/auth/register", json={"email": "a@x.com"})
    assert res.status_code == 400


def test_login_unknown_email(client):
    res = client.post("/api/auth/login", json={"email": "unknown@x.com", "password": "x"})
    assert res.status_code == 403
    body = res.get_json()
    assert body["code"] == "EMAIL_NOT_REGISTERED"
    assert "token" not in body


def test_login_wrong_password(client):
    _register(client)
    res = client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope"})
    assert res.status_code == 401
    assert res.get_json()["code"] == "INVALID_PASSWORD"


# ─── bearer handling ────────────────────────────────────────────

def test_missing_bearer_is_401(client):
    assert client.get("/api/todos").status_code == 401
    res = client.get("/api/todos", headers={"Authorization": "Token abc"})
    assert res.status_code == 401


def test_invalid_bearer_is_401(client):
    res = client.get("/api/todos", headers=_auth("not-a-token"))
    assert res.status_code == 401
    assert res.get_json()["code"] == "UNAUTHENTICATED"


# ─── items ──────────────────────────────────────────────────────

def test_item_lifecycle_over_http(client):
    token = _token(client)

    created = _create(client, token)
    assert created.status_code == 201
    item = created.get_json()
    assert item["is_completed"] is False
    assert item["is_deleted"] is False
    assert item["due_date"] == "2030-05-22T09:38:24.405027"

    res = client.patch(f"/api/todos/{item['id']}/complete", headers=_auth(token))
    assert res.status_code == 200
    assert res.get_json()["is_completed"] is True

    res = client.delete(f"/api/todos/{item['id']}", headers=_auth(token))
    assert res.status_code == 200

    listed = client.get("/api/todos?limit=10", headers=_auth(token)).get_json()
    assert listed == []

    res = client.get(f"/api/todos/{item['id']}", headers=_auth(token))
    assert res.status_code == 200
    assert res.get_json()["is_deleted"] is True


def test_update_item(client):
    token = _token(client)
    item = _create(client, token).get_json()
    res = client.put(
        f"/api/todos/{item['id']}",
        json={"description": "3 litres", "due_date": "2030-06-01", "priority": "LOW"},
        headers=_auth(token),
    )
    assert res.status_code == 200
    body = res.get_json()
    assert body["description"] == "3 litres"
    assert body["priority"] == "LOW"
    assert body["due_date"] == "2030-06-01T00:00:00"
    assert body["name"] == "Buy milk"


def test_update_with_unknown_priority(client):
    token = _token(client)
    item = _create(client, token).get_json()
    res = client.put(
        f"/api/todos/{item['id']}",
        json={"description": "x", "due_date": "2030-06-01", "priority": "URGENT"},
        headers=_auth(token),
    )
    assert res.status_code == 400
    current = client.get(f"/api/todos/{item['id']}", headers=_auth(token)).get_json()
    assert current["priority"] == "HIGH"
    assert current["description"] == "2 litres"


@pytest.mark.parametrize("overrides", [
    {"name": "ab"},
    {"priority": "URGENT"},
    {"due_date": "not-a-date"},
    {"due_date": None},
])
def test_create_validation(client, overrides):
    token = _token(client)
    res = _create(client, token, **overrides)
    assert res.status_code == 400
    assert res.get_json()["code"] == "VALIDATION_ERROR"


def test_create_accepts_day_first_date(client):
    token = _token(client)
    res = _create(client, token, due_date="15/01/2030")
    assert res.status_code == 201
    assert res.get_json()["due_date"] == "2030-01-15T00:00:00"


def test_list_limit(client):
    token = _token(client)
    for i in range(3):
        _create(client, token, name=f"Task {i}")

    assert len(client.get("/api/todos", headers=_auth(token)).get_json()) == 3
    assert len(client.get("/api/todos?limit=2", headers=_auth(token)).get_json()) == 2
    assert client.get("/api/todos?limit=0", headers=_auth(token)).status_code == 400
    assert client.get("/api/todos?limit=abc", headers=_auth(token)).status_code == 400


def test_foreign_item_is_forbidden_and_missing_is_not_found(client):
    token_a = _token(client, "a@x.com")
    token_b = _token(client, "b@x.com")
    item = _create(client, token_a).get_json()

    assert client.get(f"/api/todos/{item['id']}", headers=_auth(token_b)).status_code == 403
    assert client.patch(
        f"/api/todos/{item['id']}/complete", headers=_auth(token_b)
    ).status_code == 403
    assert client.delete(f"/api/todos/{item['id']}", headers=_auth(token_b)).status_code == 403
    assert client.put(
        f"/api/todos/{item['id']}",
        json={"description": "x", "due_date": "2030-06-01", "priority": "LOW"},
        headers=_auth(token_b),
    ).status_code == 403

    assert client.get("/api/todos/does-not-exist", headers=_auth(token_b)).status_code == 404


@pytest.mark.parametrize("overrides", [
    {"name": 12345},
    {"priority": ["HIGH"]},
    {"description": ["x"]},
])
def test_create_rejects_non_string_fields(client, overrides):
    token = _token(client)
    res = _create(client, token, **overrides)
    assert res.status_code == 400
    assert res.get_json()["code"] == "VALIDATION_ERROR"
    assert client.get("/api/todos", headers=_auth(token)).get_json() == []


def test_update_rejects_non_string_description(client):
    token = _token(client)
    item = _create(client, token).get_json()
    res = client.put(
        f"/api/todos/{item['id']}",
        json={"description": ["x"], "due_date": "2030-06-01", "priority": "LOW"},
        headers=_auth(token),
    )
    assert res.status_code == 400
    assert res.get_json()["code"] == "VALIDATION_ERROR"


@pytest.mark.parametrize("path", ["/api/auth/register", "/api/auth/login"])
@pytest.mark.parametrize("body", [
    {"email": 5, "password": "P@ss1"},
    {"email": "a@x.com", "password": 12345},
    {"email": ["a@x.com"], "password": "P@ss1"},
])
def test_credentials_must_be_strings(client, path, body):
    _register(client)
    res = client.post(path, json=body)
    assert res.status_code == 400
    assert res.get_json()["code"] == "VALIDATION_ERROR"
