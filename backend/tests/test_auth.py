import logging

from tests.conftest import auth_headers


def test_login_success(client, seed_users):
    resp = client.post("/api/auth/login", json={"email": "admin@store.test"})
    assert resp.status_code == 200
    data = resp.json()
    assert "access_token" in data
    assert data["user"]["role"] == "admin"


def test_login_unknown_email(client, seed_users, caplog):
    caplog.set_level(logging.INFO)
    resp = client.post("/api/auth/login", json={"email": "nobody@store.test"})
    assert resp.status_code == 401
    assert resp.json()["type"] == "ERROR"
    assert "[auth] login rejected, no active user for nobody@store.test" in caplog.text


def test_me_authenticated(client, seed_users):
    headers = auth_headers(client, "staff@store.test")
    resp = client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "staff@store.test"


def test_me_unauthenticated(client):
    resp = client.get("/api/auth/me")
    assert resp.status_code in (401, 403)  # HTTPBearer raises 401 or 403 depending on version


def test_me_rejects_garbage_token(client, seed_users):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
    assert resp.json() == {"type": "ERROR", "message": "Invalid or expired token", "data": None}


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
