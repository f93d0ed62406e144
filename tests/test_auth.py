from conftest import register_user, login_headers

from cyclehub.config import settings


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["endpoints"]["rides"] == "/api/rides"
    assert client.get("/health").json()["status"] == "healthy"


def test_register_and_me(client):
    headers, data = register_user(client, "Alice@Example.com", first_name="Alice")
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["role"] == "cyclist"
    assert "password_hash" not in data["user"]

    r = client.get("/api/auth/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["user"]["first_name"] == "Alice"


def test_register_validation_and_duplicates(client):
    r = client.post("/api/auth/register", json={
        "first_name": "Bob", "last_name": "Short", "email": "bob@example.com", "password": "short",
    })
    assert r.status_code == 400
    assert r.json()["message"] == "Validation failed"
    assert any("password" in error for error in r.json()["errors"])

    register_user(client, "bob@example.com")
    r = client.post("/api/auth/register", json={
        "first_name": "Bob", "last_name": "Again", "email": "bob@example.com", "password": "password123",
    })
    assert r.status_code == 409


def test_login(client):
    register_user(client, "carol@example.com")
    login_headers(client, "carol@example.com", "password123")

    r = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "wrong-password"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid email or password"


def test_refresh_rotation(client):
    _, data = register_user(client, "dave@example.com")
    old_refresh = data["refresh_token"]

    r = client.post("/api/auth/refresh", json={"refresh_token": old_refresh})
    assert r.status_code == 200
    new_refresh = r.json()["data"]["refresh_token"]
    assert new_refresh != old_refresh

    # Старый токен больше не принимается
    assert client.post("/api/auth/refresh", json={"refresh_token": old_refresh}).status_code == 401

    # Access токен не подходит вместо refresh
    access = r.json()["data"]["access_token"]
    assert client.post("/api/auth/refresh", json={"refresh_token": access}).status_code == 401


def test_logout_revokes_refresh(client):
    headers, data = register_user(client, "erin@example.com")
    assert client.post("/api/auth/logout", headers=headers).status_code == 200
    r = client.post("/api/auth/refresh", json={"refresh_token": data["refresh_token"]})
    assert r.status_code == 401


def test_deactivated_user(client, admin_headers):
    headers, data = register_user(client, "frank@example.com")
    user_id = data["user"]["id"]

    r = client.patch(f"/api/users/{user_id}/deactivate", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"]["user"]["is_active"] is False

    assert client.get("/api/auth/me", headers=headers).status_code == 401
    r = client.post("/api/auth/login", json={"email": "frank@example.com", "password": "password123"})
    assert r.status_code == 403

    client.patch(f"/api/users/{user_id}/reactivate", headers=admin_headers)
    login_headers(client, "frank@example.com", "password123")


def test_admin_cannot_be_deactivated(client, admin_headers):
    me = client.get("/api/auth/me", headers=admin_headers).json()["data"]["user"]
    assert me["email"] == settings.ADMIN_EMAIL
    r = client.patch(f"/api/users/{me['id']}/deactivate", headers=admin_headers)
    assert r.status_code == 400
