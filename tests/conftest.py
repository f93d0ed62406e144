import asyncio
import os
import tempfile

# Отдельная SQLite база, внешние сервисы отключены - ДО импорта приложения
_TMP_DIR = tempfile.mkdtemp(prefix="cyclehub-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/test.db"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ORS_API_KEY"] = ""
os.environ["OWM_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from cyclehub.config import settings
from cyclehub.database import engine, init_models, AsyncSessionLocal
from cyclehub.main import app
from cyclehub.models.reward import Reward
from cyclehub.seed import seed_admin


async def _reset_database():
    await init_models(drop=True)
    async with AsyncSessionLocal() as db:
        await seed_admin(db)
    # Соединения привязаны к циклу событий - закрываем до запуска TestClient
    await engine.dispose()


@pytest.fixture
def client():
    asyncio.run(_reset_database())
    with TestClient(app) as c:
        yield c


def register_user(client, email, first_name="Test", password="password123"):
    r = client.post("/api/auth/register", json={
        "first_name": first_name,
        "last_name": "Rider",
        "email": email,
        "password": password,
    })
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    return {"Authorization": f"Bearer {data['access_token']}"}, data


def login_headers(client, email, password):
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['data']['access_token']}"}


def create_route(client, headers, distance=12.5, title="River loop"):
    r = client.post("/api/routes/", headers=headers, json={
        "title": title,
        "description": "Flat loop along the river",
        "start_point": {"lat": 6.9271, "lng": 79.8612, "name": "Start"},
        "end_point": {"lat": 6.9500, "lng": 79.8700, "name": "Finish"},
        "distance": distance,
        "difficulty": "easy",
        "polyline": "abc123",
    })
    assert r.status_code == 201, r.text
    return r.json()["data"]["route"]


def insert_reward(**values):
    """Награда напрямую в базу, в обход валидации API"""
    # Синхронный движок: у async-движка приложения соединения привязаны к циклу TestClient
    sync_engine = create_engine(settings.DATABASE_URL.replace("+aiosqlite", ""))
    with sync_engine.begin() as conn:
        conn.execute(Reward.__table__.insert().values(**values))
    sync_engine.dispose()


@pytest.fixture
def admin_headers(client):
    return login_headers(client, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)


@pytest.fixture
def rider(client):
    headers, data = register_user(client, "rider@example.com", first_name="Rider")
    return headers, data["user"]


@pytest.fixture
def other_rider(client):
    headers, data = register_user(client, "other@example.com", first_name="Other")
    return headers, data["user"]
