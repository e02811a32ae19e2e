"""
Fixtures compartidas: base SQLite en memoria, reloj congelado y cliente
falso de Gemini
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["GEMINI_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.core.database import SessionLocal, create_tables, drop_tables
from app.main import create_application
from app.services.ai_service import GeminiService
from app.services.runtime import CompanionRuntime


class FrozenClock:
    """Reloj controlado por el test"""

    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime):
        self._now = now

    def advance(self, **kwargs):
        self._now = self._now + timedelta(**kwargs)


class FakeModels:
    def __init__(self, owner):
        self.owner = owner

    def generate_content(self, model, contents, config=None):
        self.owner.calls.append({"model": model, "contents": contents, "config": config})
        if self.owner.error is not None:
            raise self.owner.error
        if self.owner.replies:
            return self.owner.replies.pop(0)
        return SimpleNamespace(text=self.owner.default_text, function_calls=None)


class FakeGenAIClient:
    """Sustituto de genai.Client que registra las llamadas"""

    def __init__(self):
        self.calls = []
        self.replies = []
        self.error = None
        self.default_text = "All good."
        self.models = FakeModels(self)

    def queue(self, text=None, calls=None):
        function_calls = [SimpleNamespace(name=name, args=args) for name, args in (calls or [])]
        self.replies.append(SimpleNamespace(text=text, function_calls=function_calls or None))


@pytest.fixture
def clock():
    return FrozenClock(datetime(2026, 10, 19, 7, 59))


@pytest.fixture
def fake_genai():
    return FakeGenAIClient()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def runtime(settings, clock, fake_genai):
    return CompanionRuntime(settings, clock=clock, ai=GeminiService(settings, client=fake_genai))


@pytest.fixture(autouse=True)
def database():
    drop_tables()
    create_tables()
    yield
    drop_tables()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def app(runtime):
    application = create_application()
    application.state.runtime = runtime
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    response = client.post("/api/auth/login", json={"code": "1234"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def medications(client):
    """Dos tomas diarias: 08:00 y 20:00"""
    created = []
    for name, dosage, time in (("Metformin", "500mg", "08:00"), ("Lisinopril", "10mg", "20:00")):
        response = client.post("/api/medications", json={"name": name, "dosage": dosage, "time": time})
        assert response.status_code == 200
        created.append({"id": response.json()["id"], "name": name, "time": time})
    return created
