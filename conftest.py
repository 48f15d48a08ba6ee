"""
Fixtures compartidas para los tests de todos los módulos.

La base de datos es SQLite en memoria; las variables de entorno se fijan
antes de importar la aplicación para que el engine use esa URL.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.database.database import Base, engine, SessionLocal
from app.modules.auth.models import User
from app.modules.auth.utils import create_access_token
from app.modules.assistant.client import AIResponse, get_ai_client


class FakeAIClient:
    """
    Cliente de IA con respuestas programadas.

    `responses` alimenta `chat` y `json_responses` alimenta `complete_json`;
    si un elemento es una excepción se lanza.
    """
    model = "fake-chat"
    vision_model = "fake-vision"

    def __init__(self):
        self.responses = []
        self.json_responses = []
        self.calls = []

    def chat(self, messages, tools=None, model=None, json_mode=False):
        self.calls.append({"messages": list(messages), "tools": tools, "model": model})
        if not self.responses:
            return AIResponse(content="")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def complete_json(self, system_prompt, user_content, model=None):
        self.calls.append({"system": system_prompt, "content": user_content, "model": model})
        response = self.json_responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


def _make_user(db_session, email, name):
    user = User(email=email, name=name)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_user(db_session):
    return _make_user(db_session, "owner@acme.co", "Ana Owner")


@pytest.fixture
def other_user(db_session):
    return _make_user(db_session, "other@acme.co", "Otro Owner")


@pytest.fixture
def auth_headers(sample_user):
    token = create_access_token({"sub": str(sample_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(other_user):
    token = create_access_token({"sub": str(other_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def fake_ai():
    fake = FakeAIClient()
    app.dependency_overrides[get_ai_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_ai_client, None)
