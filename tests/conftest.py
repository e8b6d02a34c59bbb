import os

# Must be set before config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from typing import Callable, Dict, Generator

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app import app
from core.database import get_db, init_db
from core.dependencies import get_user_manager
from generators.QuizGenerator import QuizGenerator
from utils.user_manager import UserManager


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    """A separate session for asserting on rows written through the API."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def override_get_user_manager(db: Session = Depends(get_db)) -> UserManager:
        # Low bcrypt cost keeps registration fast
        return UserManager(db, bcrypt_rounds=4)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_user_manager] = override_get_user_manager
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client) -> Callable[[str], Dict[str, str]]:
    """Register (once) and log in a user, returning bearer headers."""
    cache: Dict[str, Dict[str, str]] = {}

    def _login(username: str) -> Dict[str, str]:
        if username not in cache:
            resp = client.post(
                "/api/auth/register",
                json={"username": username, "password": "pass1234"},
            )
            assert resp.status_code == 201
            resp = client.post(
                "/api/auth/login",
                json={"username": username, "password": "pass1234"},
            )
            assert resp.status_code == 200
            cache[username] = {"Authorization": f"Bearer {resp.json()['token']}"}
        return cache[username]

    return _login


@pytest.fixture
def teacher(auth_headers):
    return auth_headers("teacher")


@pytest.fixture
def student(auth_headers):
    return auth_headers("student")


@pytest.fixture
def other_student(auth_headers):
    return auth_headers("other_student")


@pytest.fixture
def classroom(client, teacher, student):
    """A class owned by ``teacher`` that ``student`` has joined."""
    resp = client.post("/api/classgo/classes", json={"name": "Biology"}, headers=teacher)
    assert resp.status_code == 201
    data = resp.json()["class"]
    join = client.post(
        "/api/classgo/classes/join",
        json={"classCode": data["class_code"]},
        headers=student,
    )
    assert join.status_code == 200
    return data


@pytest.fixture
def assignment(client, teacher, classroom):
    resp = client.post(
        f"/api/classgo/classes/{classroom['id']}/assignments",
        json={"title": "Cell structure essay", "points": 50},
        headers=teacher,
    )
    assert resp.status_code == 201
    return resp.json()["assignment"]


class StaticLLMManager:
    """Hands out a fixed chat model instead of a provider-backed one."""

    def __init__(self, llm):
        self.llm = llm

    def get_quiz_llm(self):
        return self.llm


@pytest.fixture
def quiz_generator_for() -> Callable[..., QuizGenerator]:
    def _build(llm, **kwargs) -> QuizGenerator:
        return QuizGenerator(StaticLLMManager(llm), **kwargs)

    return _build


@pytest.fixture
def break_store(monkeypatch) -> Callable[..., None]:
    """Make selected calls of a Session or Query method raise a store error.

    Calls are counted from the moment ``break_store`` is called, starting at 1.
    """

    def _break(owner, method_name: str, *failing_calls: int) -> None:
        original = getattr(owner, method_name)
        calls = {"count": 0}

        def broken(self, *args, **kwargs):
            calls["count"] += 1
            if calls["count"] in failing_calls:
                raise OperationalError(method_name, {}, Exception("database is locked"))
            return original(self, *args, **kwargs)

        monkeypatch.setattr(owner, method_name, broken)

    return _break
