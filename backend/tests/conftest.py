import tempfile
from contextlib import suppress
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import AsyncIterator, Iterator

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlmodel import Session, SQLModel

from calorietrack.core import database as core_database
from calorietrack.core.clock import get_clock
from calorietrack.core.database import create_db_engine, get_session
from calorietrack.main import create_app
from calorietrack.routers.advisor.llm import get_llm_client

# Tuesday
FIXED_NOW = datetime(2024, 12, 24, 9, 0, 0, tzinfo=timezone.utc)


def gemini_payload(text: str) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


class FakeLLMClient:
    """Records every prompt; answers with queued replies or an echo of the last turn."""

    def __init__(self):
        self.prompts = []
        self.replies = []
        self.error = None

    def send_prompt(self, turns):
        self.prompts.append(list(turns))
        if self.error is not None:
            raise self.error
        if self.replies:
            reply = self.replies.pop(0)
            return reply if isinstance(reply, dict) or reply is None else gemini_payload(reply)
        return gemini_payload(f"echo ({len(turns[-1].text)} chars)")


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(FIXED_NOW)


@pytest.fixture(scope="function")
def test_app(monkeypatch, fake_llm, clock) -> Iterator[FastAPI]:
    # Use a fresh SQLite DB file in a temp dir per test for isolation
    tmp = tempfile.TemporaryDirectory()
    db_path = Path(tmp.name) / "test.db"
    db_url = f"sqlite:///{db_path}"

    engine = create_db_engine(db_url)

    # Initialize tables
    from calorietrack import models  # noqa: F401
    SQLModel.metadata.create_all(engine)

    def _override_get_session():
        with Session(engine) as session:
            yield session

    # patch global engine/init_db so startup hooks operate on the test database
    monkeypatch.setattr(core_database, "engine", engine, raising=False)

    def _init_db():
        SQLModel.metadata.create_all(engine)

    monkeypatch.setattr(core_database, "init_db", _init_db, raising=False)

    app = create_app()
    app.dependency_overrides[get_session] = _override_get_session
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_clock] = lambda: clock

    try:
        yield app
    finally:
        app.dependency_overrides.clear()
        with suppress(Exception):
            engine.dispose()
        tmp.cleanup()


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def db_session(test_app: FastAPI):
    override = test_app.dependency_overrides[get_session]
    generator = override()
    session = next(generator)
    try:
        yield session
    finally:
        with suppress(StopIteration):
            next(generator)
