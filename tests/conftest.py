"""Shared fixtures: in-memory stores, an in-memory SQLite database and a fake Claude client."""

import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recipe_assistant.config import Settings
from recipe_assistant.database import session_scope
from recipe_assistant.llm_service import RecipeGenerator
from recipe_assistant.main import create_app
from recipe_assistant.models import Base
from recipe_assistant.ratings import RatingService
from recipe_assistant.stores import (
    InMemoryDietaryPreferenceStore,
    InMemoryRatingStore,
    InMemorySignalStore,
)

from .samples import BRAISED_BEEF, TOMATO_EGG


class FakeMessages:
    def __init__(self, reply: str):
        self.reply = reply
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(
            content=[SimpleNamespace(type="text", text=self.reply)],
            stop_reason="end_turn",
            usage=SimpleNamespace(input_tokens=10, output_tokens=20),
        )


class FakeClaude:
    """Stands in for anthropic.Anthropic; replies with a fixed text."""

    def __init__(self, reply: str):
        self.messages = FakeMessages(reply)


@pytest.fixture
def signal_store():
    return InMemorySignalStore()


@pytest.fixture
def rating_store():
    return InMemoryRatingStore()


@pytest.fixture
def dietary_store():
    return InMemoryDietaryPreferenceStore()


@pytest.fixture
def rating_service(rating_store):
    return RatingService(rating_store)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    with session_scope(session_factory) as db:
        yield db


@pytest.fixture
def claude_reply():
    return json.dumps([TOMATO_EGG, BRAISED_BEEF], ensure_ascii=False)


@pytest.fixture
def fake_claude(claude_reply):
    return FakeClaude(claude_reply)


@pytest.fixture
def generator(fake_claude):
    return RecipeGenerator(fake_claude, model="test-model")


@pytest.fixture
def settings():
    return Settings(storage_backend="memory", database_url="sqlite://", anthropic_api_key="")


@pytest.fixture
def app(settings, session_factory, generator):
    return create_app(settings, session_factory=session_factory, generator=generator)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


class UnreachableClaude:
    """A client whose every call fails at the transport level."""

    class messages:
        @staticmethod
        def create(**kwargs):
            raise ConnectionError("connection refused")
