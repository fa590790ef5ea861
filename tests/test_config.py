import pytest
from pydantic import ValidationError

from recipe_assistant.config import Settings


def test_postgres_url_is_rewritten():
    settings = Settings(database_url="postgres://user:pw@host/db")
    assert settings.database_url == "postgresql://user:pw@host/db"


def test_empty_database_url_is_rejected():
    with pytest.raises(ValidationError):
        Settings(database_url="  ")


def test_unknown_storage_backend_is_rejected():
    with pytest.raises(ValidationError):
        Settings(database_url="sqlite://", storage_backend="redis")


def test_llm_enabled_follows_api_key():
    assert Settings(database_url="sqlite://", anthropic_api_key="").llm_enabled is False
    assert Settings(database_url="sqlite://", anthropic_api_key="sk-test").llm_enabled is True
