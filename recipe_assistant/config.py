"""Configuration management with pydantic-settings and validation."""

from typing import Literal

from pydantic_settings import BaseSettings
from pydantic import field_validator


# Fields that must carry a non-empty value
REQUIRED_FIELDS = {
    "database_url",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: str = "sqlite:///./recipe_assistant.db"

    # Which store family backs signals, ratings and dietary preferences
    storage_backend: Literal["memory", "database"] = "database"

    # Anthropic Configuration (optional, generation is disabled without it)
    anthropic_api_key: str = ""
    llm_model: str = "claude-sonnet-4-5-20250929"
    llm_max_tokens: int = 4096
    llm_timeout: float = 60.0

    # Behaviour
    default_language: Literal["zh", "en"] = "zh"
    rating_history_limit: int = 20
    community_page_size: int = 10
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_url(cls, v):
        """Heroku-style URLs use postgres:// but SQLAlchemy requires postgresql://."""
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator("*", mode="before")
    @classmethod
    def check_not_empty(cls, v, info):
        """Validate that required environment variables are not empty."""
        if info.field_name not in REQUIRED_FIELDS:
            return v
        if v is None:
            raise ValueError("Required environment variable is not set")
        if isinstance(v, str) and v.strip() == "":
            raise ValueError("Required environment variable is empty")
        return v

    @property
    def llm_enabled(self) -> bool:
        return bool(self.anthropic_api_key)


def get_settings() -> Settings:
    """Load and validate settings from environment.

    Raises:
        ValidationError: If environment variables are invalid.
    """
    return Settings()
