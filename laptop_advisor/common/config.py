"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"
DATA_DIR = PROJECT_ROOT / "data"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class DatabaseSettings(BaseModel):
    """Database connection settings."""
    db_path: str = Field(
        default_factory=lambda: os.getenv(
            "DATABASE_PATH", str(DATA_DIR / "laptop_advisor.db")
        )
    )


class LLMSettings(BaseModel):
    """LLM API settings."""
    openai_model: str = "gpt-4o-mini"
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 1500
    temperature: float = 0.7
    # Providers are tried in this order until one returns valid JSON
    provider_order: list[str] = Field(default_factory=lambda: ["openai", "anthropic"])


class CacheSettings(BaseModel):
    """TTL (hours) for cached LLM narratives by request type."""
    analysis_ttl_hours: int = 7 * 24
    comparison_ttl_hours: int = 14 * 24
    recommend_ttl_hours: int = 24
    fallback_ttl_hours: int = 1


class RecommendSettings(BaseModel):
    """Recommendation wizard settings."""
    default_limit: int = 5
    candidate_pool_size: int = 100


class Settings(BaseModel):
    """Top-level application settings."""
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    recommend: RecommendSettings = Field(default_factory=RecommendSettings)
    locale: str = "ko-KR"
    log_level: str = "INFO"

    @classmethod
    def load(cls, settings_path: Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = settings_path or CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


def get_openai_api_key() -> str:
    """Get OpenAI API key from environment."""
    key = os.getenv("OPENAI_API_KEY", "")
    if not key:
        raise ValueError("OPENAI_API_KEY not set in environment")
    return key


def get_anthropic_api_key() -> str:
    """Get Anthropic API key from environment."""
    key = os.getenv("ANTHROPIC_API_KEY", "")
    if not key:
        raise ValueError("ANTHROPIC_API_KEY not set in environment")
    return key


def is_openai_configured() -> bool:
    return bool(os.getenv("OPENAI_API_KEY"))


def is_anthropic_configured() -> bool:
    return bool(os.getenv("ANTHROPIC_API_KEY"))


# Singleton settings instance
settings = Settings.load()
