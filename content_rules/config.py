"""Application settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Anthropic (AI props resolve to [AI_ERROR] when unset)
    anthropic_api_key: str | None = Field(None, alias="ANTHROPIC_API_KEY")

    # Claude
    claude_model: str = Field("claude-opus-4-6", alias="CLAUDE_MODEL")
    ai_max_tokens: int = Field(2048, alias="AI_MAX_TOKENS")

    # Content cache
    content_cache_db_path: str = Field("./data/content_cache.db", alias="CONTENT_CACHE_DB_PATH")
    cache_cleanup_interval_seconds: float = Field(300, alias="CACHE_CLEANUP_INTERVAL_SECONDS")

    # Server
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8000, alias="PORT")


# Single shared instance
settings = Settings()
