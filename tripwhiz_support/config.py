"""
Application configuration loaded from environment variables.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralised application settings."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    openai_api_key: SecretStr | None = Field(default=None, alias="OPENAI_API_KEY")
    llm_model_name: str = Field(default="gpt-4o-mini", alias="LLM_MODEL_NAME")
    embedding_model_name: str = Field(default="text-embedding-3-small", alias="EMBEDDING_MODEL_NAME")
    llm_temperature: float = Field(default=0.7, alias="LLM_TEMPERATURE")
    llm_max_tokens: int = Field(default=500, alias="LLM_MAX_TOKENS")
    request_timeout_sec: float = Field(default=30.0, alias="REQUEST_TIMEOUT_SEC")
    max_retries: int = Field(default=1, alias="MAX_RETRIES")

    vector_store_backend: str = Field(default="json_file", alias="VECTOR_STORE_BACKEND")
    vector_store_path: str = Field(default="./data/vector_store", alias="VECTOR_STORE_PATH")
    vector_store_key: str = Field(default="tripwhiz_vector_store", alias="VECTOR_STORE_KEY")
    knowledge_state_key: str = Field(default="tripwhiz_knowledge_state", alias="KNOWLEDGE_STATE_KEY")

    content_source_url: str | None = Field(default=None, alias="CONTENT_SOURCE_URL")

    relevance_threshold: float = Field(default=0.7, alias="RELEVANCE_THRESHOLD")
    retrieval_top_k: int = Field(default=3, alias="RETRIEVAL_TOP_K")

    refresh_request_delay_sec: float = Field(default=0.1, alias="REFRESH_REQUEST_DELAY_SEC")
    knowledge_staleness_hours: float = Field(default=24.0, alias="KNOWLEDGE_STALENESS_HOURS")
    refresh_interval_hours: float = Field(default=24.0, alias="REFRESH_INTERVAL_HOURS")
    scheduler_enabled: bool = Field(default=True, alias="SCHEDULER_ENABLED")

    admin_token: SecretStr | None = Field(default=None, alias="ADMIN_TOKEN")

    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=8000, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


settings = Settings()


def setup_logging() -> logging.Logger:
    """
    Configure base logging for the app.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
    )
    return logging.getLogger("tripwhiz_support")


def public_settings() -> Dict[str, Any]:
    """
    Return settings without secrets for safe logging/inspection.
    """
    return settings.model_dump(
        exclude={"openai_api_key", "admin_token"},
        exclude_none=True,
    )


__all__ = ["Settings", "settings", "setup_logging", "public_settings"]
