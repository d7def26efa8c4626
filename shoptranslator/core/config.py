from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application configuration loaded from environment or .env."""

    app_name: str = Field(default="Storefront Translator")
    app_env: str = Field(default="dev", alias="APP_ENV")
    debug: bool = Field(default=False, alias="APP_DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_host: str = Field(default="127.0.0.1", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )

    openai_api_key: Optional[SecretStr] = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")
    translation_model: str = Field(default="gpt-3.5-turbo", alias="TRANSLATION_MODEL")
    translation_max_tokens: int = Field(default=3000, alias="TRANSLATION_MAX_TOKENS")
    translation_temperature: float = Field(default=0.3, alias="TRANSLATION_TEMPERATURE")
    translation_timeout_seconds: float = Field(
        default=60.0, alias="TRANSLATION_TIMEOUT_SECONDS"
    )

    store_domain: Optional[str] = Field(default=None, alias="STORE_DOMAIN")
    store_access_token: Optional[SecretStr] = Field(default=None, alias="STORE_ACCESS_TOKEN")
    store_api_version: str = Field(default="2023-10", alias="STORE_API_VERSION")
    store_page_limit: int = Field(default=250, alias="STORE_PAGE_LIMIT")
    store_timeout_seconds: float = Field(default=10.0, alias="STORE_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings."""
    return AppSettings()  # type: ignore[call-arg]
