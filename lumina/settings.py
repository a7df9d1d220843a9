from __future__ import annotations

from typing import Any, Mapping

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    supabase_url: str | None = Field(None, alias="SUPABASE_URL")
    supabase_anon_key: str | None = Field(None, alias="SUPABASE_ANON_KEY")

    gemini_api_key: str | None = Field(
        None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )
    gemini_image_model: str = Field("gemini-2.5-flash-image", alias="GEMINI_IMAGE_MODEL")
    gemini_text_model: str = Field("gemini-3-flash-preview", alias="GEMINI_TEXT_MODEL")

    local_db_url: str = Field("sqlite:///lumina_local.db", alias="LUMINA_LOCAL_DB_URL")
    request_timeout: float = Field(10.0, alias="LUMINA_REQUEST_TIMEOUT")
    log_level: str = Field("INFO", alias="LUMINA_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    @property
    def backend_configured(self) -> bool:
        return bool((self.supabase_url or "").strip() and (self.supabase_anon_key or "").strip())

    @property
    def ai_configured(self) -> bool:
        return bool((self.gemini_api_key or "").strip())


_settings: Settings | None = None


def get_settings(overrides: Mapping[str, Any] | None = None) -> Settings:
    """Return the process-wide settings, building them on first use.

    ``overrides`` (for example values read from Streamlit secrets) only apply
    when the settings are first built.
    """
    global _settings
    if _settings is None:
        clean = {key: value for key, value in dict(overrides or {}).items() if value not in (None, "")}
        _settings = Settings(**clean)
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
