"""Application configuration."""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    supabase_service_key: str
    clarifai_api_key: str
    clarifai_model_id: str = "aaa03c23b3724a16a56b629203edc62c"
    clarifai_base_url: str = "https://api.clarifai.com/v2"
    clarifai_user_id: str = "clarifai"
    clarifai_app_id: str = "main"
    nutritionix_app_id: str
    nutritionix_api_key: str
    nutritionix_base_url: str = "https://trackapi.nutritionix.com/v2"
    http_timeout_seconds: float = 15.0
    default_timezone: str = "UTC"
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_timezone(raw: str | None, fallback: str) -> str:
    """Return a valid IANA timezone name, falling back when unset or unknown."""
    if raw is None:
        return fallback
    cleaned = raw.strip()
    if not cleaned:
        return fallback
    try:
        ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError):
        return fallback
    return cleaned
