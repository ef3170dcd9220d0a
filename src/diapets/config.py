"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    cron_secret: str
    fcm_credentials_path: str
    fcm_project_id: str | None = None
    push_timeout_seconds: float = 10.0
    reminder_lead_time_minutes: int = 15
    reminder_include_overdue: bool = False
    reminder_excluded_pet_ids: str | None = None
    notification_title_template: str = "{pet_name}: insulin!"
    notification_body_template: str = "{pet_name} will need insulin soon."
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_pet_ids(raw: str | None) -> frozenset[int]:
    """Parse a comma separated list of pet ids from env."""
    if raw is None:
        return frozenset()
    ids: set[int] = set()
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        if value.isdigit():
            ids.add(int(value))
    return frozenset(ids)
