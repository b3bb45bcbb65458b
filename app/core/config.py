from __future__ import annotations

from pydantic import AliasChoices, AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    secret_key: str = Field(min_length=32)
    session_cookie: str = Field(default="weathernow_session", min_length=1, max_length=64)
    session_max_age_seconds: int = Field(default=60 * 60 * 24 * 30, ge=60, le=60 * 60 * 24 * 365)

    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    # Read without the APP_ prefix; the first variable that is set wins.
    weather_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("WEATHER_API_KEY", "PUBLIC_WEATHER_API_KEY"),
    )
    weather_api_base: AnyHttpUrl = Field(default="https://api.openweathermap.org/data/2.5")
    weather_geo_api_base: AnyHttpUrl = Field(default="https://api.openweathermap.org/geo/1.0")
    weather_user_agent: str = Field(default="WeatherNow/1.0", min_length=3, max_length=256)
    weather_timeout_seconds: float = Field(default=10.0, ge=1.0, le=30.0)
    weather_max_attempts: int = Field(default=3, ge=1, le=10)
    weather_fallback_cities: list[str] = Field(
        default_factory=lambda: ["London", "New York", "Tokyo", "Paris"]
    )
    auto_refresh_interval_seconds: int = Field(default=600, ge=60, le=24 * 60 * 60)

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


def load_settings() -> Settings:
    settings = Settings()
    if not settings.cors_origins:
        settings.cors_origins = ["http://localhost:3000", "http://localhost:8000"]
    return settings
