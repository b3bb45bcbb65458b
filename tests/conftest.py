from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.core.config import Settings
from app.factory import create_app
from tests.fakes import FakeOpenWeatherClient


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        log_level="DEBUG",
        secret_key="test_secret_key_must_be_32_chars_minimum",
        cors_origins=["http://localhost"],
        trusted_hosts=["testserver", "localhost"],
        weather_api_key="test-key",
        weather_user_agent="test-agent",
        weather_timeout_seconds=1.0,
        weather_fallback_cities=["London", "Paris"],
    )


@pytest.fixture()
def fake_client() -> FakeOpenWeatherClient:
    return FakeOpenWeatherClient()


@pytest.fixture()
def client(settings: Settings, fake_client: FakeOpenWeatherClient) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[deps.get_openweather_client] = lambda: fake_client
    with TestClient(app) as client:
        yield client
