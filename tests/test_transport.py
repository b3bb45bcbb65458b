from __future__ import annotations

from typing import Any

import httpx
import pytest

from app.clients.openweather import OpenWeatherClient
from app.core.errors import (
    ApiError,
    ConfigError,
    InvalidDataError,
    NetworkError,
    NotFoundError,
    RetryExhaustedError,
)

URL = "https://api.example.test/data/2.5/weather"


class Script:
    """Replays a fixed sequence of responses (or exceptions) through MockTransport."""

    def __init__(self, *steps: Any) -> None:
        self._steps = list(steps)
        self.requests: list[httpx.Request] = []
        self.sleeps: list[float] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self._steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    def client(self, api_key: str | None = "secret") -> OpenWeatherClient:
        return OpenWeatherClient(
            api_key=api_key,
            user_agent="WeatherNow/1.0",
            timeout_seconds=1.0,
            base_url="https://api.example.test/data/2.5",
            geo_base_url="https://api.example.test/geo/1.0",
            transport=httpx.MockTransport(self.handler),
            sleep=self.sleeps.append,
        )


def test_success_returns_first_payload() -> None:
    script = Script(httpx.Response(200, json={"ok": True}))
    assert script.client().fetch_json(URL) == {"ok": True}
    assert len(script.requests) == 1
    assert script.sleeps == []


def test_request_disables_caching_and_asks_for_json() -> None:
    script = Script(httpx.Response(200, json={}))
    script.client().fetch_json(URL)
    headers = script.requests[0].headers
    assert headers["Accept"] == "application/json"
    assert headers["User-Agent"] == "WeatherNow/1.0"
    assert headers["Cache-Control"] == "no-cache"


def test_rate_limit_retries_with_linear_backoff() -> None:
    script = Script(
        httpx.Response(429),
        httpx.Response(429),
        httpx.Response(200, json={"name": "London"}),
    )
    assert script.client().fetch_json(URL, max_attempts=3) == {"name": "London"}
    assert len(script.requests) == 3
    assert script.sleeps == [1.0, 2.0]


def test_server_errors_stop_after_max_attempts() -> None:
    script = Script(httpx.Response(500), httpx.Response(500), httpx.Response(500))
    with pytest.raises(ApiError) as exc_info:
        script.client().fetch_json(URL, max_attempts=3)
    assert len(script.requests) == 3
    assert script.sleeps == [0.5, 1.0]
    assert exc_info.value.status == 500
    assert exc_info.value.message == "API request failed: 500 Internal Server Error"


def test_server_error_then_success() -> None:
    script = Script(httpx.Response(503), httpx.Response(200, json=[1, 2]))
    assert script.client().fetch_json(URL) == [1, 2]
    assert script.sleeps == [0.5]


def test_unauthorized_fails_immediately() -> None:
    script = Script(httpx.Response(401), httpx.Response(200, json={}))
    with pytest.raises(ConfigError) as exc_info:
        script.client().fetch_json(URL)
    assert exc_info.value.code == "INVALID_API_KEY"
    assert len(script.requests) == 1
    assert script.sleeps == []


def test_not_found_fails_immediately() -> None:
    script = Script(httpx.Response(404, json={"cod": "404", "message": "city not found"}))
    with pytest.raises(NotFoundError) as exc_info:
        script.client().fetch_json(URL)
    assert exc_info.value.code == "LOCATION_NOT_FOUND"
    assert len(script.requests) == 1


def test_other_client_error_uses_provider_message() -> None:
    script = Script(httpx.Response(400, json={"cod": "400", "message": "wrong latitude"}))
    with pytest.raises(ApiError) as exc_info:
        script.client().fetch_json(URL)
    assert exc_info.value.message == "API Error: wrong latitude"
    assert exc_info.value.status == 400
    assert script.sleeps == []


def test_other_client_error_without_json_body() -> None:
    script = Script(httpx.Response(418, text="teapot"))
    with pytest.raises(ApiError) as exc_info:
        script.client().fetch_json(URL)
    assert exc_info.value.message.startswith("API request failed: 418")


def test_network_failure_is_retried_then_wrapped() -> None:
    cause = httpx.ConnectError("connection refused")
    script = Script(cause, httpx.ConnectError("connection refused"), httpx.ConnectError("again"))
    with pytest.raises(NetworkError) as exc_info:
        script.client().fetch_json(URL, max_attempts=3)
    assert len(script.requests) == 3
    assert script.sleeps == [0.5, 1.0]
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert exc_info.value.code == "NETWORK_ERROR"


def test_network_failure_recovers() -> None:
    script = Script(httpx.ReadTimeout("slow"), httpx.Response(200, json={"ok": 1}))
    assert script.client().fetch_json(URL) == {"ok": 1}
    assert script.sleeps == [0.5]


def test_rate_limited_on_every_attempt_exhausts_retries() -> None:
    script = Script(httpx.Response(429), httpx.Response(429))
    with pytest.raises(RetryExhaustedError):
        script.client().fetch_json(URL, max_attempts=2)
    assert len(script.requests) == 2
    assert script.sleeps == [1.0]


def test_malformed_json_body() -> None:
    script = Script(httpx.Response(200, text="<html>"))
    with pytest.raises(InvalidDataError):
        script.client().fetch_json(URL)


def test_weather_by_coords_request_shape() -> None:
    script = Script(httpx.Response(200, json={}))
    script.client().current_by_coords(51.5, -0.12)
    request = script.requests[0]
    assert request.url.path == "/data/2.5/weather"
    assert request.url.params["lat"] == "51.5"
    assert request.url.params["lon"] == "-0.12"
    assert request.url.params["appid"] == "secret"
    assert request.url.params["units"] == "metric"


def test_forecast_by_city_encodes_query() -> None:
    script = Script(httpx.Response(200, json={}))
    script.client().forecast_by_city("São Paulo")
    request = script.requests[0]
    assert request.url.path == "/data/2.5/forecast"
    assert request.url.params["q"] == "São Paulo"


def test_geocode_request_shape() -> None:
    script = Script(httpx.Response(200, json=[]))
    script.client().geocode("spring")
    request = script.requests[0]
    assert request.url.path == "/geo/1.0/direct"
    assert request.url.params["limit"] == "8"
    assert "units" not in request.url.params


def test_probe_makes_a_single_attempt() -> None:
    script = Script(httpx.Response(503), httpx.Response(200, json={}))
    with pytest.raises(ApiError):
        script.client().probe()
    assert len(script.requests) == 1
    assert script.requests[0].url.params["q"] == "London"
