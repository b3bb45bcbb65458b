from __future__ import annotations

import logging
import time
from typing import Any, Callable, Mapping

import httpx

from app.core.errors import (
    ApiError,
    ConfigError,
    InvalidDataError,
    NetworkError,
    NotFoundError,
    RetryExhaustedError,
)

log = logging.getLogger(__name__)

OPENWEATHER_API_BASE = "https://api.openweathermap.org/data/2.5"
OPENWEATHER_GEO_API_BASE = "https://api.openweathermap.org/geo/1.0"

DEFAULT_MAX_ATTEMPTS = 3
RATE_LIMIT_BACKOFF_SECONDS = 1.0
SERVER_ERROR_BACKOFF_SECONDS = 0.5
SUGGESTION_LIMIT = 8
PROBE_CITY = "London"


class OpenWeatherClient:
    """HTTP access to the OpenWeatherMap current, forecast and geocoding APIs.

    Every request goes to the network: caching is disabled on both the request
    headers and the client. Failed requests are retried with linear backoff
    according to the response status, see :meth:`fetch_json`.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        user_agent: str,
        timeout_seconds: float,
        base_url: str = OPENWEATHER_API_BASE,
        geo_base_url: str = OPENWEATHER_GEO_API_BASE,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._api_key = api_key or None
        self._base_url = base_url.rstrip("/")
        self._geo_base_url = geo_base_url.rstrip("/")
        self._sleep = sleep
        self._client = httpx.Client(
            timeout=timeout_seconds,
            transport=transport,
            headers={
                "User-Agent": user_agent,
                "Accept": "application/json",
                "Cache-Control": "no-cache",
                "Pragma": "no-cache",
            },
        )

    @property
    def api_key(self) -> str | None:
        return self._api_key

    def close(self) -> None:
        self._client.close()

    def fetch_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> Any:
        """GET ``url`` and return its decoded JSON body.

        401 and 404 fail at once. 429 and 5xx responses, as well as transport
        failures, are retried up to ``max_attempts`` times with a delay that
        grows linearly with the attempt number.
        """
        attempts = max(int(max_attempts), 1)
        for attempt in range(1, attempts + 1):
            last_attempt = attempt == attempts
            log.debug("GET %s (attempt %d/%d)", url, attempt, attempts)
            try:
                resp = self._client.get(url, params=params)
            except httpx.TransportError as e:
                log.warning("Request to %s failed on attempt %d: %s", url, attempt, e)
                if last_attempt:
                    raise NetworkError(f"Network error: {e}") from e
                self._sleep(SERVER_ERROR_BACKOFF_SECONDS * attempt)
                continue

            log.debug("GET %s -> %d %s", url, resp.status_code, resp.reason_phrase)
            if resp.is_success:
                try:
                    return resp.json()
                except ValueError as e:
                    raise InvalidDataError("Weather provider returned malformed JSON") from e

            status = resp.status_code
            if status == 401:
                raise ConfigError(
                    "Invalid API key. Please check your OpenWeatherMap API key.",
                    code="INVALID_API_KEY",
                    status=status,
                )
            if status == 404:
                raise NotFoundError(
                    "Location not found. Please check the city name.", status=status
                )
            if status == 429:
                if last_attempt:
                    break
                delay = RATE_LIMIT_BACKOFF_SECONDS * attempt
                log.info("Rate limited by provider, retrying in %.1fs", delay)
                self._sleep(delay)
                continue
            if status >= 500 and not last_attempt:
                delay = SERVER_ERROR_BACKOFF_SECONDS * attempt
                log.info("Provider returned %d, retrying in %.1fs", status, delay)
                self._sleep(delay)
                continue

            raise ApiError(_error_message(resp), status=status)

        raise RetryExhaustedError("Max retries exceeded")

    def _weather_params(self, **query: Any) -> dict[str, Any]:
        return {**query, "appid": self._api_key, "units": "metric"}

    def current_by_coords(
        self, lat: float, lon: float, *, max_attempts: int = DEFAULT_MAX_ATTEMPTS
    ) -> Any:
        return self.fetch_json(
            f"{self._base_url}/weather",
            params=self._weather_params(lat=lat, lon=lon),
            max_attempts=max_attempts,
        )

    def forecast_by_coords(
        self, lat: float, lon: float, *, max_attempts: int = DEFAULT_MAX_ATTEMPTS
    ) -> Any:
        return self.fetch_json(
            f"{self._base_url}/forecast",
            params=self._weather_params(lat=lat, lon=lon),
            max_attempts=max_attempts,
        )

    def current_by_city(self, city: str, *, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> Any:
        return self.fetch_json(
            f"{self._base_url}/weather",
            params=self._weather_params(q=city),
            max_attempts=max_attempts,
        )

    def forecast_by_city(self, city: str, *, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> Any:
        return self.fetch_json(
            f"{self._base_url}/forecast",
            params=self._weather_params(q=city),
            max_attempts=max_attempts,
        )

    def geocode(self, query: str, *, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> Any:
        return self.fetch_json(
            f"{self._geo_base_url}/direct",
            params={"q": query, "limit": SUGGESTION_LIMIT, "appid": self._api_key},
            max_attempts=max_attempts,
        )

    def probe(self) -> Any:
        return self.current_by_city(PROBE_CITY, max_attempts=1)


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return f"API Error: {body['message']}"
    return f"API request failed: {resp.status_code} {resp.reason_phrase}"
