from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Callable

from pydantic import ValidationError

from app.clients.base import WeatherProviderClient
from app.core.errors import (
    ConfigError,
    InvalidCityError,
    InvalidCoordsError,
    WeatherError,
)
from app.models.weather import (
    ConnectionStatus,
    LocationSuggestion,
    WeatherSnapshot,
    coords_in_range,
)
from app.schemas.openweather import RawGeocodingResult
from app.services.normalize import normalize

log = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MAX_CITY_LENGTH = 100
MAX_SUGGESTION_QUERY_LENGTH = 50
MAX_SUGGESTIONS = 8

DEFAULT_FALLBACK_CITIES = ("London", "New York", "Tokyo", "Paris")

MISSING_KEY_MESSAGE = (
    "Weather API key is not configured. "
    "Please add WEATHER_API_KEY to your environment variables."
)


class WeatherService:
    def __init__(
        self,
        *,
        client: WeatherProviderClient,
        max_attempts: int = 3,
        fallback_cities: list[str] | None = None,
    ) -> None:
        self._client = client
        self._max_attempts = max_attempts
        self._fallback_cities = list(fallback_cities or DEFAULT_FALLBACK_CITIES)

    def _require_api_key(self) -> None:
        if not self._client.api_key:
            log.error("API key not found in environment variables")
            raise ConfigError(MISSING_KEY_MESSAGE)

    def _fetch_both(
        self, current: Callable[[], Any], forecast: Callable[[], Any]
    ) -> tuple[Any, Any]:
        # Both calls run to completion before either result is inspected.
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="weather-fetch") as pool:
            current_future = pool.submit(current)
            forecast_future = pool.submit(forecast)
            wait([current_future, forecast_future])
        return current_future.result(), forecast_future.result()

    def get_weather_by_coords(self, lat: float, lon: float) -> WeatherSnapshot:
        log.info("Getting weather by coordinates: %s, %s", lat, lon)
        if not (
            math.isfinite(lat) and math.isfinite(lon) and coords_in_range(lat, lon)
        ):
            raise InvalidCoordsError("Invalid coordinates provided")
        self._require_api_key()

        current, forecast = self._fetch_both(
            lambda: self._client.current_by_coords(lat, lon, max_attempts=self._max_attempts),
            lambda: self._client.forecast_by_coords(lat, lon, max_attempts=self._max_attempts),
        )
        return normalize(current, forecast)

    def get_weather_by_city(self, city: str) -> WeatherSnapshot:
        log.info("Getting weather by city: %s", city)
        name = (city or "").strip()
        if len(name) < MIN_QUERY_LENGTH:
            raise InvalidCityError("Please provide a valid city name")
        self._require_api_key()

        name = name[:MAX_CITY_LENGTH]
        current, forecast = self._fetch_both(
            lambda: self._client.current_by_city(name, max_attempts=self._max_attempts),
            lambda: self._client.forecast_by_city(name, max_attempts=self._max_attempts),
        )
        return normalize(current, forecast)

    def get_default_weather(self) -> WeatherSnapshot:
        """Weather for the first fallback city the provider can serve."""
        last_error: WeatherError | None = None
        for city in self._fallback_cities:
            try:
                return self.get_weather_by_city(city)
            except ConfigError:
                raise
            except WeatherError as e:
                log.warning("Failed to get weather for %s: %s", city, e.message)
                last_error = e
        if last_error is None:
            raise InvalidCityError("No fallback cities configured")
        raise last_error

    def get_location_suggestions(self, query: str) -> list[LocationSuggestion]:
        """Place autocomplete. Never raises; any failure yields an empty list."""
        if not self._client.api_key:
            log.warning("API key not found, returning empty suggestions")
            return []
        text = (query or "").strip()
        if len(text) < MIN_QUERY_LENGTH:
            return []

        try:
            data = self._client.geocode(
                text[:MAX_SUGGESTION_QUERY_LENGTH], max_attempts=self._max_attempts
            )
        except Exception:  # noqa: BLE001 - autocomplete degrades to no suggestions
            log.exception("Error fetching location suggestions")
            return []

        if not isinstance(data, list):
            log.warning("Location suggestions response is not a list")
            return []

        suggestions: list[LocationSuggestion] = []
        for item in data[:MAX_SUGGESTIONS]:
            try:
                raw = RawGeocodingResult.model_validate(item)
                suggestions.append(_suggestion(raw))
            except (ValidationError, ValueError):
                log.debug("Skipping malformed location suggestion")
        log.info("Found %d location suggestions", len(suggestions))
        return suggestions

    def test_api_connection(self) -> ConnectionStatus:
        """Connectivity probe for diagnostics. Never raises."""
        if not self._client.api_key:
            return ConnectionStatus(
                success=False,
                message=(
                    "API key not configured. "
                    "Please add WEATHER_API_KEY to your environment variables."
                ),
            )
        try:
            data = self._client.probe()
        except WeatherError as e:
            log.warning("API test failed: %s", e.message)
            return ConnectionStatus(success=False, message=e.message)
        except Exception as e:  # noqa: BLE001 - diagnostics report, never raise
            log.exception("API test failed")
            return ConnectionStatus(success=False, message=str(e) or "Unknown API error")

        if isinstance(data, dict) and data.get("main") and data.get("weather"):
            return ConnectionStatus(success=True, message="API connection successful!")
        return ConnectionStatus(success=False, message="API returned invalid data structure")


def _suggestion(raw: RawGeocodingResult) -> LocationSuggestion:
    lat = raw.lat if raw.lat is not None else 0.0
    lon = raw.lon if raw.lon is not None else 0.0
    if not coords_in_range(lat, lon):
        raise ValueError("suggestion coordinates out of range")
    return LocationSuggestion(
        name=raw.name or "Unknown",
        country=raw.country or "Unknown",
        region=raw.state,
        lat=lat,
        lon=lon,
    )
