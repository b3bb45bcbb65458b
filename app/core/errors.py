from __future__ import annotations


class WeatherError(Exception):
    """Base class for failures surfaced to callers of the weather service."""

    code = "WEATHER_ERROR"

    def __init__(
        self, message: str, *, code: str | None = None, status: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.status = status


class ConfigError(WeatherError):
    code = "CONFIG_ERROR"


class InvalidCoordsError(WeatherError):
    code = "INVALID_COORDS"


class InvalidCityError(WeatherError):
    code = "INVALID_CITY"


class NotFoundError(WeatherError):
    code = "LOCATION_NOT_FOUND"


class ApiError(WeatherError):
    code = "API_ERROR"


class NetworkError(WeatherError):
    code = "NETWORK_ERROR"


class RetryExhaustedError(WeatherError):
    code = "RETRY_FAILED"


class InvalidDataError(WeatherError):
    code = "INVALID_DATA"
