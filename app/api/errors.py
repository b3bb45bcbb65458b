from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from app.core.errors import (
    ApiError,
    ConfigError,
    InvalidCityError,
    InvalidCoordsError,
    InvalidDataError,
    NetworkError,
    NotFoundError,
    RetryExhaustedError,
    WeatherError,
)

log = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[WeatherError], int], ...] = (
    (InvalidCoordsError, 422),
    (InvalidCityError, 422),
    (NotFoundError, 404),
    (ConfigError, 503),
    (ApiError, 502),
    (InvalidDataError, 502),
    (NetworkError, 503),
    (RetryExhaustedError, 503),
)


def http_status_for(exc: WeatherError) -> int:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return code
    return 500


async def weather_error_handler(request: Request, exc: WeatherError) -> JSONResponse:
    status_code = http_status_for(exc)
    log.warning(
        "%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code
    )
    body = {"error": {"code": exc.code, "message": exc.message}}
    return JSONResponse(status_code=status_code, content=body)
