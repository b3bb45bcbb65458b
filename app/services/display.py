from __future__ import annotations

import time
from typing import Literal

from app.models.weather import CurrentConditions
from app.services.normalize import round_half_up

TemperatureUnit = Literal["C", "F"]

ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{icon}@4x.png"

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def convert_temperature(celsius: int, unit: TemperatureUnit) -> int:
    if unit == "F":
        return round_half_up(celsius * 9 / 5 + 32)
    return celsius


def wind_compass(degrees: int) -> str:
    return COMPASS_POINTS[round_half_up(degrees / 22.5) % len(COMPASS_POINTS)]


def icon_url(icon: str) -> str:
    return ICON_URL_TEMPLATE.format(icon=icon)


def is_night(current: CurrentConditions, *, now: float | None = None) -> bool:
    if current.sunrise == 0 and current.sunset == 0:
        return False
    moment = time.time() if now is None else now
    return moment < current.sunrise or moment > current.sunset
