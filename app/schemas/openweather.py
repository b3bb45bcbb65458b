"""Schema of the OpenWeatherMap payloads consumed by the normalizer.

Fields come in two tiers. ``main`` and a non-empty ``weather`` list are hard
requirements: validation fails without them. Every other field is lenient: a
missing or malformed leaf validates to ``None`` and the normalizer substitutes
its default.
"""

from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _float_or_none(v: Any) -> float | None:
    if v is None or isinstance(v, bool):
        return None
    try:
        value = float(v)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def _str_or_none(v: Any) -> str | None:
    if v is None:
        return None
    text = v if isinstance(v, str) else str(v)
    text = text.strip()
    return text or None


def _mapping_or_none(v: Any) -> dict[str, Any] | None:
    return v if isinstance(v, dict) else None


def _list_or_empty(v: Any) -> list[Any]:
    return v if isinstance(v, list) else []


LenientFloat = Annotated[float | None, BeforeValidator(_float_or_none)]
LenientStr = Annotated[str | None, BeforeValidator(_str_or_none)]


class _Block(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class RawMain(_Block):
    temp: LenientFloat = None
    feels_like: LenientFloat = None
    temp_min: LenientFloat = None
    temp_max: LenientFloat = None
    pressure: LenientFloat = None
    humidity: LenientFloat = None


class RawCondition(_Block):
    main: LenientStr = None
    description: LenientStr = None
    icon: LenientStr = None


class RawWind(_Block):
    speed: LenientFloat = None
    deg: LenientFloat = None


class RawCoord(_Block):
    lat: LenientFloat = None
    lon: LenientFloat = None


class RawSys(_Block):
    country: LenientStr = None
    sunrise: LenientFloat = None
    sunset: LenientFloat = None


class RawClouds(_Block):
    cover: LenientFloat = Field(default=None, alias="all")


OptionalCoord = Annotated[RawCoord | None, BeforeValidator(_mapping_or_none)]
OptionalSys = Annotated[RawSys | None, BeforeValidator(_mapping_or_none)]
OptionalWind = Annotated[RawWind | None, BeforeValidator(_mapping_or_none)]
OptionalClouds = Annotated[RawClouds | None, BeforeValidator(_mapping_or_none)]
OptionalCondition = Annotated[RawCondition | None, BeforeValidator(_mapping_or_none)]


class RawCurrentWeather(_Block):
    main: RawMain
    weather: list[OptionalCondition] = Field(min_length=1)

    name: LenientStr = None
    coord: OptionalCoord = None
    sys: OptionalSys = None
    wind: OptionalWind = None
    clouds: OptionalClouds = None
    visibility: LenientFloat = None
    timezone: LenientFloat = None
    dt: LenientFloat = None


class RawForecastItem(_Block):
    main: RawMain
    weather: list[OptionalCondition] = Field(min_length=1)

    dt: LenientFloat = None
    dt_txt: LenientStr = None
    wind: OptionalWind = None
    pop: LenientFloat = None


class RawForecast(_Block):
    # Items are validated one at a time so a malformed slot can be dropped.
    items: Annotated[list[Any], BeforeValidator(_list_or_empty)] = Field(
        default_factory=list, alias="list"
    )


class RawGeocodingResult(_Block):
    name: LenientStr = None
    country: LenientStr = None
    state: LenientStr = None
    lat: LenientFloat = None
    lon: LenientFloat = None
