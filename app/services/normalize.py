from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import ValidationError

from app.core.errors import InvalidDataError
from app.models.weather import (
    Condition,
    CurrentConditions,
    DailyForecast,
    HourlyForecast,
    Location,
    WeatherSnapshot,
    coords_in_range,
)
from app.schemas.openweather import (
    RawCondition,
    RawCurrentWeather,
    RawForecast,
    RawForecastItem,
    RawWind,
)

log = logging.getLogger(__name__)

WIND_MS_TO_KMH = 3.6
DEFAULT_VISIBILITY_M = 10_000
DEFAULT_PRESSURE_HPA = 1013
DEW_POINT_DEFAULT_HUMIDITY = 50
DEFAULT_ICON = "01d"
UNKNOWN = "Unknown"

# The forecast feed is 3-hourly: 8 slots per day, slot 4 is closest to midday.
SLOTS_PER_DAY = 8
MIDDAY_SLOT = 4
MAX_DAILY = 6
MAX_HOURLY = 8

MAX_UTC_OFFSET_SECONDS = 14 * 3600

_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _or(value: float | None, default: float) -> float:
    return default if value is None else value


def _non_negative(value: float) -> int:
    return max(round_half_up(value), 0)


def approximate_dew_point(temperature: float, humidity: float | None) -> int:
    """Rough linear dew point, ``T - (100 - RH) / 5``.

    This is not the Magnus formula. Consumers already depend on the values it
    produces, so it is kept as is.
    """
    rh = _or(humidity, DEW_POINT_DEFAULT_HUMIDITY)
    return round_half_up(temperature - (100 - rh) / 5)


def format_utc_offset(offset_seconds: int) -> str:
    sign = "+" if offset_seconds >= 0 else "-"
    hours, rem = divmod(abs(offset_seconds), 3600)
    minutes = rem // 60
    if minutes:
        return f"UTC{sign}{hours}:{minutes:02d}"
    return f"UTC{sign}{hours}"


def _local_time(epoch: float, offset_seconds: int) -> datetime:
    try:
        moment = datetime.fromtimestamp(epoch, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        moment = datetime.fromtimestamp(0, tz=timezone.utc)
    return moment + timedelta(seconds=offset_seconds)


def _utc_offset(raw: RawCurrentWeather) -> int:
    if raw.timezone is None or abs(raw.timezone) > MAX_UTC_OFFSET_SECONDS:
        return 0
    return int(raw.timezone)


def _hour_label(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    return f"{hour} {'AM' if moment.hour < 12 else 'PM'}"


def _wind_kmh(wind: RawWind | None) -> int:
    speed = wind.speed if wind is not None else None
    return _non_negative(_or(speed, 0) * WIND_MS_TO_KMH)


def _primary(conditions: list[RawCondition | None]) -> RawCondition:
    first = conditions[0]
    return first if first is not None else RawCondition()


def _location(raw: RawCurrentWeather) -> Location:
    lat = raw.coord.lat if raw.coord is not None else None
    lon = raw.coord.lon if raw.coord is not None else None
    lat, lon = _or(lat, 0.0), _or(lon, 0.0)
    if not coords_in_range(lat, lon):
        log.debug("Provider coordinates out of range (%s, %s); defaulting to 0", lat, lon)
        lat, lon = 0.0, 0.0

    offset = _utc_offset(raw)
    in_range = raw.timezone is not None and abs(raw.timezone) <= MAX_UTC_OFFSET_SECONDS
    tz_label = format_utc_offset(offset) if in_range else None

    return Location(
        name=raw.name or UNKNOWN,
        country=(raw.sys.country if raw.sys is not None else None) or UNKNOWN,
        lat=lat,
        lon=lon,
        timezone=tz_label,
    )


def _current(raw: RawCurrentWeather) -> CurrentConditions:
    main = raw.main
    weather = _primary(raw.weather)
    temperature = _or(main.temp, 0)
    sunrise = raw.sys.sunrise if raw.sys is not None else None
    sunset = raw.sys.sunset if raw.sys is not None else None
    wind_deg = raw.wind.deg if raw.wind is not None else None
    cloudiness = raw.clouds.cover if raw.clouds is not None else None

    return CurrentConditions(
        temperature=round_half_up(temperature),
        feels_like=round_half_up(_or(main.feels_like, 0)),
        condition=Condition.parse(weather.main),
        description=weather.description or UNKNOWN,
        icon=weather.icon or DEFAULT_ICON,
        humidity=_non_negative(_or(main.humidity, 0)),
        wind_speed=_wind_kmh(raw.wind),
        wind_direction=round_half_up(_or(wind_deg, 0)),
        visibility=_non_negative(_or(raw.visibility, DEFAULT_VISIBILITY_M) / 1000),
        pressure=_non_negative(_or(main.pressure, DEFAULT_PRESSURE_HPA)),
        cloudiness=_non_negative(_or(cloudiness, 0)),
        sunrise=_non_negative(_or(sunrise, 0)),
        sunset=_non_negative(_or(sunset, 0)),
        dew_point=approximate_dew_point(temperature, main.humidity),
    )


def _forecast_item(raw: Any) -> RawForecastItem | None:
    try:
        return RawForecastItem.model_validate(raw)
    except ValidationError:
        log.debug("Dropping incomplete forecast slot")
        return None


def _daily(item: RawForecastItem, offset_seconds: int) -> DailyForecast:
    weather = _primary(item.weather)
    moment = _local_time(_or(item.dt, 0), offset_seconds)
    return DailyForecast(
        date=moment.date(),
        day_name=_DAY_NAMES[moment.weekday()],
        temp_max=round_half_up(_or(item.main.temp_max, 0)),
        temp_min=round_half_up(_or(item.main.temp_min, 0)),
        condition=Condition.parse(weather.main),
        description=weather.description or UNKNOWN,
        icon=weather.icon or DEFAULT_ICON,
        humidity=_non_negative(_or(item.main.humidity, 0)),
        wind_speed=_wind_kmh(item.wind),
        pop=_non_negative(_or(item.pop, 0) * 100),
        pressure=_non_negative(_or(item.main.pressure, 0)),
    )


def _hourly(item: RawForecastItem, offset_seconds: int) -> HourlyForecast:
    weather = _primary(item.weather)
    epoch = _or(item.dt, 0)
    return HourlyForecast(
        timestamp=_non_negative(epoch),
        time=item.dt_txt or "",
        hour=_hour_label(_local_time(epoch, offset_seconds)),
        temperature=round_half_up(_or(item.main.temp, 0)),
        feels_like=round_half_up(_or(item.main.feels_like, 0)),
        condition=Condition.parse(weather.main),
        description=weather.description or UNKNOWN,
        icon=weather.icon or DEFAULT_ICON,
        humidity=_non_negative(_or(item.main.humidity, 0)),
        wind_speed=_wind_kmh(item.wind),
        pop=_non_negative(_or(item.pop, 0) * 100),
        pressure=_non_negative(_or(item.main.pressure, 0)),
    )


def _forecasts(
    forecast: Any, offset_seconds: int
) -> tuple[tuple[DailyForecast, ...], tuple[HourlyForecast, ...]]:
    if not isinstance(forecast, dict):
        return (), ()
    items = RawForecast.model_validate(forecast).items
    if not items:
        return (), ()

    daily_slots = items[MIDDAY_SLOT::SLOTS_PER_DAY][:MAX_DAILY]
    daily = [
        _daily(parsed, offset_seconds)
        for parsed in map(_forecast_item, daily_slots)
        if parsed is not None
    ]
    hourly = [
        _hourly(parsed, offset_seconds)
        for parsed in map(_forecast_item, items[:MAX_HOURLY])
        if parsed is not None
    ]
    return tuple(daily), tuple(hourly)


def normalize(current: Any, forecast: Any = None) -> WeatherSnapshot:
    """Build a snapshot from a current-conditions payload and an optional forecast.

    Only the current payload's ``main`` block and non-empty ``weather`` list are
    required; anything else missing falls back to a default. Forecast slots
    missing their own ``main`` or ``weather`` are dropped.
    """
    try:
        raw = RawCurrentWeather.model_validate(current)
    except ValidationError as e:
        log.error("Invalid current weather data structure: %s", e.error_count())
        raise InvalidDataError("Invalid current weather data structure") from e

    offset_seconds = _utc_offset(raw)
    daily, hourly = _forecasts(forecast, offset_seconds)

    return WeatherSnapshot(
        location=_location(raw),
        current=_current(raw),
        forecast=daily,
        hourly=hourly,
        alerts=(),
    )
