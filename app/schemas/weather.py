from __future__ import annotations

from datetime import date
from typing import Callable, Literal

from pydantic import BaseModel, Field

from app.models.weather import (
    DailyForecast,
    HourlyForecast,
    LocationSuggestion,
    WeatherQuality,
    WeatherSnapshot,
)
from app.services.display import (
    TemperatureUnit,
    convert_temperature,
    icon_url,
    is_night,
    wind_compass,
)


class LocationOut(BaseModel):
    name: str
    country: str
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    timezone: str | None = None


class CurrentOut(BaseModel):
    temperature: int
    feels_like: int
    condition: str
    description: str
    icon: str
    icon_url: str
    humidity: int = Field(ge=0)
    wind_speed: int = Field(ge=0)
    wind_direction: int
    wind_compass: str
    visibility: int = Field(ge=0)
    pressure: int = Field(ge=0)
    cloudiness: int = Field(ge=0)
    sunrise: int = Field(ge=0)
    sunset: int = Field(ge=0)
    dew_point: int
    is_night: bool


class DailyOut(BaseModel):
    date: date
    day_name: str
    temp_max: int
    temp_min: int
    condition: str
    description: str
    icon: str
    humidity: int = Field(ge=0)
    wind_speed: int = Field(ge=0)
    pop: int = Field(ge=0)
    pressure: int = Field(ge=0)


class HourlyOut(BaseModel):
    timestamp: int = Field(ge=0)
    time: str
    hour: str
    temperature: int
    feels_like: int
    condition: str
    description: str
    icon: str
    humidity: int = Field(ge=0)
    wind_speed: int = Field(ge=0)
    pop: int = Field(ge=0)
    pressure: int = Field(ge=0)


class AlertOut(BaseModel):
    event: str
    description: str
    start: int
    end: int
    severity: Literal["minor", "moderate", "severe", "extreme"]


class QualityOut(BaseModel):
    score: int = Field(ge=0, le=100)
    label: str
    factors: list[str] = Field(default_factory=list)

    @classmethod
    def from_quality(cls, quality: WeatherQuality) -> QualityOut:
        return cls(score=quality.score, label=quality.label, factors=list(quality.factors))


class WeatherResponse(BaseModel):
    units: TemperatureUnit
    location: LocationOut
    current: CurrentOut
    forecast: list[DailyOut] = Field(default_factory=list)
    hourly: list[HourlyOut] = Field(default_factory=list)
    alerts: list[AlertOut] = Field(default_factory=list)
    quality: QualityOut

    @classmethod
    def from_snapshot(
        cls,
        snapshot: WeatherSnapshot,
        *,
        quality: WeatherQuality,
        units: TemperatureUnit = "C",
    ) -> WeatherResponse:
        def temp(value: int) -> int:
            return convert_temperature(value, units)

        current = snapshot.current
        return cls(
            units=units,
            location=LocationOut.model_validate(snapshot.location.__dict__),
            current=CurrentOut(
                **{
                    **current.__dict__,
                    "condition": current.condition.value,
                    "temperature": temp(current.temperature),
                    "feels_like": temp(current.feels_like),
                    "dew_point": temp(current.dew_point),
                },
                icon_url=icon_url(current.icon),
                wind_compass=wind_compass(current.wind_direction),
                is_night=is_night(current),
            ),
            forecast=[_daily_out(d, temp) for d in snapshot.forecast],
            hourly=[_hourly_out(h, temp) for h in snapshot.hourly],
            alerts=[AlertOut.model_validate(a.__dict__) for a in snapshot.alerts],
            quality=QualityOut.from_quality(quality),
        )


def _daily_out(day: DailyForecast, temp: Callable[[int], int]) -> DailyOut:
    return DailyOut(
        **{
            **day.__dict__,
            "condition": day.condition.value,
            "temp_max": temp(day.temp_max),
            "temp_min": temp(day.temp_min),
        }
    )


def _hourly_out(slot: HourlyForecast, temp: Callable[[int], int]) -> HourlyOut:
    return HourlyOut(
        **{
            **slot.__dict__,
            "condition": slot.condition.value,
            "temperature": temp(slot.temperature),
            "feels_like": temp(slot.feels_like),
        }
    )


class LocationSuggestionOut(BaseModel):
    name: str = Field(min_length=1)
    country: str
    region: str | None = None
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    label: str

    def to_model(self) -> LocationSuggestion:
        return LocationSuggestion(
            name=self.name,
            country=self.country,
            region=self.region,
            lat=self.lat,
            lon=self.lon,
            label=self.label,
        )


class ConnectionStatusResponse(BaseModel):
    success: bool
    message: str


class PreferencesResponse(BaseModel):
    units: TemperatureUnit
    auto_refresh: bool
    auto_refresh_interval_seconds: int = Field(ge=1)
    favorites: list[LocationSuggestionOut] = Field(default_factory=list)


class PreferencesUpdate(BaseModel):
    units: TemperatureUnit | None = None
    auto_refresh: bool | None = None
