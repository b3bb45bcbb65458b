from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Condition(str, Enum):
    CLEAR = "Clear"
    CLOUDS = "Clouds"
    RAIN = "Rain"
    DRIZZLE = "Drizzle"
    THUNDERSTORM = "Thunderstorm"
    SNOW = "Snow"
    MIST = "Mist"
    FOG = "Fog"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> Condition:
        if not value:
            return cls.UNKNOWN
        text = value.strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return _CONDITION_ALIASES.get(text, cls.UNKNOWN)


# Provider "atmosphere" groups that have no category of their own.
_CONDITION_ALIASES = {
    "haze": Condition.MIST,
    "smoke": Condition.MIST,
    "dust": Condition.MIST,
    "sand": Condition.MIST,
    "ash": Condition.MIST,
    "squall": Condition.THUNDERSTORM,
    "tornado": Condition.THUNDERSTORM,
}


def coords_in_range(lat: float, lon: float) -> bool:
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


@dataclass(frozen=True)
class Location:
    name: str
    country: str
    lat: float
    lon: float
    timezone: str | None = None

    def __post_init__(self) -> None:
        if not coords_in_range(self.lat, self.lon):
            raise ValueError(f"Coordinates out of range: {self.lat}, {self.lon}")


@dataclass(frozen=True)
class CurrentConditions:
    temperature: int
    feels_like: int
    condition: Condition
    description: str
    icon: str
    humidity: int
    wind_speed: int
    wind_direction: int
    visibility: int
    pressure: int
    cloudiness: int
    sunrise: int
    sunset: int
    dew_point: int


@dataclass(frozen=True)
class DailyForecast:
    date: date
    day_name: str
    temp_max: int
    temp_min: int
    condition: Condition
    description: str
    icon: str
    humidity: int
    wind_speed: int
    pop: int
    pressure: int


@dataclass(frozen=True)
class HourlyForecast:
    timestamp: int
    time: str
    hour: str
    temperature: int
    feels_like: int
    condition: Condition
    description: str
    icon: str
    humidity: int
    wind_speed: int
    pop: int
    pressure: int


@dataclass(frozen=True)
class WeatherAlert:
    event: str
    description: str
    start: int
    end: int
    severity: str


@dataclass(frozen=True)
class WeatherSnapshot:
    location: Location
    current: CurrentConditions
    forecast: tuple[DailyForecast, ...] = ()
    hourly: tuple[HourlyForecast, ...] = ()
    alerts: tuple[WeatherAlert, ...] = ()


@dataclass(frozen=True)
class LocationSuggestion:
    name: str
    country: str
    lat: float
    lon: float
    region: str | None = None
    label: str = ""

    def __post_init__(self) -> None:
        if not self.label:
            parts = [self.name, self.region, self.country]
            object.__setattr__(self, "label", ", ".join(p for p in parts if p))


@dataclass(frozen=True)
class ConnectionStatus:
    success: bool
    message: str


@dataclass(frozen=True)
class WeatherQuality:
    score: int
    label: str
    factors: tuple[str, ...] = field(default_factory=tuple)
