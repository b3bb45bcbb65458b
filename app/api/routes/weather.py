from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from app.api.deps import WeatherServiceDep
from app.models.weather import WeatherSnapshot
from app.schemas.weather import WeatherResponse
from app.services.display import TemperatureUnit
from app.services.quality import assess_quality

router = APIRouter(prefix="/weather")

UnitsQuery = Annotated[TemperatureUnit, Query(description="Temperature unit for the response")]


def _respond(snapshot: WeatherSnapshot, units: TemperatureUnit) -> WeatherResponse:
    return WeatherResponse.from_snapshot(
        snapshot, quality=assess_quality(snapshot), units=units
    )


@router.get("/coords", response_model=WeatherResponse)
def weather_by_coords(
    service: WeatherServiceDep,
    lat: Annotated[float, Query()],
    lon: Annotated[float, Query()],
    units: UnitsQuery = "C",
) -> WeatherResponse:
    return _respond(service.get_weather_by_coords(lat, lon), units)


@router.get("/city", response_model=WeatherResponse)
def weather_by_city(
    service: WeatherServiceDep,
    name: Annotated[str, Query(max_length=200)],
    units: UnitsQuery = "C",
) -> WeatherResponse:
    return _respond(service.get_weather_by_city(name), units)


@router.get("/default", response_model=WeatherResponse)
def default_weather(
    service: WeatherServiceDep,
    units: UnitsQuery = "C",
) -> WeatherResponse:
    return _respond(service.get_default_weather(), units)
