from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.clients.base import WeatherProviderClient
from app.core.config import Settings
from app.services.preferences import MappingPreferencesStore, PreferencesService
from app.services.weather import WeatherService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_openweather_client(request: Request) -> WeatherProviderClient:
    return request.app.state.openweather_client


def get_weather_service(
    client: Annotated[WeatherProviderClient, Depends(get_openweather_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WeatherService:
    return WeatherService(
        client=client,
        max_attempts=settings.weather_max_attempts,
        fallback_cities=settings.weather_fallback_cities,
    )


def get_preferences_service(request: Request) -> PreferencesService:
    return PreferencesService(store=MappingPreferencesStore(request.session))


SettingsDep = Annotated[Settings, Depends(get_settings)]
WeatherServiceDep = Annotated[WeatherService, Depends(get_weather_service)]
PreferencesServiceDep = Annotated[PreferencesService, Depends(get_preferences_service)]
