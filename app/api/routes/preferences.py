from __future__ import annotations

from fastapi import APIRouter

from app.api.deps import PreferencesServiceDep, SettingsDep
from app.schemas.weather import (
    LocationSuggestionOut,
    PreferencesResponse,
    PreferencesUpdate,
)
from app.services.preferences import Preferences

router = APIRouter(prefix="/preferences")


def _respond(prefs: Preferences, interval_seconds: int) -> PreferencesResponse:
    return PreferencesResponse(
        units=prefs.units,
        auto_refresh=prefs.auto_refresh,
        auto_refresh_interval_seconds=interval_seconds,
        favorites=[LocationSuggestionOut.model_validate(f.__dict__) for f in prefs.favorites],
    )


@router.get("", response_model=PreferencesResponse)
def get_preferences(
    service: PreferencesServiceDep, settings: SettingsDep
) -> PreferencesResponse:
    return _respond(service.get(), settings.auto_refresh_interval_seconds)


@router.put("", response_model=PreferencesResponse)
def update_preferences(
    payload: PreferencesUpdate,
    service: PreferencesServiceDep,
    settings: SettingsDep,
) -> PreferencesResponse:
    prefs = service.get()
    if payload.units is not None:
        prefs = service.set_units(payload.units)
    if payload.auto_refresh is not None:
        prefs = service.set_auto_refresh(payload.auto_refresh)
    return _respond(prefs, settings.auto_refresh_interval_seconds)


@router.post("/favorites/toggle", response_model=PreferencesResponse)
def toggle_favorite(
    location: LocationSuggestionOut,
    service: PreferencesServiceDep,
    settings: SettingsDep,
) -> PreferencesResponse:
    prefs = service.toggle_favorite(location.to_model())
    return _respond(prefs, settings.auto_refresh_interval_seconds)
