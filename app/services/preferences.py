from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, MutableMapping, Protocol

from app.models.weather import LocationSuggestion
from app.services.display import TemperatureUnit

MAX_FAVORITES = 10

UNITS_KEY = "temperature_unit"
AUTO_REFRESH_KEY = "auto_refresh"
FAVORITES_KEY = "favorite_locations"


class PreferencesStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MappingPreferencesStore:
    """Preferences kept in any mutable mapping, e.g. a signed session cookie."""

    def __init__(self, mapping: MutableMapping[str, Any]) -> None:
        self._mapping = mapping

    def get(self, key: str, default: Any = None) -> Any:
        return self._mapping.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._mapping[key] = value


@dataclass(frozen=True)
class Preferences:
    units: TemperatureUnit
    auto_refresh: bool
    favorites: tuple[LocationSuggestion, ...]


def _favorite_from_dict(data: Any) -> LocationSuggestion | None:
    if not isinstance(data, dict):
        return None
    try:
        return LocationSuggestion(
            name=str(data["name"]),
            country=str(data["country"]),
            lat=float(data["lat"]),
            lon=float(data["lon"]),
            region=data.get("region"),
            label=str(data.get("label") or ""),
        )
    except (KeyError, TypeError, ValueError):
        return None


class PreferencesService:
    def __init__(self, *, store: PreferencesStore) -> None:
        self._store = store

    def get(self) -> Preferences:
        units = self._store.get(UNITS_KEY, "C")
        if units not in ("C", "F"):
            units = "C"
        auto_refresh = self._store.get(AUTO_REFRESH_KEY, True)
        return Preferences(
            units=units,
            auto_refresh=bool(auto_refresh),
            favorites=tuple(self._favorites()),
        )

    def _favorites(self) -> list[LocationSuggestion]:
        raw = self._store.get(FAVORITES_KEY, [])
        if not isinstance(raw, list):
            return []
        parsed = (_favorite_from_dict(item) for item in raw)
        return [fav for fav in parsed if fav is not None]

    def set_units(self, units: TemperatureUnit) -> Preferences:
        if units not in ("C", "F"):
            raise ValueError(f"Unsupported temperature unit: {units}")
        self._store.set(UNITS_KEY, units)
        return self.get()

    def set_auto_refresh(self, enabled: bool) -> Preferences:
        self._store.set(AUTO_REFRESH_KEY, bool(enabled))
        return self.get()

    def toggle_favorite(self, location: LocationSuggestion) -> Preferences:
        """Remove ``location`` if already a favorite, else append it.

        Favorites are matched on coordinates. When the list is full the newest
        entry replaces the last slot, the first nine are never evicted.
        """
        favorites = self._favorites()
        remaining = [
            fav for fav in favorites if (fav.lat, fav.lon) != (location.lat, location.lon)
        ]
        if len(remaining) == len(favorites):
            remaining = remaining[: MAX_FAVORITES - 1] + [location]
        self._store.set(FAVORITES_KEY, [asdict(fav) for fav in remaining])
        return self.get()
