from __future__ import annotations

from typing import Any, Protocol


class WeatherProviderClient(Protocol):
    @property
    def api_key(self) -> str | None: ...

    def close(self) -> None: ...

    def current_by_coords(self, lat: float, lon: float, *, max_attempts: int = 3) -> Any: ...

    def forecast_by_coords(self, lat: float, lon: float, *, max_attempts: int = 3) -> Any: ...

    def current_by_city(self, city: str, *, max_attempts: int = 3) -> Any: ...

    def forecast_by_city(self, city: str, *, max_attempts: int = 3) -> Any: ...

    def geocode(self, query: str, *, max_attempts: int = 3) -> Any: ...

    def probe(self) -> Any: ...
