from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from app.api.deps import WeatherServiceDep
from app.schemas.weather import LocationSuggestionOut

router = APIRouter(prefix="/locations")


@router.get("/suggest", response_model=list[LocationSuggestionOut])
def suggest_locations(
    service: WeatherServiceDep,
    q: Annotated[str, Query(max_length=200)] = "",
) -> list[LocationSuggestionOut]:
    return [
        LocationSuggestionOut.model_validate(s.__dict__)
        for s in service.get_location_suggestions(q)
    ]
