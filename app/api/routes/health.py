from __future__ import annotations

from fastapi import APIRouter

from app.api.deps import WeatherServiceDep
from app.schemas.weather import ConnectionStatusResponse

router = APIRouter(prefix="/health")


@router.get("/provider", response_model=ConnectionStatusResponse)
def provider_status(service: WeatherServiceDep) -> ConnectionStatusResponse:
    result = service.test_api_connection()
    return ConnectionStatusResponse(success=result.success, message=result.message)
