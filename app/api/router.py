from fastapi import APIRouter

from app.api.routes import health, locations, preferences, weather

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(weather.router, tags=["weather"])
api_router.include_router(locations.router, tags=["locations"])
api_router.include_router(preferences.router, tags=["preferences"])
api_router.include_router(health.router, tags=["health"])
