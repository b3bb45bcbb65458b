from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from app.api.errors import weather_error_handler
from app.api.router import api_router
from app.clients.openweather import OpenWeatherClient
from app.core.config import Settings, load_settings
from app.core.errors import WeatherError
from app.core.logging import configure_logging

log = logging.getLogger(__name__)


def create_openweather_client(settings: Settings) -> OpenWeatherClient:
    return OpenWeatherClient(
        api_key=settings.weather_api_key,
        user_agent=settings.weather_user_agent,
        timeout_seconds=settings.weather_timeout_seconds,
        base_url=str(settings.weather_api_base),
        geo_base_url=str(settings.weather_geo_api_base),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.openweather_client = create_openweather_client(settings)
        if not settings.weather_api_key:
            log.warning("No weather API key configured; weather requests will fail")
        yield
        app.state.openweather_client.close()

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="WeatherNow API",
        version="0.1.0",
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age_seconds,
        same_site="lax",
        https_only=settings.is_production,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.middleware("http")
    async def harden_and_log(request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Cache-Control", "no-store")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        log.info(
            "%s %s -> %d (%dms)",
            request.method,
            request.url.path,
            response.status_code,
            int((time.perf_counter() - start) * 1000),
        )
        return response

    app.add_exception_handler(WeatherError, weather_error_handler)

    @app.get("/", tags=["meta"])
    def root():
        return {"name": "weathernow", "status": "ok"}

    app.include_router(api_router)
    return app
