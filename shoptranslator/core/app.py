import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shoptranslator.api.router import api_router
from shoptranslator.core.config import AppSettings, get_settings

# Per-request INFO lines from the HTTP stack drown out batch progress logs.
_CLIENT_LOGGERS = ("httpx", "httpcore", "openai")


def _configure_logging(settings: AppSettings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        )
    root_logger.setLevel(level)

    client_level = level if settings.debug else max(level, logging.WARNING)
    for name in _CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_level)


def create_app() -> FastAPI:
    settings = get_settings()
    _configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["health"])
    async def root() -> dict[str, object]:
        return {
            "service": settings.app_name,
            "environment": settings.app_env,
            "translation_model": settings.translation_model,
            "store_configured": bool(settings.store_domain and settings.store_access_token),
        }

    return app
