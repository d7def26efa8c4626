"""Serve the storefront translator API (installed as ``shoptranslator-api``)."""

import uvicorn

from shoptranslator.core.app import create_app
from shoptranslator.core.config import get_settings

app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "shoptranslator.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
