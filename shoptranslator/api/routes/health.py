from datetime import datetime, timezone

from fastapi import APIRouter

from shoptranslator.core.config import get_settings

router = APIRouter()


@router.get("/healthz")
async def healthcheck() -> dict[str, str]:
    """Liveness probe; also reports whether a translation key is configured."""
    settings = get_settings()
    return {
        "status": "ok",
        "translation": "configured" if settings.openai_api_key else "missing-key",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
