from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, status

from shoptranslator.api.deps import get_store_client, get_store_translation_service
from shoptranslator.core.errors import ConfigurationError, UpstreamCallError
from shoptranslator.integrations.store import StoreClient
from shoptranslator.services.store_translation import StoreTranslationService

router = APIRouter()


@router.get("/shop", summary="Connect to the configured store and return its details.")
async def get_shop(store: StoreClient = Depends(get_store_client)) -> dict[str, Any]:
    try:
        return await store.connect()
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except UpstreamCallError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


@router.get("/{record_type}", summary="List store records available for translation.")
async def list_records(
    record_type: Literal["product", "collection", "page"],
    service: StoreTranslationService = Depends(get_store_translation_service),
) -> list[dict[str, Any]]:
    try:
        return await service.list_records(record_type)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except UpstreamCallError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
