from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from shoptranslator.api.deps import get_widget_service
from shoptranslator.schemas.translation import WidgetListResponse, WidgetPayload, WidgetTextPayload
from shoptranslator.services.widgets import WidgetTranslationService

router = APIRouter()


@router.get("", response_model=WidgetListResponse, summary="Detect widgets on the storefront.")
async def list_widgets(
    search: str | None = Query(default=None, description="Filter by name, description or type."),
    refresh: bool = Query(default=False, description="Run detection again."),
    service: WidgetTranslationService = Depends(get_widget_service),
) -> WidgetListResponse:
    if refresh or not service.detected_widgets:
        await service.detect_active_widgets()

    stats = service.stats()
    widgets = [
        WidgetPayload(
            id=widget.id,
            name=widget.name,
            type=widget.type.value,
            description=widget.description,
            text_count=widget.text_count,
            texts=[WidgetTextPayload(index=unit.index, text=unit.text) for unit in widget.text_units],
        )
        for widget in service.search(search)
    ]
    return WidgetListResponse(
        widgets=widgets,
        total_widgets=stats["total_widgets"],
        total_texts=stats["total_texts"],
        widget_types=stats["widget_types"],
    )
