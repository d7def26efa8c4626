from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status

from shoptranslator.api.deps import (
    get_store_translation_service,
    get_usage_counter,
    get_widget_service,
)
from shoptranslator.core.errors import (
    ConfigurationError,
    TranslatorError,
    UpstreamCallError,
    ValidationError,
)
from shoptranslator.schemas.translation import (
    RecordOutcomePayload,
    RecordTranslationRequest,
    RecordTranslationResponse,
    UsageResponse,
    WidgetTextTranslationPayload,
    WidgetTranslationPayload,
    WidgetTranslationRequest,
    WidgetTranslationResponse,
)
from shoptranslator.services.store_translation import StoreTranslationService
from shoptranslator.services.usage import UsageCounter
from shoptranslator.services.widgets import (
    WidgetTranslationService,
    generate_implementation_script,
)

router = APIRouter()


def _as_http_error(exc: TranslatorError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    if isinstance(exc, ConfigurationError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, UpstreamCallError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("/usage", response_model=UsageResponse, summary="Token usage since the last reset.")
async def get_usage(usage: UsageCounter = Depends(get_usage_counter)) -> UsageResponse:
    return UsageResponse(**usage.snapshot())


@router.delete("/usage", response_model=UsageResponse, summary="Reset token usage statistics.")
async def reset_usage(usage: UsageCounter = Depends(get_usage_counter)) -> UsageResponse:
    usage.reset()
    return UsageResponse(**usage.snapshot())


@router.post(
    "/widgets",
    response_model=WidgetTranslationResponse,
    status_code=status.HTTP_200_OK,
    summary="Translate widget texts and generate the storefront script.",
)
async def translate_widgets(
    payload: WidgetTranslationRequest,
    service: WidgetTranslationService = Depends(get_widget_service),
) -> WidgetTranslationResponse:
    try:
        results = await service.translate_widgets(payload.widget_ids, payload.target_language)
    except TranslatorError as exc:
        raise _as_http_error(exc) from exc

    return WidgetTranslationResponse(
        target_language=payload.target_language,
        widgets=[
            WidgetTranslationPayload(
                widget_id=widget.widget_id,
                widget_name=widget.widget_name,
                translations=[
                    WidgetTextTranslationPayload(
                        field=item.field,
                        text_index=item.text_index,
                        original_text=item.original_text,
                        translated_text=item.translated_text,
                        selector=item.selector,
                    )
                    for item in widget.translations
                ],
            )
            for widget in results
        ],
        implementation_code=generate_implementation_script(results),
    )


@router.post(
    "/{record_type}",
    response_model=RecordTranslationResponse,
    status_code=status.HTTP_200_OK,
    summary="Translate the selected fields of store records and write them back.",
)
async def translate_records(
    record_type: Literal["product", "collection", "page"],
    payload: RecordTranslationRequest,
    service: StoreTranslationService = Depends(get_store_translation_service),
) -> RecordTranslationResponse:
    """Run one translation job; per-record failures are reported, not raised."""
    try:
        report = await service.translate_records(
            record_type,
            payload.record_ids,
            payload.fields,
            payload.target_language,
        )
    except TranslatorError as exc:
        raise _as_http_error(exc) from exc

    return RecordTranslationResponse(
        record_type=report.record_type,
        target_language=report.target_language,
        tokens_used=report.tokens_used,
        items=[
            RecordOutcomePayload(
                record_id=item.record_id,
                status=item.status,
                message=item.message,
                translated_fields=item.translated_fields,
                fallback_fields=item.fallback_fields,
            )
            for item in report.items
        ],
    )
