from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class RecordTranslationRequest(BaseModel):
    record_ids: list[int | str] = Field(
        default_factory=list,
        description="Identifiers of the store records to translate.",
    )
    fields: dict[str, bool] = Field(
        default_factory=dict,
        description="Field selection, e.g. {'title': true, 'description': false}.",
    )
    target_language: str = Field(..., description="Language code to translate into.")


class RecordOutcomePayload(BaseModel):
    record_id: str
    status: Literal["translated", "skipped", "failed"]
    message: str
    translated_fields: list[str] = Field(default_factory=list)
    fallback_fields: list[str] = Field(default_factory=list)


class RecordTranslationResponse(BaseModel):
    record_type: str
    target_language: str
    tokens_used: int = 0
    items: list[RecordOutcomePayload] = Field(default_factory=list)


class WidgetTextPayload(BaseModel):
    index: int
    text: str


class WidgetPayload(BaseModel):
    id: str
    name: str
    type: str
    description: str = ""
    text_count: int = 0
    texts: list[WidgetTextPayload] = Field(default_factory=list)


class WidgetListResponse(BaseModel):
    widgets: list[WidgetPayload] = Field(default_factory=list)
    total_widgets: int = 0
    total_texts: int = 0
    widget_types: dict[str, int] = Field(default_factory=dict)


class WidgetTranslationRequest(BaseModel):
    widget_ids: list[str] = Field(
        default_factory=list,
        description="Identifiers of detected widgets to translate.",
    )
    target_language: str = Field(..., description="Language code to translate into.")


class WidgetTextTranslationPayload(BaseModel):
    field: str
    text_index: int | None = None
    original_text: str
    translated_text: str
    selector: str | None = None


class WidgetTranslationPayload(BaseModel):
    widget_id: str
    widget_name: str
    translations: list[WidgetTextTranslationPayload] = Field(default_factory=list)


class WidgetTranslationResponse(BaseModel):
    target_language: str
    widgets: list[WidgetTranslationPayload] = Field(default_factory=list)
    implementation_code: str = Field(
        "",
        description="Standalone script applying the translations on page load.",
    )


class UsageResponse(BaseModel):
    total_tokens: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    request_count: int = 0
    average_tokens_per_request: int = 0
