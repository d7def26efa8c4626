from __future__ import annotations

import dataclasses
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TranslationRequest:
    """One piece of translatable text and where it came from."""

    source_id: str
    field: str
    original_text: str
    has_markup: bool = False
    original_markup: str | None = None
    ordinal: int = dataclasses.field(default=0, compare=False)
    source_label: str | None = None
    text_index: int | None = None


@dataclass(frozen=True, slots=True)
class TranslationResult:
    """A request paired with its translation (or its own text on fallback)."""

    request: TranslationRequest
    translated_text: str
    fallback: bool = False

    @property
    def source_id(self) -> str:
        return self.request.source_id

    @property
    def field(self) -> str:
        return self.request.field

    @property
    def original_text(self) -> str:
        return self.request.original_text

    @classmethod
    def echo(cls, request: TranslationRequest) -> TranslationResult:
        return cls(request=request, translated_text=request.original_text, fallback=True)
