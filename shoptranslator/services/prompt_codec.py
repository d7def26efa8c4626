from __future__ import annotations

import logging
from typing import Final, Literal, Sequence

from shoptranslator.services.batching import Batch
from shoptranslator.services.fragments import TranslationRequest, TranslationResult


logger = logging.getLogger(__name__)

TranslationContext = Literal["product", "collection", "page", "widget", "general"]

DELIMITER: Final[str] = "|||"

_LANGUAGE_NAMES: Final[dict[str, str]] = {
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "zh": "Chinese",
    "ja": "Japanese",
}

_CONTEXT_INSTRUCTIONS: Final[dict[str, str]] = {
    "product": (
        "You are translating e-commerce product information. "
        "Maintain marketing tone and product appeal."
    ),
    "collection": (
        "You are translating collection names and descriptions. "
        "Keep them concise and appealing."
    ),
    "page": (
        "You are translating website page content. "
        "Maintain the original meaning and structure."
    ),
    "widget": (
        "You are translating widget/plugin text. "
        "Keep functionality clear and user-friendly."
    ),
    "general": "You are translating general content. Maintain tone and meaning.",
}


def language_name(code: str) -> str:
    return _LANGUAGE_NAMES.get((code or "").lower(), code)


def system_prompt(context: str) -> str:
    """Return the system instruction for the given content context."""
    instruction = _CONTEXT_INSTRUCTIONS.get(context, _CONTEXT_INSTRUCTIONS["general"])
    return (
        "You are a professional translator specializing in e-commerce content. "
        f"{instruction} Translate accurately while preserving formatting and "
        "maintaining cultural appropriateness for the target market."
    )


def encode(batch: Batch | Sequence[TranslationRequest], target_language: str, context: str) -> str:
    """Render a batch as one numbered prompt asking for delimited translations."""
    requests = batch.requests if isinstance(batch, Batch) else tuple(batch)
    count = len(requests)
    lines = [
        f"Translate the following {count} {context} texts to {language_name(target_language)}.",
        f'Return exactly {count} translations in the same order, separated by "{DELIMITER}", '
        "with no numbering and no extra commentary.",
        "",
    ]
    for position, request in enumerate(requests, start=1):
        lines.append(f"{position}. {request.original_text}")
    lines.append("")
    lines.append(
        f'Respond with {count} translations separated by "{DELIMITER}" in the exact same order.'
    )
    return "\n".join(lines)


def decode(
    response_text: str | None,
    batch: Batch | Sequence[TranslationRequest],
) -> list[TranslationResult]:
    """Zip a delimited model response back onto the batch by position.

    Missing or blank pieces fall back to the request's own text; surplus
    pieces are dropped.
    """
    requests = batch.requests if isinstance(batch, Batch) else tuple(batch)
    pieces = [piece.strip() for piece in (response_text or "").strip().split(DELIMITER)]
    if pieces == [""]:
        pieces = []

    if len(pieces) < len(requests):
        logger.warning(
            "Model returned %s translations for %s texts; keeping source text for the rest",
            len(pieces),
            len(requests),
        )
    elif len(pieces) > len(requests):
        logger.warning(
            "Model returned %s translations for %s texts; discarding the surplus",
            len(pieces),
            len(requests),
        )

    results: list[TranslationResult] = []
    for ordinal, request in enumerate(requests):
        translated = pieces[ordinal] if ordinal < len(pieces) else ""
        if translated:
            results.append(TranslationResult(request=request, translated_text=translated))
        else:
            results.append(TranslationResult.echo(request))
    return results
