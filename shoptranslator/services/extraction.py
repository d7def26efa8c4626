from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Final, Iterable, Literal, Mapping, Sequence

from shoptranslator.core.errors import ValidationError
from shoptranslator.services.fragments import TranslationRequest, TranslationResult
from shoptranslator.services.html_bridge import restore_html, strip_html


logger = logging.getLogger(__name__)

RecordType = Literal["product", "collection", "page"]


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Maps a selectable field onto the record attribute that stores it."""

    name: str
    attribute: str
    markup: bool = False


RECORD_FIELDS: Final[dict[str, tuple[FieldSpec, ...]]] = {
    "product": (
        FieldSpec("title", "title"),
        FieldSpec("description", "body_html", markup=True),
        FieldSpec("tags", "tags"),
    ),
    "collection": (
        FieldSpec("title", "title"),
        FieldSpec("description", "body_html", markup=True),
    ),
    "page": (
        FieldSpec("title", "title"),
        FieldSpec("content", "body_html", markup=True),
    ),
}


def _field_specs(record_type: str) -> tuple[FieldSpec, ...]:
    try:
        return RECORD_FIELDS[record_type]
    except KeyError as exc:
        raise ValidationError(f"Unsupported record type: {record_type}") from exc


def _plain_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if str(item).strip())
    return str(value)


def validate_selection(
    selected_fields: Mapping[str, bool],
    selected_ids: Sequence[Any],
    record_type: str,
) -> None:
    """Reject a job that selected no fields or no records."""
    if not any(selected_fields.values()):
        raise ValidationError(
            f"Please select at least one field to translate for {record_type}s"
        )
    if not selected_ids:
        raise ValidationError(f"Please select at least one {record_type} to translate")


def extract(
    record: Mapping[str, Any],
    selected_fields: Mapping[str, bool],
    record_type: str,
) -> list[TranslationRequest]:
    """Build translation requests for the selected, non-blank fields of a record."""
    source_id = str(record.get("id", ""))
    requests: list[TranslationRequest] = []

    for spec in _field_specs(record_type):
        if not selected_fields.get(spec.name):
            continue
        raw_value = _plain_value(record.get(spec.attribute))
        if not raw_value.strip():
            continue

        if spec.markup:
            text = strip_html(raw_value)
            if not text.strip():
                continue
            requests.append(
                TranslationRequest(
                    source_id=source_id,
                    field=spec.name,
                    original_text=text,
                    has_markup=True,
                    original_markup=raw_value,
                    ordinal=len(requests),
                )
            )
        else:
            requests.append(
                TranslationRequest(
                    source_id=source_id,
                    field=spec.name,
                    original_text=raw_value,
                    ordinal=len(requests),
                )
            )
    return requests


def extract_widget_texts(
    widget_id: str,
    texts: Iterable[tuple[int, str]],
    *,
    widget_name: str | None = None,
) -> list[TranslationRequest]:
    """One request per widget text unit, keyed ``text_<index>``."""
    requests: list[TranslationRequest] = []
    for index, text in texts:
        if not text or not text.strip():
            logger.debug("Skipping blank text unit %s in widget %s", index, widget_id)
            continue
        requests.append(
            TranslationRequest(
                source_id=widget_id,
                field=f"text_{index}",
                original_text=text,
                ordinal=len(requests),
                source_label=widget_name,
                text_index=index,
            )
        )
    return requests


def apply_translations(
    record: Mapping[str, Any],
    results: Iterable[TranslationResult],
    selected_fields: Mapping[str, bool],
    record_type: str,
) -> dict[str, Any]:
    """Return a copy of ``record`` with translated values written back."""
    specs = {spec.name: spec for spec in _field_specs(record_type)}
    updated = dict(record)

    for result in results:
        spec = specs.get(result.field)
        if spec is None or not selected_fields.get(spec.name):
            continue
        request = result.request
        if request.has_markup and request.original_markup is not None:
            updated[spec.attribute] = restore_html(request.original_markup, result.translated_text)
        else:
            updated[spec.attribute] = result.translated_text
    return updated
