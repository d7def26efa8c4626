from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from shoptranslator.core.errors import ValidationError
from shoptranslator.integrations.widgets import CatalogWidgetSource, Widget, WidgetSource
from shoptranslator.services.extraction import extract_widget_texts
from shoptranslator.services.fragments import TranslationResult
from shoptranslator.services.translation import ProgressCallback, TranslationOrchestrator


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WidgetTextTranslation:
    field: str
    text_index: int | None
    original_text: str
    translated_text: str
    selector: str | None = None


@dataclass(slots=True)
class WidgetTranslation:
    """Translations produced for one widget, in text-unit order."""

    widget_id: str
    widget_name: str
    translations: list[WidgetTextTranslation] = field(default_factory=list)


class WidgetTranslationService:
    """Detects widgets and translates their visible text in one batched job."""

    def __init__(
        self,
        orchestrator: TranslationOrchestrator,
        *,
        source: WidgetSource | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._source = source or CatalogWidgetSource()
        self.detected_widgets: list[Widget] = []

    async def detect_active_widgets(self) -> list[Widget]:
        logger.info("Starting widget detection...")
        self.detected_widgets = await self._source.detect()
        logger.info("Detected %s active widgets", len(self.detected_widgets))
        return self.detected_widgets

    async def translate_widgets(
        self,
        widget_ids: Sequence[str],
        target_language: str,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> list[WidgetTranslation]:
        if not widget_ids:
            raise ValidationError("No widgets selected for translation")

        self._orchestrator.ensure_configured()
        if not self.detected_widgets:
            await self.detect_active_widgets()

        logger.info(
            "Starting translation of %s widgets to %s", len(widget_ids), target_language
        )
        by_id = {widget.id: widget for widget in self.detected_widgets}
        selected: list[Widget] = []
        for widget_id in widget_ids:
            widget = by_id.get(widget_id)
            if widget is None:
                logger.warning("Widget %s was not detected; skipping", widget_id)
                continue
            selected.append(widget)

        requests = []
        for widget in selected:
            requests.extend(
                extract_widget_texts(
                    widget.id,
                    ((unit.index, unit.text) for unit in widget.text_units),
                    widget_name=widget.name,
                )
            )
        logger.info(
            "Extracted %s translatable texts from %s widgets", len(requests), len(selected)
        )
        if not requests:
            logger.warning("No translatable texts found in selected widgets")
            return []

        results = await self._orchestrator.translate_batch(
            requests, target_language, "widget", on_progress=on_progress
        )
        grouped = self._group_results(results, {widget.id: widget for widget in selected})
        logger.info("Widget translation completed. %s widgets processed", len(grouped))
        return grouped

    def _group_results(
        self,
        results: Iterable[TranslationResult],
        widgets: dict[str, Widget],
    ) -> list[WidgetTranslation]:
        grouped: dict[str, WidgetTranslation] = {}
        for result in results:
            widget = widgets.get(result.source_id)
            entry = grouped.setdefault(
                result.source_id,
                WidgetTranslation(
                    widget_id=result.source_id,
                    widget_name=result.request.source_label or result.source_id,
                ),
            )
            entry.translations.append(
                WidgetTextTranslation(
                    field=result.field,
                    text_index=result.request.text_index,
                    original_text=result.original_text,
                    translated_text=result.translated_text,
                    selector=widget.primary_selector if widget else None,
                )
            )
        return list(grouped.values())

    def stats(self) -> dict[str, Any]:
        type_counts = Counter(widget.type.value for widget in self.detected_widgets)
        return {
            "total_widgets": len(self.detected_widgets),
            "total_texts": sum(widget.text_count for widget in self.detected_widgets),
            "widget_types": dict(type_counts),
        }

    def search(self, term: str | None) -> list[Widget]:
        if not term:
            return list(self.detected_widgets)
        needle = term.lower()
        return [
            widget
            for widget in self.detected_widgets
            if needle in widget.name.lower()
            or needle in widget.description.lower()
            or needle in widget.type.value
        ]

    def reset(self) -> None:
        self.detected_widgets = []
        logger.info("Widget detection reset")


def generate_implementation_script(results: Sequence[WidgetTranslation]) -> str:
    """Render a standalone script that swaps widget text by exact match on load.

    A text shared by two widgets keeps the translation seen last.
    """
    lines = [
        "// Widget Translation Implementation Code",
        "// Copy this code to your theme's JavaScript files",
        "",
        "function applyWidgetTranslations() {",
        "  const translations = {",
    ]
    for widget in results:
        lines.append(f"    // {widget.widget_name.replace(chr(10), ' ')}")
        for item in widget.translations:
            key = json.dumps(item.original_text, ensure_ascii=False)
            value = json.dumps(item.translated_text, ensure_ascii=False)
            lines.append(f"    {key}: {value},")
        lines.append("")
    lines.extend(
        [
            "  };",
            "",
            "  // Apply translations to DOM elements",
            "  Object.keys(translations).forEach(originalText => {",
            "    const elements = document.querySelectorAll('*');",
            "    elements.forEach(element => {",
            "      if (element.textContent && element.textContent.trim() === originalText) {",
            "        element.textContent = element.textContent.replace(originalText, translations[originalText]);",
            "      }",
            "    });",
            "  });",
            "}",
            "",
            "// Apply translations when DOM is ready",
            "if (document.readyState === 'loading') {",
            "  document.addEventListener('DOMContentLoaded', applyWidgetTranslations);",
            "} else {",
            "  applyWidgetTranslations();",
            "}",
        ]
    )
    return "\n".join(lines)
