"""Translate detected storefront widgets and emit the script that applies them."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from shoptranslator.core.config import get_settings
from shoptranslator.core.errors import ConfigurationError, ValidationError
from shoptranslator.integrations.llm import TranslationModelClient
from shoptranslator.integrations.rate_limit import RateGovernor, parse_remaining_requests_header
from shoptranslator.services.translation import TranslationOrchestrator
from shoptranslator.services.widgets import (
    WidgetTranslation,
    WidgetTranslationService,
    generate_implementation_script,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shoptranslator-widgets",
        description=(
            "Translate the text of detected storefront widgets and write a script "
            "that swaps the text on page load."
        ),
    )
    parser.add_argument(
        "--target-language",
        required=True,
        help="Language code to translate into (e.g. es, fr, de).",
    )
    parser.add_argument(
        "--widget",
        dest="widgets",
        action="append",
        default=[],
        help="Widget identifier to translate; repeat for several. Defaults to all detected widgets.",
    )
    parser.add_argument(
        "--format",
        choices=("script", "json"),
        default="script",
        help="Emit the generated script or the raw translations (default: script).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the result to this file instead of stdout.",
    )
    return parser


def build_service() -> WidgetTranslationService:
    settings = get_settings()
    orchestrator = TranslationOrchestrator(
        TranslationModelClient(settings),
        governor=RateGovernor("translation", allowance_parser=parse_remaining_requests_header),
    )
    return WidgetTranslationService(orchestrator)


def _results_to_json(results: Sequence[WidgetTranslation]) -> str:
    payload = [
        {
            "widget_id": widget.widget_id,
            "widget_name": widget.widget_name,
            "translations": [
                {
                    "field": item.field,
                    "original_text": item.original_text,
                    "translated_text": item.translated_text,
                }
                for item in widget.translations
            ],
        }
        for widget in results
    ]
    return json.dumps(payload, ensure_ascii=False, indent=2)


async def _run(
    target_language: str,
    widget_ids: Sequence[str],
    format_name: str,
    output: Path | None,
) -> int:
    service = build_service()
    if not widget_ids:
        widgets = await service.detect_active_widgets()
        widget_ids = [widget.id for widget in widgets]

    try:
        results = await service.translate_widgets(widget_ids, target_language)
    except (ConfigurationError, ValidationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if format_name == "json":
        rendered = _results_to_json(results)
    else:
        rendered = generate_implementation_script(results)

    if output is not None:
        output.write_text(rendered + "\n", encoding="utf-8")
    else:
        print(rendered)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s - %(message)s")
    exit_code = asyncio.run(_run(args.target_language, args.widgets, args.format, args.output))
    raise SystemExit(exit_code)


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()
