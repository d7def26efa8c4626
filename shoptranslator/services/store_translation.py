from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Sequence

from shoptranslator.core.errors import UpstreamCallError
from shoptranslator.integrations.store import StoreClient
from shoptranslator.services.extraction import apply_translations, extract, validate_selection
from shoptranslator.services.translation import ProgressCallback, TranslationOrchestrator


logger = logging.getLogger(__name__)

ItemStatus = Literal["translated", "skipped", "failed"]


@dataclass(slots=True)
class ItemOutcome:
    record_id: str
    status: ItemStatus
    message: str
    translated_fields: list[str] = field(default_factory=list)
    fallback_fields: list[str] = field(default_factory=list)


@dataclass(slots=True)
class JobReport:
    """Per-record outcome of a store translation job."""

    record_type: str
    target_language: str
    items: list[ItemOutcome] = field(default_factory=list)
    tokens_used: int = 0

    def count(self, status: ItemStatus) -> int:
        return sum(1 for item in self.items if item.status == status)


class StoreTranslationService:
    """Fetch, translate and write back store records one at a time."""

    def __init__(self, store: StoreClient, orchestrator: TranslationOrchestrator) -> None:
        self._store = store
        self._orchestrator = orchestrator

    async def list_records(self, record_type: str) -> list[dict[str, Any]]:
        await self._store.ensure_connected()
        return await self._store.list_records(record_type)

    async def translate_records(
        self,
        record_type: str,
        record_ids: Sequence[str | int],
        selected_fields: Mapping[str, bool],
        target_language: str,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> JobReport:
        """Translate the selected fields of every record and PUT each one back.

        A record whose fetch or update fails is reported as ``failed`` and
        the job moves on to the next record.
        """
        validate_selection(selected_fields, record_ids, record_type)
        self._orchestrator.ensure_configured()
        await self._store.ensure_connected()

        logger.info("Starting translation of %s %ss", len(record_ids), record_type)
        tokens_before = self._orchestrator.usage.total_tokens
        report = JobReport(record_type=record_type, target_language=target_language)

        for position, record_id in enumerate(record_ids, start=1):
            try:
                outcome = await self._translate_one(
                    record_type, record_id, selected_fields, target_language
                )
            except UpstreamCallError as exc:
                logger.error("Translation of %s %s failed: %s", record_type, record_id, exc)
                outcome = ItemOutcome(record_id=str(record_id), status="failed", message=str(exc))
            report.items.append(outcome)
            if on_progress is not None:
                on_progress(position / len(record_ids))

        report.tokens_used = self._orchestrator.usage.total_tokens - tokens_before
        logger.info(
            "%s translation completed: %s translated, %s skipped, %s failed",
            record_type.capitalize(),
            report.count("translated"),
            report.count("skipped"),
            report.count("failed"),
        )
        return report

    async def _translate_one(
        self,
        record_type: str,
        record_id: str | int,
        selected_fields: Mapping[str, bool],
        target_language: str,
    ) -> ItemOutcome:
        record = await self._store.fetch_record(record_type, record_id)
        requests = extract(record, selected_fields, record_type)
        if not requests:
            logger.warning(
                "No translatable content found for %s %s", record_type, record.get("title")
            )
            return ItemOutcome(
                record_id=str(record_id),
                status="skipped",
                message="No translatable content found",
            )

        results = await self._orchestrator.translate_batch(requests, target_language, record_type)
        updated = apply_translations(record, results, selected_fields, record_type)
        await self._store.update_record(record_type, record_id, updated)

        logger.info("Translated %s: %s", record_type, record.get("title"))
        return ItemOutcome(
            record_id=str(record_id),
            status="translated",
            message=f"Translated {record_type}: {record.get('title')}",
            translated_fields=[result.field for result in results if not result.fallback],
            fallback_fields=[result.field for result in results if result.fallback],
        )
