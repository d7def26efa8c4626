from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal, Sequence

from shoptranslator.core.errors import ConfigurationError, UpstreamCallError
from shoptranslator.integrations.llm import ModelClient
from shoptranslator.integrations.rate_limit import RateGovernor
from shoptranslator.services import prompt_codec
from shoptranslator.services.batching import DEFAULT_BATCH_SIZE, Batch, partition
from shoptranslator.services.fragments import TranslationRequest, TranslationResult
from shoptranslator.services.usage import UsageCounter


logger = logging.getLogger(__name__)

INTER_BATCH_DELAY_SECONDS = 1.0

BatchStatus = Literal["ok", "degraded"]
ProgressCallback = Callable[[float], None]


@dataclass(slots=True)
class BatchOutcome:
    """Results of one batch, tagged with whether they came from the model."""

    batch_index: int
    status: BatchStatus
    results: list[TranslationResult]
    cause: str | None = None

    @property
    def degraded(self) -> bool:
        return self.status == "degraded"


class TranslationOrchestrator:
    """Batches requests, calls the model once per batch and merges the replies."""

    def __init__(
        self,
        client: ModelClient,
        *,
        governor: RateGovernor,
        usage: UsageCounter | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        inter_batch_delay: float = INTER_BATCH_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self._client = client
        self._governor = governor
        self.usage = usage or UsageCounter()
        self._batch_size = batch_size
        self._inter_batch_delay = inter_batch_delay
        self._sleep = sleep or asyncio.sleep

    @property
    def governor(self) -> RateGovernor:
        return self._governor

    def ensure_configured(self) -> None:
        if not self._client.configured:
            raise ConfigurationError("OpenAI API key not set")

    async def translate_batch(
        self,
        requests: Sequence[TranslationRequest],
        target_language: str,
        context: str = "general",
        *,
        on_progress: ProgressCallback | None = None,
    ) -> list[TranslationResult]:
        """Translate every request, one result per request in input order.

        Only a missing credential raises. Any batch that cannot be translated
        comes back as its source text.
        """
        self.ensure_configured()
        if not requests:
            return []

        logger.info(
            "Starting batch translation of %s texts to %s", len(requests), target_language
        )
        batches = partition(requests, self._batch_size)
        results: list[TranslationResult] = []

        for batch in batches:
            logger.info(
                "Processing batch %s/%s (%s items)", batch.index + 1, len(batches), len(batch)
            )
            outcome = await self._run_batch(batch, target_language, context)
            results.extend(outcome.results)

            if not outcome.degraded and on_progress is not None:
                on_progress((batch.index + 1) / len(batches))

            if batch.index < len(batches) - 1:
                await self._sleep(self._inter_batch_delay)

        logger.info(
            "Batch translation completed. Total tokens used: %s", self.usage.total_tokens
        )
        return results

    async def _run_batch(self, batch: Batch, target_language: str, context: str) -> BatchOutcome:
        try:
            async with self._governor.governed() as governor:
                completion = await self._client.complete(
                    system_prompt=prompt_codec.system_prompt(context),
                    user_prompt=prompt_codec.encode(batch, target_language, context),
                )
                governor.after_call(completion.headers)
        except (UpstreamCallError, ValueError, TypeError, KeyError) as exc:
            logger.error("Batch %s failed: %s", batch.index + 1, exc)
            return BatchOutcome(
                batch_index=batch.index,
                status="degraded",
                results=[TranslationResult.echo(request) for request in batch.requests],
                cause=str(exc),
            )

        if completion.has_usage:
            self.usage.record(
                prompt_tokens=completion.prompt_tokens,
                completion_tokens=completion.completion_tokens,
                total_tokens=completion.total_tokens,
            )
        return BatchOutcome(
            batch_index=batch.index,
            status="ok",
            results=prompt_codec.decode(completion.text, batch),
        )
