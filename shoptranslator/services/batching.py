from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence

from shoptranslator.services.fragments import TranslationRequest


logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10


@dataclass(frozen=True, slots=True)
class Batch:
    """Consecutive slice of requests sent to the model in a single call."""

    index: int
    requests: tuple[TranslationRequest, ...]

    def __len__(self) -> int:
        return len(self.requests)


def partition(
    requests: Sequence[TranslationRequest],
    size: int = DEFAULT_BATCH_SIZE,
) -> list[Batch]:
    """Split requests into ordered batches of at most ``size`` items.

    Each request is renumbered with its position inside its batch so the
    decoded response can be zipped back by ordinal.
    """
    if size < 1:
        logger.warning("Invalid batch size %s; using %s", size, DEFAULT_BATCH_SIZE)
        size = DEFAULT_BATCH_SIZE

    batches: list[Batch] = []
    for start in range(0, len(requests), size):
        chunk = requests[start : start + size]
        batches.append(
            Batch(
                index=len(batches),
                requests=tuple(
                    replace(request, ordinal=ordinal) for ordinal, request in enumerate(chunk)
                ),
            )
        )
    return batches
