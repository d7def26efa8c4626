from __future__ import annotations

import logging
from dataclasses import dataclass


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UsageCounter:
    """Token consumption across every successful translation call."""

    total_tokens: int = 0
    prompt_tokens: int = 0
    completion_tokens: int = 0
    request_count: int = 0

    def record(self, *, prompt_tokens: int, completion_tokens: int, total_tokens: int) -> None:
        self.prompt_tokens += max(prompt_tokens, 0)
        self.completion_tokens += max(completion_tokens, 0)
        self.total_tokens += max(total_tokens, 0)
        self.request_count += 1
        logger.info(
            "Request %s: used %s tokens (%s prompt + %s completion)",
            self.request_count,
            total_tokens,
            prompt_tokens,
            completion_tokens,
        )

    @property
    def average_tokens_per_request(self) -> int:
        if self.request_count == 0:
            return 0
        return round(self.total_tokens / self.request_count)

    def snapshot(self) -> dict[str, int]:
        return {
            "total_tokens": self.total_tokens,
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "request_count": self.request_count,
            "average_tokens_per_request": self.average_tokens_per_request,
        }

    def reset(self) -> None:
        self.total_tokens = 0
        self.prompt_tokens = 0
        self.completion_tokens = 0
        self.request_count = 0
        logger.info("Translation statistics reset")
