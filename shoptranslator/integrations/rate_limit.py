from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Mapping, Optional


logger = logging.getLogger(__name__)

PACING_WINDOW_SECONDS = 1.0
LOW_ALLOWANCE_THRESHOLD = 2
DEFAULT_CALL_ALLOWANCE = 40

AllowanceParser = Callable[[Mapping[str, str]], Optional[int]]


@dataclass(slots=True)
class RateState:
    """Remaining call allowance for one upstream API."""

    remaining_call_allowance: int = DEFAULT_CALL_ALLOWANCE
    last_call_timestamp: float = 0.0


def parse_call_limit_header(headers: Mapping[str, str]) -> int | None:
    """Read a ``used/total`` call limit header (store admin API)."""
    raw = _header(headers, "X-Shopify-Shop-Api-Call-Limit")
    if not raw or "/" not in raw:
        return None
    used_text, _, total_text = raw.partition("/")
    try:
        used = int(used_text.strip())
        total = int(total_text.strip())
    except ValueError:
        logger.debug("Ignoring malformed call limit header: %s", raw)
        return None
    return total - used


def parse_remaining_requests_header(headers: Mapping[str, str]) -> int | None:
    """Read the remaining request count advertised by the translation API."""
    raw = _header(headers, "x-ratelimit-remaining-requests")
    if not raw:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        logger.debug("Ignoring malformed remaining-requests header: %s", raw)
        return None


def _header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is None:
        value = headers.get(name.lower())
    return value


class RateGovernor:
    """Soft admission control that paces calls once the allowance runs low.

    Calls against one governed API go through :meth:`governed`, which holds a
    lock for the duration of the call so that two callers never interleave
    their read-then-write of :class:`RateState`.
    """

    def __init__(
        self,
        name: str,
        *,
        state: RateState | None = None,
        allowance_parser: AllowanceParser | None = None,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        self.name = name
        self.state = state or RateState()
        self._allowance_parser = allowance_parser
        self._clock = clock or time.monotonic
        self._sleep = sleep or asyncio.sleep
        self._lock = asyncio.Lock()

    async def before_call(self) -> float:
        """Pause when the allowance is nearly spent; return the delay applied."""
        delay = 0.0
        elapsed = self._clock() - self.state.last_call_timestamp
        if (
            self.state.remaining_call_allowance <= LOW_ALLOWANCE_THRESHOLD
            and elapsed < PACING_WINDOW_SECONDS
        ):
            delay = PACING_WINDOW_SECONDS - elapsed
            logger.info(
                "[%s] %s calls left; pausing %.3fs",
                self.name,
                self.state.remaining_call_allowance,
                delay,
            )
            await self._sleep(delay)
        self.state.last_call_timestamp = self._clock()
        return delay

    def after_call(self, metadata: Mapping[str, str] | None) -> None:
        """Refresh the allowance from response metadata when it is present."""
        if not metadata or self._allowance_parser is None:
            return
        remaining = self._allowance_parser(metadata)
        if remaining is None:
            return
        self.state.remaining_call_allowance = remaining

    @asynccontextmanager
    async def governed(self) -> AsyncIterator[RateGovernor]:
        async with self._lock:
            await self.before_call()
            yield self
