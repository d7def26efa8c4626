from __future__ import annotations

import asyncio

import pytest

from shoptranslator.integrations.rate_limit import (
    RateGovernor,
    RateState,
    parse_call_limit_header,
    parse_remaining_requests_header,
)


class FakeClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_before_call_pauses_for_rest_of_window_when_allowance_low() -> None:
    clock = FakeClock(10.3)
    sleep = RecordingSleep()
    governor = RateGovernor(
        "store",
        state=RateState(remaining_call_allowance=2, last_call_timestamp=10.0),
        clock=clock,
        sleep=sleep,
    )

    delay = await governor.before_call()

    assert delay == pytest.approx(0.7)
    assert sleep.delays == [pytest.approx(0.7)]
    assert governor.state.last_call_timestamp == 10.3


@pytest.mark.asyncio
async def test_before_call_does_not_pause_with_healthy_allowance() -> None:
    sleep = RecordingSleep()
    governor = RateGovernor(
        "store",
        state=RateState(remaining_call_allowance=5, last_call_timestamp=10.0),
        clock=FakeClock(10.1),
        sleep=sleep,
    )

    assert await governor.before_call() == 0.0
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_before_call_does_not_pause_once_window_elapsed() -> None:
    sleep = RecordingSleep()
    governor = RateGovernor(
        "store",
        state=RateState(remaining_call_allowance=1, last_call_timestamp=10.0),
        clock=FakeClock(11.5),
        sleep=sleep,
    )

    await governor.before_call()

    assert sleep.delays == []


def test_after_call_reads_call_limit_header() -> None:
    governor = RateGovernor("store", allowance_parser=parse_call_limit_header)

    governor.after_call({"X-Shopify-Shop-Api-Call-Limit": "38/40"})

    assert governor.state.remaining_call_allowance == 2


def test_after_call_keeps_state_without_metadata() -> None:
    governor = RateGovernor(
        "store",
        state=RateState(remaining_call_allowance=17),
        allowance_parser=parse_call_limit_header,
    )

    governor.after_call(None)
    governor.after_call({})
    governor.after_call({"X-Shopify-Shop-Api-Call-Limit": "garbage"})
    governor.after_call({"X-Shopify-Shop-Api-Call-Limit": "a/b"})

    assert governor.state.remaining_call_allowance == 17


def test_parse_remaining_requests_header() -> None:
    assert parse_remaining_requests_header({"x-ratelimit-remaining-requests": "59"}) == 59
    assert parse_remaining_requests_header({"x-ratelimit-remaining-requests": "n/a"}) is None
    assert parse_remaining_requests_header({}) is None


@pytest.mark.asyncio
async def test_governed_calls_never_overlap() -> None:
    governor = RateGovernor("translation", sleep=RecordingSleep())
    events: list[str] = []

    async def call(name: str) -> None:
        async with governor.governed():
            events.append(f"{name}-start")
            await asyncio.sleep(0)
            events.append(f"{name}-end")

    await asyncio.gather(call("a"), call("b"))

    assert events == ["a-start", "a-end", "b-start", "b-end"]
