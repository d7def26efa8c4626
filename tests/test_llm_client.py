from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest

from shoptranslator.core.config import AppSettings
from shoptranslator.core.errors import ConfigurationError, UpstreamCallError
from shoptranslator.integrations.llm import TranslationModelClient


class StubRawResponse:
    def __init__(
        self,
        completion: object,
        headers: dict[str, str],
        parse_error: Exception | None = None,
    ) -> None:
        self._completion = completion
        self._parse_error = parse_error
        self.headers = headers

    def parse(self) -> object:
        if self._parse_error is not None:
            raise self._parse_error
        return self._completion


class StubCompletions:
    """Mimics ``chat.completions.with_raw_response`` of the OpenAI SDK."""

    def __init__(
        self,
        *,
        completion: object = None,
        error: Exception | None = None,
        parse_error: Exception | None = None,
    ) -> None:
        self.with_raw_response = self
        self.calls: list[dict[str, object]] = []
        self._completion = completion
        self._error = error
        self._parse_error = parse_error

    async def create(self, **kwargs: object) -> StubRawResponse:
        self.calls.append(kwargs)
        if self._error is not None:
            raise self._error
        return StubRawResponse(
            self._completion,
            {"x-ratelimit-remaining-requests": "99"},
            parse_error=self._parse_error,
        )


def _settings() -> AppSettings:
    return AppSettings(
        OPENAI_API_KEY=None,
        TRANSLATION_MODEL="gpt-3.5-turbo",
        TRANSLATION_MAX_TOKENS=3000,
        TRANSLATION_TEMPERATURE=0.3,
    )


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))] if content is not None else [],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=8, total_tokens=20),
    )


def _client_with(completions: StubCompletions) -> TranslationModelClient:
    stub = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return TranslationModelClient(_settings(), client_factory=lambda: stub)


@pytest.mark.asyncio
async def test_complete_sends_system_and_user_messages() -> None:
    completions = StubCompletions(completion=_completion("  Hola|||Adiós  "))
    client = _client_with(completions)

    result = await client.complete(system_prompt="be precise", user_prompt="1. Hello\n2. Bye")

    call = completions.calls[0]
    assert call["model"] == "gpt-3.5-turbo"
    assert call["max_tokens"] == 3000
    assert call["temperature"] == 0.3
    assert call["messages"] == [
        {"role": "system", "content": "be precise"},
        {"role": "user", "content": "1. Hello\n2. Bye"},
    ]
    assert result.text == "Hola|||Adiós"
    assert result.total_tokens == 20
    assert result.prompt_tokens == 12
    assert result.completion_tokens == 8
    assert result.has_usage
    assert result.headers["x-ratelimit-remaining-requests"] == "99"


@pytest.mark.asyncio
async def test_complete_rejects_reply_without_content() -> None:
    client = _client_with(StubCompletions(completion=_completion(None)))

    with pytest.raises(UpstreamCallError):
        await client.complete(system_prompt="s", user_prompt="u")


@pytest.mark.asyncio
async def test_complete_wraps_status_errors_with_upstream_message() -> None:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    error = openai.RateLimitError(
        "Rate limit reached",
        response=httpx.Response(429, request=request),
        body={"message": "Rate limit reached for requests"},
    )
    client = _client_with(StubCompletions(error=error))

    with pytest.raises(UpstreamCallError) as excinfo:
        await client.complete(system_prompt="s", user_prompt="u")

    assert excinfo.value.status_code == 429
    assert "Rate limit reached for requests" in str(excinfo.value)


@pytest.mark.asyncio
async def test_complete_wraps_connection_errors() -> None:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    client = _client_with(StubCompletions(error=openai.APIConnectionError(request=request)))

    with pytest.raises(UpstreamCallError):
        await client.complete(system_prompt="s", user_prompt="u")

@pytest.mark.asyncio
async def test_complete_wraps_unparseable_replies() -> None:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    error = openai.APIResponseValidationError(
        response=httpx.Response(200, request=request),
        body={"unexpected": True},
    )
    client = _client_with(StubCompletions(parse_error=error))

    with pytest.raises(UpstreamCallError) as excinfo:
        await client.complete(system_prompt="s", user_prompt="u")

    assert excinfo.value.__cause__ is error


@pytest.mark.asyncio
async def test_unconfigured_client_raises_configuration_error() -> None:
    client = TranslationModelClient(_settings())

    assert client.configured is False
    with pytest.raises(ConfigurationError):
        await client.complete(system_prompt="s", user_prompt="u")


def test_client_is_configured_with_api_key() -> None:
    settings = AppSettings(OPENAI_API_KEY="sk-test")

    assert TranslationModelClient(settings).configured is True
