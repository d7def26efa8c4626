from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import openai
from openai import AsyncOpenAI

from shoptranslator.core.config import AppSettings
from shoptranslator.core.errors import ConfigurationError, UpstreamCallError


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Completion:
    """Text and accounting returned by one chat completion."""

    text: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    has_usage: bool = False
    headers: dict[str, str] = field(default_factory=dict)


class ModelClient(Protocol):
    @property
    def configured(self) -> bool: ...

    async def complete(self, *, system_prompt: str, user_prompt: str) -> Completion: ...


class TranslationModelClient:
    """Chat-completion client used for batch translation."""

    def __init__(
        self,
        settings: AppSettings,
        *,
        client_factory: Callable[[], Any] | None = None,
    ):
        self._settings = settings
        self._client: Any | None = None
        self._client_factory = client_factory

        if client_factory is None and settings.openai_api_key:
            client_kwargs: dict[str, Any] = {
                "api_key": settings.openai_api_key.get_secret_value(),
                "timeout": settings.translation_timeout_seconds,
                "max_retries": 0,
            }
            if settings.openai_base_url:
                client_kwargs["base_url"] = settings.openai_base_url
            self._client = AsyncOpenAI(**client_kwargs)

    @property
    def configured(self) -> bool:
        return self._client is not None or self._client_factory is not None

    def _resolve_client(self) -> Any:
        if self._client is None and self._client_factory is not None:
            self._client = self._client_factory()
        if self._client is None:
            raise ConfigurationError("OpenAI API key not set")
        return self._client

    async def complete(self, *, system_prompt: str, user_prompt: str) -> Completion:
        """Send one translation prompt and return the reply with usage and headers."""
        client = self._resolve_client()
        try:
            raw = await client.chat.completions.with_raw_response.create(
                model=self._settings.translation_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=self._settings.translation_max_tokens,
                temperature=self._settings.translation_temperature,
            )
            response = raw.parse()
        except openai.APIStatusError as exc:
            raise UpstreamCallError(
                f"OpenAI API Error: {self._extract_error(exc)}",
                status_code=exc.status_code,
            ) from exc
        except openai.APIError as exc:
            raise UpstreamCallError(f"OpenAI API Error: {exc}") from exc

        choices = getattr(response, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if content is None:
            raise UpstreamCallError("OpenAI API Error: response carried no message content")

        completion = Completion(text=content.strip(), headers=dict(raw.headers))
        usage = getattr(response, "usage", None)
        if usage is not None:
            completion.prompt_tokens = int(getattr(usage, "prompt_tokens", 0) or 0)
            completion.completion_tokens = int(getattr(usage, "completion_tokens", 0) or 0)
            completion.total_tokens = int(getattr(usage, "total_tokens", 0) or 0)
            completion.has_usage = True
        return completion

    def _extract_error(self, exc: openai.APIStatusError) -> str:
        body = exc.body
        if isinstance(body, dict):
            error = body.get("error", body)
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return exc.message or "Unknown error"
