from __future__ import annotations


class TranslatorError(Exception):
    """Base class for errors surfaced by translation jobs."""


class ConfigurationError(TranslatorError):
    """A credential or connection the operation depends on is missing."""


class ValidationError(TranslatorError):
    """The caller selected nothing to translate."""


class UpstreamCallError(TranslatorError):
    """The content store or translation endpoint rejected or dropped a call."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
