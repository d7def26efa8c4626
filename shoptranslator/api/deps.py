from shoptranslator.core.config import get_settings
from shoptranslator.integrations.llm import TranslationModelClient
from shoptranslator.integrations.rate_limit import (
    RateGovernor,
    parse_call_limit_header,
    parse_remaining_requests_header,
)
from shoptranslator.integrations.store import StoreClient
from shoptranslator.services.store_translation import StoreTranslationService
from shoptranslator.services.translation import TranslationOrchestrator
from shoptranslator.services.usage import UsageCounter
from shoptranslator.services.widgets import WidgetTranslationService

_usage: UsageCounter | None = None
_orchestrator: TranslationOrchestrator | None = None
_store_client: StoreClient | None = None
_widget_service: WidgetTranslationService | None = None


def get_usage_counter() -> UsageCounter:
    """Provide the usage counter shared by every translation job."""
    global _usage
    if _usage is None:
        _usage = UsageCounter()
    return _usage


def get_orchestrator() -> TranslationOrchestrator:
    """Provide TranslationOrchestrator instance."""
    settings = get_settings()
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = TranslationOrchestrator(
            TranslationModelClient(settings),
            governor=RateGovernor(
                "translation", allowance_parser=parse_remaining_requests_header
            ),
            usage=get_usage_counter(),
        )
    return _orchestrator


def get_store_client() -> StoreClient:
    """Provide StoreClient instance."""
    settings = get_settings()
    global _store_client
    if _store_client is None:
        _store_client = StoreClient(
            settings,
            governor=RateGovernor("store", allowance_parser=parse_call_limit_header),
        )
    return _store_client


def get_store_translation_service() -> StoreTranslationService:
    """Provide StoreTranslationService instance."""
    return StoreTranslationService(get_store_client(), get_orchestrator())


def get_widget_service() -> WidgetTranslationService:
    """Provide WidgetTranslationService instance."""
    global _widget_service
    if _widget_service is None:
        _widget_service = WidgetTranslationService(get_orchestrator())
    return _widget_service
