from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Iterable, Protocol


logger = logging.getLogger(__name__)


class WidgetType(str, Enum):
    REVIEW = "review"
    CHAT = "chat"
    POPUP = "popup"
    SOCIAL_PROOF = "social-proof"
    ANNOUNCEMENT = "announcement"
    COUNTDOWN = "countdown"
    CURRENCY = "currency"
    SIZE_GUIDE = "size-guide"
    SEARCH = "search"
    RECOMMENDATION = "recommendation"


WIDGET_SELECTORS: Final[dict[WidgetType, tuple[str, ...]]] = {
    WidgetType.REVIEW: (
        ".reviews-widget", ".review-content", ".testimonial",
        "[data-reviews]", ".stamped-review", ".yotpo-widget",
    ),
    WidgetType.CHAT: (
        ".chat-widget", ".live-chat", ".messenger-widget",
        "[data-chat]", ".intercom-widget", ".zendesk-widget",
    ),
    WidgetType.POPUP: (
        ".popup-widget", ".modal-content", ".newsletter-popup",
        "[data-popup]", ".popup-text", ".modal-text",
    ),
    WidgetType.SOCIAL_PROOF: (
        ".social-widget", ".instagram-feed", ".twitter-widget",
        "[data-social]", ".facebook-widget", ".social-proof",
    ),
    WidgetType.ANNOUNCEMENT: (
        ".announcement-bar", ".promo-banner", ".top-banner",
        "[data-announcement]", ".promotion-text",
    ),
    WidgetType.COUNTDOWN: (
        ".countdown-widget", ".timer-widget", ".urgency-timer",
        "[data-countdown]", ".countdown-text",
    ),
    WidgetType.CURRENCY: (
        ".currency-widget", ".currency-converter", "[data-currency]", ".currency-selector",
    ),
    WidgetType.SIZE_GUIDE: (
        ".size-guide", ".sizing-chart", ".size-widget", "[data-size-guide]", ".size-info",
    ),
    WidgetType.SEARCH: (
        ".search-widget", ".search-suggestions", ".autocomplete",
        "[data-search]", ".search-results",
    ),
    WidgetType.RECOMMENDATION: (
        ".recommended-products", ".product-recommendations",
        "[data-recommendations]", ".upsell-widget", ".cross-sell",
    ),
}


@dataclass(frozen=True, slots=True)
class TextUnit:
    index: int
    text: str


@dataclass(slots=True)
class Widget:
    """A detected third-party widget and the text it renders."""

    id: str
    name: str
    type: WidgetType
    description: str = ""
    text_units: list[TextUnit] = field(default_factory=list)
    selectors: tuple[str, ...] = ()

    @property
    def text_count(self) -> int:
        return len(self.text_units)

    @property
    def primary_selector(self) -> str | None:
        selectors = self.selectors or WIDGET_SELECTORS.get(self.type, ())
        return selectors[0] if selectors else None

    @classmethod
    def from_texts(
        cls,
        *,
        id: str,
        name: str,
        type: WidgetType,
        texts: Iterable[str],
        description: str = "",
        selectors: Iterable[str] = (),
    ) -> Widget:
        return cls(
            id=id,
            name=name,
            type=type,
            description=description,
            text_units=[TextUnit(index=i, text=text) for i, text in enumerate(texts)],
            selectors=tuple(selectors),
        )


class WidgetSource(Protocol):
    async def detect(self) -> list[Widget]: ...


class CatalogWidgetSource:
    """Serves a fixed widget catalogue in place of scanning a live storefront."""

    def __init__(self, widgets: Iterable[Widget] | None = None) -> None:
        self._widgets = list(widgets) if widgets is not None else list(DEMO_WIDGETS)

    async def detect(self) -> list[Widget]:
        logger.debug("Serving %s catalogued widgets", len(self._widgets))
        return list(self._widgets)


DEMO_WIDGETS: Final[tuple[Widget, ...]] = (
    Widget.from_texts(
        id="review-widget-1",
        name="Product Reviews Widget",
        type=WidgetType.REVIEW,
        description="Customer product reviews and ratings",
        selectors=(".reviews-widget", ".review-content"),
        texts=(
            "Write a Review",
            "Customer Reviews",
            "Based on reviews",
            "Verified Purchase",
            "Was this helpful?",
            "Show more reviews",
        ),
    ),
    Widget.from_texts(
        id="announcement-bar-1",
        name="Announcement Bar",
        type=WidgetType.ANNOUNCEMENT,
        description="Top promotional banner",
        selectors=(".announcement-bar",),
        texts=(
            "Free shipping on orders over $50!",
            "Limited time offer - 20% off everything",
            "New collection available now",
        ),
    ),
    Widget.from_texts(
        id="chat-widget-1",
        name="Live Chat Support",
        type=WidgetType.CHAT,
        description="Customer support chat widget",
        selectors=(".chat-widget",),
        texts=(
            "Chat with us",
            "How can we help?",
            "Typically replies in minutes",
            "Type your message...",
            "Send message",
        ),
    ),
    Widget.from_texts(
        id="popup-widget-1",
        name="Newsletter Signup Popup",
        type=WidgetType.POPUP,
        description="Email subscription popup",
        selectors=(".newsletter-popup",),
        texts=(
            "Join our newsletter",
            "Get 10% off your first order",
            "Enter your email",
            "Subscribe",
            "Maybe later",
        ),
    ),
    Widget.from_texts(
        id="size-guide-1",
        name="Size Guide Widget",
        type=WidgetType.SIZE_GUIDE,
        description="Product sizing information",
        selectors=(".size-guide",),
        texts=("Size Guide", "Find your size", "Small", "Medium", "Large"),
    ),
)
