from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Final

import httpx

from shoptranslator.core.config import AppSettings
from shoptranslator.core.errors import ConfigurationError, UpstreamCallError
from shoptranslator.integrations.rate_limit import RateGovernor, parse_call_limit_header


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoreResource:
    """Endpoint naming for one kind of store record."""

    path: str
    collection_key: str
    record_key: str
    summary_fields: str


RESOURCES: Final[dict[str, StoreResource]] = {
    "product": StoreResource(
        path="products",
        collection_key="products",
        record_key="product",
        summary_fields="id,title,handle,status,updated_at",
    ),
    "collection": StoreResource(
        path="custom_collections",
        collection_key="custom_collections",
        record_key="custom_collection",
        summary_fields="id,title,handle,updated_at",
    ),
    "page": StoreResource(
        path="pages",
        collection_key="pages",
        record_key="page",
        summary_fields="id,title,handle,updated_at",
    ),
}

def next_page_info(response: httpx.Response) -> str | None:
    """Return the ``page_info`` cursor of the response's ``rel="next"`` link, if any."""
    url = response.links.get("next", {}).get("url")
    if not url:
        return None
    return httpx.URL(url).params.get("page_info")


def normalize_store_domain(store_url: str) -> str:
    domain = re.sub(r"^https?://", "", store_url.strip())
    return domain.rstrip("/")


class StoreClient:
    """Admin REST client for the store's products, collections and pages."""

    def __init__(
        self,
        settings: AppSettings,
        *,
        governor: RateGovernor | None = None,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ):
        self._settings = settings
        self._governor = governor or RateGovernor(
            "store", allowance_parser=parse_call_limit_header
        )
        self._client_factory = client_factory or (
            lambda: httpx.AsyncClient(timeout=httpx.Timeout(settings.store_timeout_seconds))
        )
        self._domain = (
            normalize_store_domain(settings.store_domain) if settings.store_domain else None
        )
        self._access_token = (
            settings.store_access_token.get_secret_value()
            if settings.store_access_token
            else None
        )
        self.is_connected = False
        self.shop: dict[str, Any] | None = None

    @property
    def governor(self) -> RateGovernor:
        return self._governor

    @property
    def domain(self) -> str | None:
        return self._domain

    async def connect(
        self,
        store_url: str | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Verify the credentials with a minimal call and remember the shop."""
        if store_url:
            self._domain = normalize_store_domain(store_url)
        if access_token:
            self._access_token = access_token
        if not self._domain or not self._access_token:
            raise ConfigurationError("Store domain and access token must be configured")

        try:
            response = await self._request("GET", "shop.json")
        except UpstreamCallError as exc:
            logger.error("Failed to connect: %s", exc)
            raise

        shop = self._json(response).get("shop")
        if not shop:
            raise UpstreamCallError("Store did not return shop details")
        self.is_connected = True
        self.shop = shop
        logger.info("Connected to store: %s", shop.get("name"))
        return shop

    async def ensure_connected(self) -> None:
        if not self.is_connected:
            await self.connect()

    async def list_records(self, record_type: str, *, limit: int | None = None) -> list[dict[str, Any]]:
        """Fetch summary rows for every record of the type, following page cursors."""
        resource = self._resource(record_type)
        logger.info("Fetching %s...", resource.collection_key)
        records: list[dict[str, Any]] = []
        page_info: str | None = None

        while True:
            params: dict[str, str] = {
                "limit": str(limit or self._settings.store_page_limit),
                "fields": resource.summary_fields,
            }
            if page_info:
                params["page_info"] = page_info
            response = await self._request("GET", f"{resource.path}.json", params=params)
            records.extend(self._json(response).get(resource.collection_key, []))

            page_info = next_page_info(response)
            if not page_info:
                break

        logger.info("Fetched %s %s", len(records), resource.collection_key)
        return records

    async def fetch_record(self, record_type: str, record_id: str | int) -> dict[str, Any]:
        resource = self._resource(record_type)
        response = await self._request("GET", f"{resource.path}/{record_id}.json")
        record = self._json(response).get(resource.record_key)
        if record is None:
            raise UpstreamCallError(f"{record_type} {record_id} not found in response")
        return record

    async def update_record(
        self,
        record_type: str,
        record_id: str | int,
        record: dict[str, Any],
    ) -> dict[str, Any]:
        """Replace the stored record with ``record``."""
        resource = self._resource(record_type)
        response = await self._request(
            "PUT",
            f"{resource.path}/{record_id}.json",
            json={resource.record_key: record},
        )
        return self._json(response).get(resource.record_key) or {}

    def _resource(self, record_type: str) -> StoreResource:
        try:
            return RESOURCES[record_type]
        except KeyError as exc:
            raise ValueError(f"Unsupported record type: {record_type}") from exc

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        if not self.is_connected and endpoint != "shop.json":
            raise ConfigurationError("Not connected to store")

        url = f"https://{self._domain}/admin/api/{self._settings.store_api_version}/{endpoint}"
        headers = {
            "X-Shopify-Access-Token": self._access_token or "",
            "Content-Type": "application/json",
        }

        async with self._governor.governed() as governor:
            try:
                async with self._client_factory() as client:
                    response = await client.request(
                        method, url, params=params, json=json, headers=headers
                    )
            except httpx.HTTPError as exc:
                logger.error("API Request failed: %s", exc)
                raise UpstreamCallError(f"Store request failed: {exc}") from exc
            governor.after_call(response.headers)

        if response.status_code < 200 or response.status_code >= 300:
            message = self._extract_error(response)
            logger.error("API Request failed: %s", message)
            raise UpstreamCallError(message, status_code=response.status_code)
        return response

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Store returned a non-JSON body for %s", response.request.url)
            raise UpstreamCallError(
                f"Store returned an unreadable response (status {response.status_code})",
                status_code=response.status_code,
            ) from exc
        if not isinstance(payload, dict):
            raise UpstreamCallError(
                f"Store returned an unexpected payload (status {response.status_code})",
                status_code=response.status_code,
            )
        return payload

    def _extract_error(self, response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None

        detail: Any = None
        if isinstance(payload, dict):
            detail = payload.get("errors") or payload.get("error")
        return f"API Error {response.status_code}: {detail or 'Unknown error'}"
