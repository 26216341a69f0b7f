# sellerdesk/services/store_sync.py
# -----------------------------------------------------------------------------
# Store product sync
# - ProductFeed: contract for pulling a store's product list
# - HttpProductFeed: JSON feed per store type (URL from STORE_FEED_URLS)
# - no retries: a failed pull fails the sync request
# -----------------------------------------------------------------------------
from typing import Dict, List, Mapping, Protocol

import httpx
import pydantic
from loguru import logger

from sellerdesk.core.config import settings
from sellerdesk.core.errors import DependencyError
from sellerdesk.schemas.connections import FeedProduct

MIN_API_KEY_LENGTH = 11


def validate_store_credentials(store_type: str, credentials: Mapping) -> bool:
    """Local sanity check only; marketplaces are not contacted."""
    api_key = (credentials or {}).get("api_key") or ""
    return isinstance(api_key, str) and len(api_key) >= MIN_API_KEY_LENGTH


class ProductFeed(Protocol):
    async def fetch_products(self, store_type: str, credentials: Mapping) -> List[FeedProduct]:
        ...


def parse_feed(store_type: str, data) -> List[FeedProduct]:
    """
    Accepts either a bare list of products or {"products": [...]}.
    Items that do not validate are skipped and logged.
    """
    items = data.get("products", []) if isinstance(data, dict) else data
    if not isinstance(items, list):
        raise DependencyError(f"{store_type} feed returned an unexpected payload")

    products: List[FeedProduct] = []
    for item in items:
        try:
            products.append(FeedProduct.model_validate(item))
        except pydantic.ValidationError as e:
            logger.warning(f"[sync] skipping malformed {store_type} product: {e}")
    return products


class HttpProductFeed:
    def __init__(
        self,
        urls: Dict[str, str] | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.urls = settings.STORE_FEED_URLS if urls is None else urls
        self.transport = transport
        self.timeout = httpx.Timeout(timeout or settings.STORE_FEED_TIMEOUT)
        self.limits = httpx.Limits(max_keepalive_connections=10, max_connections=20)

    async def fetch_products(self, store_type: str, credentials: Mapping) -> List[FeedProduct]:
        url = self.urls.get(store_type)
        if not url:
            raise DependencyError(f"no product feed configured for {store_type}")

        headers = {"Authorization": f"Bearer {credentials.get('api_key', '')}"}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, limits=self.limits, transport=self.transport
            ) as client:
                r = await client.get(url, headers=headers)
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPError as e:
            logger.error(f"[sync] {store_type} feed HTTPError: {e}")
            raise DependencyError(f"{store_type} product feed unavailable")
        except ValueError as e:
            logger.error(f"[sync] {store_type} feed returned invalid JSON: {e}")
            raise DependencyError(f"{store_type} product feed returned invalid data")

        return parse_feed(store_type, data)


def to_rows(products: List[FeedProduct]) -> List[dict]:
    """FeedProduct -> dict for crud.upsert_synced_products."""
    return [
        {
            "external_id": p.external_id,
            "name": p.name,
            "price": p.price,
            "stock_quantity": p.stock_quantity,
            "category": p.category,
            "product_data": p.model_dump(mode="json"),
        }
        for p in products
    ]
