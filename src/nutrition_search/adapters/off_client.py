"""Open Food Facts API client."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx

PRODUCT_FIELDS = ",".join(
    (
        "code",
        "product_name",
        "product_name_en",
        "generic_name_en",
        "brands",
        "brands_tags",
        "serving_size",
        "lc",
        "countries_tags_en",
        "categories_tags_en",
        "nutriments",
    )
)


class OpenFoodFactsClient(Protocol):
    """Interface for Open Food Facts product searches."""

    async def search_text(
        self, query: str, page_size: int = 80
    ) -> list[dict[str, object]]:
        """Free-text product search returning raw product records."""

    async def browse_brand(
        self, slug: str, page_size: int = 80
    ) -> list[dict[str, object]] | None:
        """Return the products of a brand page, or None when the page is missing."""

    async def search_brand_filtered(
        self, brand: str, query: str, page_size: int = 80
    ) -> list[dict[str, object]]:
        """Free-text search constrained server-side to a brand."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    country: str = "united-states"
    timeout: float = 15

    @classmethod
    def create(
        cls,
        base_url: str,
        *,
        user_agent: str | None = None,
        country: str = "united-states",
        timeout: float = 15,
    ) -> "HttpxOpenFoodFactsClient":
        """Create an Open Food Facts client with a managed httpx session."""
        headers = {"Accept": "application/json"}
        if user_agent:
            headers["User-Agent"] = user_agent
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(headers=headers),
            country=country,
            timeout=timeout,
        )

    async def search_text(
        self, query: str, page_size: int = 80
    ) -> list[dict[str, object]]:
        """Search products by free text, most popular first."""
        return await self._search(self._search_params(query, page_size))

    async def browse_brand(
        self, slug: str, page_size: int = 80
    ) -> list[dict[str, object]] | None:
        """Fetch the brand facet page for a brand slug."""
        url = f"{self.base_url}/brand/{quote(slug)}.json"
        response = await self.http_client.get(
            url,
            params={"page_size": page_size, "fields": PRODUCT_FIELDS},
            timeout=self.timeout,
        )
        if response.is_error:
            return None
        return _products(response.json())

    async def search_brand_filtered(
        self, brand: str, query: str, page_size: int = 80
    ) -> list[dict[str, object]]:
        """Search products by free text among products of one brand."""
        params = self._search_params(query, page_size)
        params.update(
            {"tagtype_0": "brands", "tag_contains_0": "contains", "tag_0": brand}
        )
        return await self._search(params)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    def _search_params(self, query: str, page_size: int) -> dict[str, object]:
        return {
            "action": "process",
            "json": "1",
            "search_simple": "1",
            "page_size": page_size,
            "search_terms": query,
            "lc": "en",
            "lang": "en",
            "countries_tags_en": self.country,
            "sort_by": "popularity_key",
            "fields": PRODUCT_FIELDS,
        }

    async def _search(self, params: dict[str, object]) -> list[dict[str, object]]:
        response = await self.http_client.get(
            f"{self.base_url}/cgi/search.pl", params=params, timeout=self.timeout
        )
        response.raise_for_status()
        return _products(response.json())


def _products(payload: object) -> list[dict[str, object]]:
    if not isinstance(payload, dict):
        return []
    products = payload.get("products")
    if not isinstance(products, list):
        return []
    return [product for product in products if isinstance(product, dict)]
