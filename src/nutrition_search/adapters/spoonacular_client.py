"""Spoonacular food API client (restaurant menu items and grocery products)."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class SpoonacularClient(Protocol):
    """Interface for Spoonacular food searches."""

    async def search_menu_items(self, query: str, number: int = 30) -> dict[str, object]:
        """Search restaurant menu items by query."""

    async def get_menu_item(self, item_id: int) -> dict[str, object]:
        """Fetch menu item details including nutrition."""

    async def search_products(self, query: str, number: int = 30) -> dict[str, object]:
        """Search grocery products by query."""

    async def get_product(self, product_id: int) -> dict[str, object]:
        """Fetch grocery product details including nutrition."""


@dataclass
class HttpxSpoonacularClient(SpoonacularClient):
    """HTTPX-backed Spoonacular client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, api_key: str, base_url: str, *, timeout: float = 15
    ) -> "HttpxSpoonacularClient":
        """Create a Spoonacular client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def search_menu_items(self, query: str, number: int = 30) -> dict[str, object]:
        """Search restaurant menu items."""
        return await self._get("/food/menuItems/search", query=query, number=number)

    async def get_menu_item(self, item_id: int) -> dict[str, object]:
        """Fetch a menu item by id."""
        return await self._get(f"/food/menuItems/{item_id}")

    async def search_products(self, query: str, number: int = 30) -> dict[str, object]:
        """Search grocery products."""
        return await self._get("/food/products/search", query=query, number=number)

    async def get_product(self, product_id: int) -> dict[str, object]:
        """Fetch a grocery product by id."""
        return await self._get(f"/food/products/{product_id}")

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get(self, path: str, **params: object) -> dict[str, object]:
        response = await self.http_client.get(
            f"{self.base_url}{path}",
            params={"apiKey": self.api_key, **params},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()
