"""USDA FoodData Central API client."""

from dataclasses import dataclass, field
from typing import Protocol

import httpx

DEFAULT_DATA_TYPES = ("Branded", "Foundation", "SR Legacy")


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(self, query: str, page_size: int = 60) -> dict[str, object]:
        """Search foods by query and return raw API data."""


@dataclass
class HttpxFdcClient(FdcClient):
    """HTTPX-backed FDC client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    data_types: tuple[str, ...] = field(default=DEFAULT_DATA_TYPES)
    timeout: float = 15

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str,
        *,
        data_types: tuple[str, ...] = DEFAULT_DATA_TYPES,
        user_agent: str | None = None,
        timeout: float = 15,
    ) -> "HttpxFdcClient":
        """Create an FDC client with a managed httpx session."""
        headers = {"User-Agent": user_agent} if user_agent else None
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(headers=headers),
            data_types=data_types,
            timeout=timeout,
        )

    async def search_foods(self, query: str, page_size: int = 60) -> dict[str, object]:
        """Search foods by query."""
        url = f"{self.base_url}/foods/search"
        response = await self.http_client.get(
            url,
            params={
                "api_key": self.api_key,
                "query": query,
                "pageSize": page_size,
                "dataType": ",".join(self.data_types),
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
