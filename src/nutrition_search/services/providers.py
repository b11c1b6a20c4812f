"""Provider adapters mapping each nutrition source to canonical foods."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from nutrition_search.adapters.fdc_client import FdcClient
from nutrition_search.adapters.off_client import OpenFoodFactsClient
from nutrition_search.adapters.spoonacular_client import SpoonacularClient
from nutrition_search.domain.foods import Food
from nutrition_search.services.cancellation import (
    CancellationToken,
    SearchCancelledError,
)
from nutrition_search.services.normalizers import (
    map_fdc_food,
    map_spoonacular_detail,
)
from nutrition_search.services.ranking import rank_and_normalize
from nutrition_search.services.text import simplify

_logger = logging.getLogger(__name__)

SPOONACULAR_HYDRATE_LIMIT = 15
SPOONACULAR_RESULT_LIMIT = 25


class FoodProvider(Protocol):
    """A nutrition source searchable by free text."""

    async def search(self, query: str, token: CancellationToken) -> list[Food]:
        """Return normalized foods for a query; raise on failure."""


class PackagedFoodProvider(FoodProvider, Protocol):
    """A packaged-foods source that can also be browsed by brand."""

    async def search_brand_facet(
        self, brand: str, token: CancellationToken
    ) -> list[dict[str, object]]:
        """Return raw products listed under a brand."""

    async def search_brand_filtered(
        self, brand: str, item_query: str, token: CancellationToken
    ) -> list[dict[str, object]]:
        """Return raw products of a brand matching free text."""


def brand_slugs(brand: str) -> list[str]:
    """Candidate brand page slugs, e.g. 'tropical-smoothie-cafe' and 'tropical-smoothie'."""
    base = simplify(brand).replace(" ", "-")
    if not base:
        return []
    slugs = [base]
    if base.endswith("-cafe"):
        slugs.append(base.removesuffix("-cafe"))
    return slugs


@dataclass
class OpenFoodFactsProvider(PackagedFoodProvider):
    """Packaged foods from Open Food Facts."""

    client: OpenFoodFactsClient

    async def search(self, query: str, token: CancellationToken) -> list[Food]:
        """Free-text search, ranked against the query and normalized."""
        products = await token.run(self.client.search_text(query))
        return rank_and_normalize(query, products)

    async def search_brand_facet(
        self, brand: str, token: CancellationToken
    ) -> list[dict[str, object]]:
        """Collect products from every brand page slug that exists."""
        products: list[dict[str, object]] = []
        for slug in brand_slugs(brand):
            page = await token.run(self.client.browse_brand(slug))
            if page is None:
                _logger.debug("Open Food Facts brand page missing: slug=%s", slug)
                continue
            products.extend(page)
        return products

    async def search_brand_filtered(
        self, brand: str, item_query: str, token: CancellationToken
    ) -> list[dict[str, object]]:
        """Server-side brand-constrained text search."""
        return await token.run(self.client.search_brand_filtered(brand, item_query))


@dataclass
class FdcProvider(FoodProvider):
    """Generic and branded foods from USDA FoodData Central."""

    client: FdcClient | None

    async def search(self, query: str, token: CancellationToken) -> list[Food]:
        """Search FDC and normalize hits; no client means no results."""
        if self.client is None:
            return []
        payload = await token.run(self.client.search_foods(query))
        hits = payload.get("foods")
        if not isinstance(hits, list):
            return []
        foods = (map_fdc_food(hit) for hit in hits if isinstance(hit, dict))
        return [food for food in foods if food is not None]


@dataclass
class SpoonacularProvider(FoodProvider):
    """Restaurant menu items and grocery products from Spoonacular."""

    client: SpoonacularClient | None
    hydrate_limit: int = SPOONACULAR_HYDRATE_LIMIT
    result_limit: int = SPOONACULAR_RESULT_LIMIT

    async def search(self, query: str, token: CancellationToken) -> list[Food]:
        """Search menu items and products, then hydrate the top hits."""
        cleaned = query.strip()
        if not cleaned or self.client is None:
            return []

        menu_payload, product_payload = await asyncio.gather(
            token.run(self.client.search_menu_items(cleaned)),
            token.run(self.client.search_products(cleaned)),
            return_exceptions=True,
        )
        menu_ids = _hit_ids(
            _payload_or_empty(menu_payload, "menu item search"), "menuItems"
        )[: self.hydrate_limit]
        product_ids = _hit_ids(
            _payload_or_empty(product_payload, "product search"), "products"
        )[: self.hydrate_limit]

        details = await asyncio.gather(
            *(token.run(self.client.get_menu_item(item_id)) for item_id in menu_ids),
            *(token.run(self.client.get_product(item_id)) for item_id in product_ids),
            return_exceptions=True,
        )

        foods: list[Food] = []
        for index, result in enumerate(details):
            detail = _payload_or_empty(result, "detail fetch")
            if not detail:
                continue
            is_menu_item = index < len(menu_ids)
            nutrition = detail.get("nutrition")
            food = map_spoonacular_detail(
                title=detail.get("title"),
                brand=detail.get("restaurantChain" if is_menu_item else "brand"),
                servings=detail.get("servings"),
                nutrients=(
                    nutrition.get("nutrients") if isinstance(nutrition, dict) else None
                ),
            )
            if food is not None:
                foods.append(food)
        return _unique_by_brand_and_name(foods)[: self.result_limit]


def _payload_or_empty(
    result: dict[str, object] | BaseException, call: str
) -> dict[str, object]:
    """Unwrap a gathered Spoonacular result; a failed call counts as empty."""
    if isinstance(result, (SearchCancelledError, asyncio.CancelledError)):
        raise result
    if isinstance(result, BaseException):
        _logger.debug("Spoonacular %s failed: %s", call, result)
        return {}
    return result


def _hit_ids(payload: dict[str, object], key: str) -> list[int]:
    hits = payload.get(key)
    if not isinstance(hits, list):
        return []
    return [
        hit["id"]
        for hit in hits
        if isinstance(hit, dict) and isinstance(hit.get("id"), int)
    ]


def _unique_by_brand_and_name(foods: list[Food]) -> list[Food]:
    seen: set[str] = set()
    unique: list[Food] = []
    for food in foods:
        key = f"{(food.brand or '').strip().lower()}|{food.name.strip().lower()}"
        if key in seen:
            continue
        seen.add(key)
        unique.append(food)
    return unique
