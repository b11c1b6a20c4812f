"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from nutrition_search.config import Settings
from nutrition_search.containers import AppContainer
from nutrition_search.domain.foods import Food
from nutrition_search.services.cancellation import CancellationToken
from nutrition_search.services.providers import FoodProvider, PackagedFoodProvider
from nutrition_search.services.ranking import rank_and_normalize
from nutrition_search.services.search import SearchService


def off_product(  # noqa: PLR0913
    name: str,
    *,
    code: str | None = None,
    brands: str | None = None,
    kcal: float | None = 200,
    serving_size: str | None = "1 serving (50 g)",
    protein: float | None = 5,
    generic_name: str | None = None,
) -> dict[str, object]:
    """Build an Open Food Facts product record."""
    nutriments: dict[str, object] = {}
    if kcal is not None:
        nutriments["energy-kcal_serving"] = kcal
    if protein is not None:
        nutriments["proteins_serving"] = protein
    product: dict[str, object] = {"product_name": name, "nutriments": nutriments}
    if code is not None:
        product["code"] = code
    if brands is not None:
        product["brands"] = brands
    if serving_size is not None:
        product["serving_size"] = serving_size
    if generic_name is not None:
        product["generic_name_en"] = generic_name
    return product


def make_food(  # noqa: PLR0913
    name: str,
    *,
    brand: str | None = None,
    barcode: str | None = None,
    source: str = "fdc",
    serving_size: str | None = None,
    calories: int | None = 100,
    protein: float | None = None,
) -> Food:
    return Food(
        name=name,
        brand=brand,
        barcode=barcode,
        source=source,
        serving_size=serving_size,
        calories=calories,
        protein=protein,
    )


@dataclass
class FakePackagedProvider(PackagedFoodProvider):
    """Packaged-foods provider serving canned raw products."""

    text_results: dict[str, list[dict[str, object]]] = field(default_factory=dict)
    facet_results: list[dict[str, object]] = field(default_factory=list)
    filtered_results: list[dict[str, object]] = field(default_factory=list)
    failing_queries: set[str] = field(default_factory=set)
    calls: list[tuple[str, str]] = field(default_factory=list)

    async def search(self, query: str, token: CancellationToken) -> list[Food]:
        self.calls.append(("search", query))
        if query in self.failing_queries:
            raise RuntimeError("packaged provider unavailable")
        return rank_and_normalize(query, self.text_results.get(query, []))

    async def search_brand_facet(
        self, brand: str, token: CancellationToken
    ) -> list[dict[str, object]]:
        self.calls.append(("facet", brand))
        return list(self.facet_results)

    async def search_brand_filtered(
        self, brand: str, item_query: str, token: CancellationToken
    ) -> list[dict[str, object]]:
        self.calls.append(("filtered", f"{brand}|{item_query}"))
        return list(self.filtered_results)


@dataclass
class FakeFoodProvider(FoodProvider):
    """Provider returning canned foods per query, or a default list."""

    results: dict[str, list[Food]] = field(default_factory=dict)
    default: list[Food] = field(default_factory=list)
    failing_queries: set[str] = field(default_factory=set)
    fail_always: bool = False
    calls: list[str] = field(default_factory=list)

    async def search(self, query: str, token: CancellationToken) -> list[Food]:
        self.calls.append(query)
        if self.fail_always or query in self.failing_queries:
            raise RuntimeError("provider unavailable")
        return list(self.results.get(query, self.default))


@dataclass
class HangingProvider(FoodProvider):
    """Provider that never answers until cancelled."""

    started: asyncio.Event = field(default_factory=asyncio.Event)
    finished: bool = False

    async def search(self, query: str, token: CancellationToken) -> list[Food]:
        self.started.set()
        await asyncio.sleep(3600)
        self.finished = True
        return []


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fdc_api_key="fdc-key",
        spoonacular_api_key="spoon-key",
    )


@pytest.fixture
def packaged() -> FakePackagedProvider:
    return FakePackagedProvider()


@pytest.fixture
def government() -> FakeFoodProvider:
    return FakeFoodProvider()


@pytest.fixture
def recipes() -> FakeFoodProvider:
    return FakeFoodProvider()


@pytest.fixture
def search_service(
    packaged: FakePackagedProvider,
    government: FakeFoodProvider,
    recipes: FakeFoodProvider,
) -> SearchService:
    return SearchService(packaged=packaged, government=government, recipes=recipes)


@pytest.fixture
def container(settings: Settings, search_service: SearchService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        search_service=search_service,
        close_resources=close_resources,
    )
