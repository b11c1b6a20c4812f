"""Tests for container wiring."""

import asyncio

from nutrition_search.config import Settings
from nutrition_search.containers import build_container
from nutrition_search.services.providers import FdcProvider, SpoonacularProvider


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.search_service is not None
    assert isinstance(container.search_service.government, FdcProvider)
    assert container.search_service.government.client is not None
    asyncio.run(container.close_resources())


def test_build_container_without_keys_disables_providers() -> None:
    container = build_container(Settings(fdc_api_key=None, spoonacular_api_key=None))

    government = container.search_service.government
    recipes = container.search_service.recipes
    assert isinstance(government, FdcProvider)
    assert isinstance(recipes, SpoonacularProvider)
    assert government.client is None
    assert recipes.client is None
    asyncio.run(container.close_resources())
