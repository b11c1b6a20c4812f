"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_search.adapters.fdc_client import DEFAULT_DATA_TYPES, HttpxFdcClient
from nutrition_search.adapters.off_client import HttpxOpenFoodFactsClient
from nutrition_search.adapters.spoonacular_client import HttpxSpoonacularClient
from nutrition_search.config import Settings, parse_data_types
from nutrition_search.services.providers import (
    FdcProvider,
    OpenFoodFactsProvider,
    SpoonacularProvider,
)
from nutrition_search.services.search import SearchService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    search_service: SearchService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timeout = resolved_settings.provider_timeout_seconds

    off_client = HttpxOpenFoodFactsClient.create(
        resolved_settings.off_base_url,
        user_agent=resolved_settings.user_agent,
        country=resolved_settings.off_country,
        timeout=timeout,
    )
    fdc_client = None
    if resolved_settings.fdc_api_key:
        fdc_client = HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
            data_types=parse_data_types(resolved_settings.fdc_data_types)
            or DEFAULT_DATA_TYPES,
            user_agent=resolved_settings.user_agent,
            timeout=timeout,
        )
    else:
        _logger.warning("FDC_API_KEY is not set; government search is disabled")
    spoonacular_client = None
    if resolved_settings.spoonacular_api_key:
        spoonacular_client = HttpxSpoonacularClient.create(
            api_key=resolved_settings.spoonacular_api_key,
            base_url=resolved_settings.spoonacular_base_url,
            timeout=timeout,
        )
    else:
        _logger.warning(
            "SPOONACULAR_API_KEY is not set; recipe and menu search is disabled"
        )

    search_service = SearchService(
        packaged=OpenFoodFactsProvider(off_client),
        government=FdcProvider(fdc_client),
        recipes=SpoonacularProvider(spoonacular_client),
        debug=resolved_settings.search_debug,
    )

    async def close_resources() -> None:
        await off_client.close()
        if fdc_client is not None:
            await fdc_client.close()
        if spoonacular_client is not None:
            await spoonacular_client.close()

    return AppContainer(
        settings=resolved_settings,
        search_service=search_service,
        close_resources=close_resources,
    )
