"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fdc_api_key: str | None = None
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    fdc_data_types: str = "Branded,Foundation,SR Legacy"
    spoonacular_api_key: str | None = None
    spoonacular_base_url: str = "https://api.spoonacular.com"
    off_base_url: str = "https://world.openfoodfacts.org"
    off_country: str = "united-states"
    user_agent: str = "NutritionSearch/1.0 (food search)"
    provider_timeout_seconds: float = 15
    search_debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_data_types(raw: str | None) -> tuple[str, ...]:
    """Parse the comma-separated FDC data types from env."""
    if raw is None:
        return ()
    types: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value and value not in types:
            types.append(value)
    return tuple(types)
