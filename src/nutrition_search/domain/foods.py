"""Food search domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Food:
    """Canonical food item produced by every provider."""

    name: str
    source: str
    brand: str | None = None
    barcode: str | None = None
    serving_size: str | None = None
    calories: int | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None


@dataclass(frozen=True)
class BrandAndItem:
    """A query split into a recognized brand and the remaining item text."""

    brand: str
    item: str


@dataclass(frozen=True)
class FallbackQueries:
    """Ordered alternate phrasings of a query plus the detected brand/item."""

    tries: list[str]
    brand: str
    item: str
