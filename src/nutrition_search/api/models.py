"""Pydantic models for the search API."""

from pydantic import BaseModel, ConfigDict, Field

from nutrition_search.domain.foods import Food


class FoodItem(BaseModel):
    """Food item as returned to API clients."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    brand: str | None = None
    barcode: str | None = None
    serving_size: str | None = Field(default=None, alias="servingSize")
    calories: int | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    source: str

    @classmethod
    def from_food(cls, food: Food) -> "FoodItem":
        return cls(
            name=food.name,
            brand=food.brand,
            barcode=food.barcode,
            serving_size=food.serving_size,
            calories=food.calories,
            protein=food.protein,
            carbs=food.carbs,
            fat=food.fat,
            fiber=food.fiber,
            sugar=food.sugar,
            sodium=food.sodium,
            source=food.source,
        )


class SearchResponse(BaseModel):
    """Search endpoint payload."""

    ok: bool = True
    q: str
    items: list[FoodItem]
