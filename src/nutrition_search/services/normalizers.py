"""Normalization of provider-native records into canonical foods."""

import math
import re

from nutrition_search.domain.foods import Food

SOURCE_OFF = "openfoodfacts"
SOURCE_FDC = "fdc"
SOURCE_SPOONACULAR = "spoonacular"

_KJ_PER_KCAL = 4.184
_SALT_TO_SODIUM = 2.5
_MG_THRESHOLD = 100
_GRAMS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*g\b", flags=re.IGNORECASE)

_KCAL_SERVING_KEYS = ("energy-kcal_serving", "energy_kcal_serving")
_KCAL_100G_KEYS = ("energy-kcal_100g", "energy_kcal_100g")
_KJ_SERVING_KEY = "energy_serving"
_KJ_100G_KEY = "energy_100g"
_ENERGY_KEYS = (
    *_KCAL_SERVING_KEYS,
    _KJ_SERVING_KEY,
    *_KCAL_100G_KEYS,
    _KJ_100G_KEY,
)

_FDC_NUTRIENT_IDS = {
    "calories": 1008,
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
    "sugar": 2000,
    "fiber": 1079,
    "sodium": 1093,
}
_FDC_NUTRIENT_NAMES = {
    "calories": "energy",
    "protein": "protein",
    "fat": "fat",
    "carbs": "carbohydrate",
    "sugar": "sugar",
    "fiber": "fiber",
    "sodium": "sodium",
}
_FDC_LABEL_KEYS = {
    "calories": "calories",
    "protein": "protein",
    "fat": "fat",
    "carbs": "carbohydrates",
    "sugar": "sugars",
    "fiber": "fiber",
    "sodium": "sodium",
}


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values."""
    return int(math.floor(value + 0.5))


def first_number(*values: object) -> float | None:
    """Return the first value that parses as a finite number."""
    for value in values:
        if value is None or isinstance(value, bool):
            continue
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            continue
        if math.isfinite(number):
            return number
    return None


def kj_to_kcal(kilojoules: float | None) -> int | None:
    """Convert kilojoules to rounded kilocalories."""
    if kilojoules is None:
        return None
    return round_half_up(kilojoules / _KJ_PER_KCAL)


def grams_from_serving(serving_size: str | None) -> int | None:
    """Parse a gram amount from a free-form serving size like '1 bar (40 g)'."""
    if not serving_size:
        return None
    match = _GRAMS_PATTERN.search(serving_size)
    if not match:
        return None
    grams = round_half_up(float(match.group(1)))
    return grams or None


def has_energy(nutriments: dict[str, object]) -> bool:
    """Return True when an Open Food Facts record declares any energy value."""
    return any(nutriments.get(key) is not None for key in _ENERGY_KEYS)


def map_off_product(product: dict[str, object]) -> Food | None:
    """Map an Open Food Facts product to a food, or None when unusable."""
    nutriments = _as_dict(product.get("nutriments"))
    serving = _clean_text(product.get("serving_size"))
    grams = grams_from_serving(serving)

    per_serving = first_number(*(nutriments.get(key) for key in _KCAL_SERVING_KEYS))
    if per_serving is None:
        per_serving = kj_to_kcal(first_number(nutriments.get(_KJ_SERVING_KEY)))
    per_100g = first_number(*(nutriments.get(key) for key in _KCAL_100G_KEYS))
    if per_100g is None:
        per_100g = kj_to_kcal(first_number(nutriments.get(_KJ_100G_KEY)))
    calories = _serving_value(per_serving, per_100g, grams)

    name = _clean_text(
        product.get("product_name_en")
        or product.get("product_name")
        or product.get("generic_name_en")
    )
    if not name or calories is None:
        return None

    def macro(key: str) -> int | None:
        return _serving_value(
            first_number(nutriments.get(f"{key}_serving")),
            first_number(nutriments.get(f"{key}_100g")),
            grams,
        )

    sugar = _serving_value(
        first_number(nutriments.get("sugars_serving"), nutriments.get("sugar_serving")),
        first_number(nutriments.get("sugars_100g"), nutriments.get("sugar_100g")),
        grams,
    )
    return Food(
        name=name,
        brand=_first_brand(product.get("brands")),
        barcode=_clean_text(product.get("code")),
        serving_size=serving,
        calories=calories,
        protein=macro("proteins"),
        carbs=macro("carbohydrates"),
        fat=macro("fat"),
        fiber=None,
        sugar=sugar,
        sodium=_off_sodium(nutriments, grams),
        source=SOURCE_OFF,
    )


def _first_brand(brands: object) -> str | None:
    """Open Food Facts lists brands comma-separated; the first is the owner."""
    text = _clean_text(brands)
    if text is None:
        return None
    return _clean_text(text.split(",")[0])


def _off_sodium(nutriments: dict[str, object], grams: int | None) -> float | None:
    """Resolve sodium in grams, falling back to salt / 2.5."""
    sodium_serving = first_number(nutriments.get("sodium_serving"))
    if sodium_serving is not None:
        if sodium_serving > _MG_THRESHOLD:
            return round(sodium_serving / 1000, 3)
        return sodium_serving
    salt_serving = first_number(nutriments.get("salt_serving"))
    if salt_serving is not None:
        return round(salt_serving / _SALT_TO_SODIUM, 3)
    sodium_100 = first_number(
        nutriments.get("sodium_100g"), nutriments.get("sodium_100ml")
    )
    if sodium_100 is not None:
        if sodium_100 > _MG_THRESHOLD:
            sodium_100 = sodium_100 / 1000
        return round(sodium_100 * grams / 100 if grams else sodium_100, 3)
    salt_100 = first_number(nutriments.get("salt_100g"), nutriments.get("salt_100ml"))
    if salt_100 is not None:
        sodium = salt_100 / _SALT_TO_SODIUM
        return round(sodium * grams / 100 if grams else sodium, 3)
    return None


def map_fdc_food(food: dict[str, object]) -> Food | None:
    """Map an FDC search hit to a food, preferring per-serving label values."""
    labels = _as_dict(food.get("labelNutrients"))
    nutrients = food.get("foodNutrients")
    nutrient_rows = nutrients if isinstance(nutrients, list) else []
    unit = _clean_text(food.get("servingSizeUnit"))
    serving_amount = first_number(food.get("servingSize"))
    grams = serving_amount if unit and unit.lower() == "g" else None

    values: dict[str, float | None] = {}
    for key in _FDC_NUTRIENT_IDS:
        label = first_number(_as_dict(labels.get(_FDC_LABEL_KEYS[key])).get("value"))
        if label is not None:
            values[key] = label
            continue
        values[key] = _fdc_per_serving(key, nutrient_rows, grams)

    name = _clean_text(food.get("description") or food.get("brandName"))
    calories = values["calories"]
    if not name or calories is None:
        return None

    serving_text = _clean_text(food.get("householdServingFullText"))
    if not serving_text and serving_amount is not None and unit:
        serving_text = f"{_format_amount(serving_amount)} {unit}"

    sodium_mg = values["sodium"]
    return Food(
        name=name,
        brand=_clean_text(food.get("brandOwner") or food.get("brandName")),
        barcode=_clean_text(food.get("gtinUpc")),
        serving_size=serving_text,
        calories=round_half_up(calories),
        protein=_rounded(values["protein"]),
        carbs=_rounded(values["carbs"]),
        fat=_rounded(values["fat"]),
        fiber=_rounded(values["fiber"]),
        sugar=_rounded(values["sugar"]),
        sodium=round(sodium_mg / 1000, 3) if sodium_mg is not None else None,
        source=SOURCE_FDC,
    )


def _fdc_per_serving(
    key: str, rows: list[object], grams: float | None
) -> float | None:
    """Read a per-100g nutrient row and scale it to the gram serving size."""
    row = _find_fdc_nutrient(rows, _FDC_NUTRIENT_IDS[key], _FDC_NUTRIENT_NAMES[key])
    if row is None:
        return None
    amount = first_number(row.get("value"), row.get("amount"))
    if amount is None:
        return None
    if key == "calories" and str(row.get("unitName", "")).lower() == "kj":
        amount = amount / _KJ_PER_KCAL
    return amount * grams / 100 if grams else amount


def _find_fdc_nutrient(
    rows: list[object], nutrient_id: int, name_contains: str
) -> dict[str, object] | None:
    candidates = [row for row in rows if isinstance(row, dict)]
    for row in candidates:
        nutrient_info = _as_dict(row.get("nutrient"))
        row_id = row.get("nutrientId") or nutrient_info.get("id")
        if row_id == nutrient_id:
            return row
    for row in candidates:
        row_name = str(row.get("nutrientName") or "").lower()
        if name_contains in row_name:
            return row
    return None


def map_spoonacular_detail(
    title: object,
    brand: object,
    servings: object,
    nutrients: object,
) -> Food | None:
    """Map a Spoonacular menu item or product detail to a food."""
    name = _clean_text(title)
    if not name:
        return None
    rows = [row for row in nutrients if isinstance(row, dict)] if isinstance(
        nutrients, list
    ) else []

    calories = _pick_amount(
        rows, ("Calories", "Energy", "Calories, kcal", "Energy (kcal)"), "kcal"
    )
    if calories is None:
        calories = _pick_amount(rows, ("Calories", "Energy"))
    protein = _pick_amount(rows, ("Protein",), "g")
    carbs = _pick_amount(rows, ("Carbohydrates", "Carbs"), "g")
    fat = _pick_amount(rows, ("Fat", "Total Fat"), "g")
    if calories is None and protein is None and carbs is None and fat is None:
        return None
    sodium_mg = _pick_amount(rows, ("Sodium",), "mg")

    return Food(
        name=name,
        brand=_clean_text(brand),
        barcode=None,
        serving_size=_spoonacular_serving_text(_as_dict(servings)),
        calories=_rounded(calories),
        protein=_rounded(protein),
        carbs=_rounded(carbs),
        fat=_rounded(fat),
        fiber=_rounded(_pick_amount(rows, ("Fiber", "Dietary Fiber"), "g")),
        sugar=_rounded(_pick_amount(rows, ("Sugar", "Sugars"), "g")),
        sodium=round(sodium_mg / 1000, 3) if sodium_mg is not None else None,
        source=SOURCE_SPOONACULAR,
    )


def _pick_amount(
    rows: list[dict[str, object]],
    names: tuple[str, ...],
    preferred_unit: str | None = None,
) -> float | None:
    """Find a nutrient by exact name first, then by substring."""

    def unit_ok(row: dict[str, object]) -> bool:
        unit = str(row.get("unit") or "").strip().lower()
        return not preferred_unit or not unit or unit == preferred_unit.lower()

    lowered = [name.lower() for name in names]
    for matches in (
        lambda row_name, wanted: row_name == wanted,
        lambda row_name, wanted: wanted in row_name,
    ):
        for wanted in lowered:
            for row in rows:
                row_name = str(row.get("name") or "").strip().lower()
                amount = first_number(row.get("amount"))
                if matches(row_name, wanted) and amount is not None and unit_ok(row):
                    return amount
    return None


def _spoonacular_serving_text(servings: dict[str, object]) -> str | None:
    if not servings:
        return None
    count = first_number(servings.get("number"))
    size = first_number(servings.get("size"))
    unit = _clean_text(servings.get("unit"))
    prefix = f"{_format_amount(count)}× " if count and count != 1 else ""
    if size and unit:
        return f"{prefix}{_format_amount(size)} {unit}"
    if size:
        return f"{prefix}{_format_amount(size)}"
    return f"{prefix}serving" if prefix else None


def _serving_value(
    per_serving: float | None, per_100g: float | None, grams: int | None
) -> int | None:
    """Prefer per-serving values; scale per-100g values by the gram serving."""
    if per_serving is not None:
        return round_half_up(per_serving)
    if per_100g is not None:
        return round_half_up(per_100g * grams / 100 if grams else per_100g)
    return None


def _rounded(value: float | None) -> int | None:
    return round_half_up(value) if value is not None else None


def _format_amount(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _clean_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_dict(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}
