"""Relevance ranking for packaged-food provider records."""

from nutrition_search.domain.foods import Food
from nutrition_search.services.normalizers import has_energy, map_off_product
from nutrition_search.services.text import simplify

NAME_PREFIX_POINTS = 60
NAME_CONTAINS_POINTS = 35
GENERIC_NAME_POINTS = 20
BRAND_POINTS = 12
SERVING_POINTS = 4
NO_ENERGY_PENALTY = -30


def score_product(query: str, product: dict[str, object]) -> int:
    """Score a raw packaged-food record against a query.

    A record with no energy value at all is penalized rather than dropped,
    so a strong name match without nutrition data sinks instead of vanishing.
    """
    normalized_query = simplify(query)
    name = simplify(_text(product.get("product_name")))
    generic_name = simplify(_text(product.get("generic_name_en")))
    brands = simplify(_text(product.get("brands")))

    score = 0
    if name.startswith(normalized_query):
        score += NAME_PREFIX_POINTS
    elif normalized_query in name:
        score += NAME_CONTAINS_POINTS
    if normalized_query in generic_name:
        score += GENERIC_NAME_POINTS
    if normalized_query in brands:
        score += BRAND_POINTS
    if product.get("serving_size"):
        score += SERVING_POINTS
    nutriments = product.get("nutriments")
    if not has_energy(nutriments if isinstance(nutriments, dict) else {}):
        score += NO_ENERGY_PENALTY
    return score


def rank_products(
    query: str, products: list[dict[str, object]]
) -> list[dict[str, object]]:
    """Sort records by descending score; ties keep provider order."""
    scored = [(score_product(query, product), product) for product in products]
    return [product for _, product in sorted(scored, key=lambda pair: -pair[0])]


def rank_and_normalize(query: str, products: list[dict[str, object]]) -> list[Food]:
    """Rank raw records, then map them to foods, dropping unusable ones."""
    foods = (map_off_product(product) for product in rank_products(query, products))
    return [food for food in foods if food is not None]


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""
