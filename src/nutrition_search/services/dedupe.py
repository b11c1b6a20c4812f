"""Barcode de-duplication and near-duplicate clustering."""

import math

from nutrition_search.domain.foods import Food
from nutrition_search.services.text import base_label, simplify

PER_GROUP_CAP = 2


def completeness_score(food: Food) -> int:
    """Data-quality score used to break ties; unrelated to query relevance."""
    macros = sum(
        1
        for value in (food.protein, food.carbs, food.fat)
        if value is not None and math.isfinite(value)
    )
    return (
        (4 if food.serving_size else 0)
        + (3 if food.calories is not None else 0)
        + macros
        + (1 if food.brand else 0)
        + (2 if food.barcode else 0)
    )


def normalized_barcode(food: Food) -> str:
    return simplify(food.barcode)


def cluster_key(food: Food) -> tuple[str, str]:
    """Group key for listings that describe the same product."""
    return simplify(food.brand), simplify(base_label(food.name))


def admission_key(food: Food) -> str:
    """Key used to keep a result list free of repeats: barcode, else cluster."""
    barcode = normalized_barcode(food)
    if barcode:
        return f"barcode:{barcode}"
    brand, label = cluster_key(food)
    return f"cluster:{brand}:{label}"


def dedupe_and_cluster(items: list[Food], per_group_cap: int = PER_GROUP_CAP) -> list[Food]:
    """Merge barcode duplicates, then keep the best few of each cluster.

    Barcode collisions keep the more complete record. Survivors are grouped
    by (brand, base label) and each group keeps its ``per_group_cap`` most
    complete members, so different pack sizes and flavors survive while
    repeated listings collapse.
    """
    by_barcode: dict[str, Food] = {}
    without_barcode: list[Food] = []
    for food in items:
        barcode = normalized_barcode(food)
        if not barcode:
            without_barcode.append(food)
            continue
        current = by_barcode.get(barcode)
        if current is None or completeness_score(food) > completeness_score(current):
            by_barcode[barcode] = food

    groups: dict[tuple[str, str], list[Food]] = {}
    for food in [*by_barcode.values(), *without_barcode]:
        groups.setdefault(cluster_key(food), []).append(food)

    survivors: list[Food] = []
    for members in groups.values():
        ranked = sorted(members, key=completeness_score, reverse=True)
        survivors.extend(ranked[:per_group_cap])
    return survivors
