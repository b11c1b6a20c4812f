"""Tests for packaged-food ranking."""

from nutrition_search.services.ranking import (
    rank_and_normalize,
    rank_products,
    score_product,
)
from tests.conftest import off_product


def test_prefix_match_with_serving_scores_64() -> None:
    product = off_product(
        "Bench Press Protein Bar", kcal=190, serving_size="1 bar (60 g)"
    )

    assert score_product("bench press", product) == 64


def test_prefix_match_outranks_plain_name() -> None:
    bench = off_product("Bench Press Protein Bar", kcal=190)
    plain = off_product("Protein Bar", kcal=190)

    ranked = rank_products("bench press", [plain, bench])

    assert score_product("bench press", plain) < score_product("bench press", bench)
    assert ranked[0] is bench


def test_contains_generic_and_brand_points() -> None:
    product = off_product(
        "Classic Peanut Butter",
        brands="Peanut Butter Co",
        generic_name="Peanut butter spread",
        serving_size=None,
    )

    assert score_product("peanut butter", product) == 35 + 20 + 12


def test_missing_energy_is_penalized_not_dropped() -> None:
    product = off_product("Mystery Bar", kcal=None, serving_size=None)

    assert score_product("mystery bar", product) == 60 - 30


def test_kj_only_record_is_not_penalized() -> None:
    product = {"product_name": "Oat Bar", "nutriments": {"energy_100g": 1600}}

    assert score_product("oat bar", product) == 60


def test_ties_keep_provider_order() -> None:
    first = off_product("Granola A")
    second = off_product("Granola B")

    ranked = rank_products("granola", [first, second])

    assert ranked == [first, second]


def test_rank_and_normalize_drops_records_without_calories() -> None:
    usable = off_product("Trail Mix", kcal=150)
    no_energy = off_product("Trail Mix Deluxe", kcal=None)

    foods = rank_and_normalize("trail mix", [no_energy, usable])

    assert [food.name for food in foods] == ["Trail Mix"]


def test_underscore_kcal_key_counts_as_energy() -> None:
    product = {"product_name": "Oat Bar", "nutriments": {"energy_kcal_100g": 400}}

    assert score_product("oat bar", product) == 60
    assert [food.calories for food in rank_and_normalize("oat bar", [product])] == [
        400
    ]
