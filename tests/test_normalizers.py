"""Tests for provider record normalization."""

from nutrition_search.services.normalizers import (
    SOURCE_FDC,
    SOURCE_OFF,
    SOURCE_SPOONACULAR,
    grams_from_serving,
    kj_to_kcal,
    map_fdc_food,
    map_off_product,
    map_spoonacular_detail,
)


def test_kj_to_kcal_rounds() -> None:
    assert kj_to_kcal(418.4) == 100
    assert kj_to_kcal(None) is None


def test_grams_from_serving() -> None:
    assert grams_from_serving("1 bar (40 g)") == 40
    assert grams_from_serving("2.6g") == 3
    assert grams_from_serving("1 cup") is None
    assert grams_from_serving(None) is None


def test_off_prefers_per_serving_values() -> None:
    food = map_off_product(
        {
            "code": "0123",
            "product_name": "Protein Bar",
            "brands": "Acme, Acme Foods",
            "serving_size": "1 bar (40 g)",
            "nutriments": {
                "energy-kcal_serving": 190,
                "energy-kcal_100g": 475,
                "proteins_serving": 20,
                "carbohydrates_100g": 50,
                "fat_serving": 7.4,
            },
        }
    )

    assert food is not None
    assert food.name == "Protein Bar"
    assert food.brand == "Acme"
    assert food.barcode == "0123"
    assert food.calories == 190
    assert food.protein == 20
    assert food.carbs == 20
    assert food.fat == 7
    assert food.source == SOURCE_OFF


def test_off_scales_per_100g_kj_by_serving_grams() -> None:
    food = map_off_product(
        {
            "product_name_en": "Oat Biscuits",
            "serving_size": "2 biscuits (25 g)",
            "nutriments": {"energy_100g": 2000, "salt_100g": 1.0},
        }
    )

    assert food is not None
    assert food.calories == 120
    assert food.sodium == 0.1


def test_off_sodium_in_milligrams_is_converted() -> None:
    food = map_off_product(
        {
            "product_name": "Soup",
            "nutriments": {"energy-kcal_serving": 90, "sodium_serving": 680},
        }
    )

    assert food is not None
    assert food.sodium == 0.68


def test_off_without_calories_or_name_is_dropped() -> None:
    assert map_off_product({"product_name": "Water", "nutriments": {}}) is None
    assert (
        map_off_product({"nutriments": {"energy-kcal_serving": 10}, "brands": "X"})
        is None
    )


def test_fdc_prefers_label_nutrients() -> None:
    food = map_fdc_food(
        {
            "fdcId": 1,
            "description": "Turkey Breast Sub",
            "brandOwner": "Deli Co",
            "gtinUpc": "000111",
            "servingSize": 200,
            "servingSizeUnit": "g",
            "labelNutrients": {
                "calories": {"value": 410},
                "protein": {"value": 28.4},
                "sodium": {"value": 1200},
            },
            "foodNutrients": [
                {"nutrientId": 1008, "unitName": "KCAL", "value": 150},
                {"nutrientId": 1005, "unitName": "G", "value": 20},
            ],
        }
    )

    assert food is not None
    assert food.calories == 410
    assert food.protein == 28
    assert food.carbs == 40
    assert food.sodium == 1.2
    assert food.serving_size == "200 g"
    assert food.brand == "Deli Co"
    assert food.barcode == "000111"
    assert food.source == SOURCE_FDC


def test_fdc_converts_kj_and_matches_by_name() -> None:
    food = map_fdc_food(
        {
            "description": "Rolled oats",
            "foodNutrients": [
                {"nutrientName": "Energy", "unitName": "kJ", "value": 1569},
                {"nutrientName": "Protein", "unitName": "G", "value": 13.2},
            ],
        }
    )

    assert food is not None
    assert food.calories == 375
    assert food.protein == 13
    assert food.serving_size is None


def test_fdc_without_energy_is_dropped() -> None:
    assert map_fdc_food({"description": "Salt", "foodNutrients": []}) is None


def test_spoonacular_detail_mapping() -> None:
    food = map_spoonacular_detail(
        title="Turkey & Provolone",
        brand="Jersey Mike's",
        servings={"number": 1, "size": 250, "unit": "g"},
        nutrients=[
            {"name": "Calories", "amount": 540.4, "unit": "kcal"},
            {"name": "Protein", "amount": 31, "unit": "g"},
            {"name": "Sodium", "amount": 1500, "unit": "mg"},
            {"name": "Net Carbohydrates", "amount": 48, "unit": "g"},
        ],
    )

    assert food is not None
    assert food.calories == 540
    assert food.protein == 31
    assert food.carbs == 48
    assert food.sodium == 1.5
    assert food.serving_size == "250 g"
    assert food.brand == "Jersey Mike's"
    assert food.barcode is None
    assert food.source == SOURCE_SPOONACULAR


def test_spoonacular_without_nutrition_is_dropped() -> None:
    assert map_spoonacular_detail("Mystery", None, None, []) is None
    assert map_spoonacular_detail("", None, None, [{"name": "Calories", "amount": 1}]) is None
