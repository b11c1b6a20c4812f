"""Tests for text normalization helpers."""

from nutrition_search.services.text import (
    base_label,
    brand_matches,
    detect_brand_and_item,
    simplify,
)


def test_simplify_folds_case_diacritics_and_punctuation() -> None:
    assert simplify("  Crème  Brûlée, Vanilla! ") == "creme brulee vanilla"
    assert simplify("Jersey Mike's") == "jersey mikes"
    assert simplify("Chick-fil-A") == "chick fil a"
    assert simplify(None) == ""


def test_base_label_strips_parentheticals_and_quantities() -> None:
    assert base_label("Greek Yogurt (Plain) 150g") == "Greek Yogurt"
    assert base_label("Cola 330 ml can") == "Cola can"
    assert base_label("") == ""


def test_detect_brand_and_item_with_alias() -> None:
    detected = detect_brand_and_item("Jersey Mike's Turkey & Swiss Sub")

    assert detected.brand == "jersey mikes"
    assert detected.item == "turkey swiss sub"


def test_detect_brand_prefers_longest_span() -> None:
    detected = detect_brand_and_item("tropical smoothie cafe bahama mama")

    assert detected.brand == "tropical smoothie cafe"
    assert detected.item == "bahama mama"


def test_detect_brand_without_match_keeps_whole_query() -> None:
    detected = detect_brand_and_item("Greek Yoghurt")

    assert detected.brand == ""
    assert detected.item == "greek yoghurt"


def test_brand_matches_uses_containment() -> None:
    assert brand_matches("Jersey Mike's Subs", "jersey mikes")
    assert not brand_matches("Subway", "jersey mikes")
    assert not brand_matches(None, "jersey mikes")
    assert not brand_matches("Anything", "")
