"""Text normalization helpers shared by the search pipeline."""

import re
import unicodedata

from nutrition_search.domain.foods import BrandAndItem

_APOSTROPHES = re.compile(r"['’‘`]")
_NON_WORD = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")
_PARENTHETICAL = re.compile(r"\(.+?\)")
_QUANTITY = re.compile(
    r"\b\d+(?:\.\d+)?\s*(?:g|mg|kg|oz|lb|ml|l)\b", flags=re.IGNORECASE
)

_MAX_BRAND_TOKENS = 4

BRAND_ALIASES: dict[str, str] = {
    # Subs
    "jersey mikes": "jersey mikes",
    "jersey mike": "jersey mikes",
    "jersey mike s": "jersey mikes",
    "subway": "subway",
    "jimmy johns": "jimmy johns",
    "firehouse subs": "firehouse subs",
    "potbelly": "potbelly",
    # Bowls / fast casual
    "chipotle": "chipotle",
    "qdoba": "qdoba",
    "moes": "moes",
    "moes southwest grill": "moes",
    "panda express": "panda express",
    "noodles and company": "noodles and company",
    "noodles company": "noodles and company",
    "sweetgreen": "sweetgreen",
    "cava": "cava",
    # Burgers / chicken / pizza
    "mcdonalds": "mcdonalds",
    "wendys": "wendys",
    "burger king": "burger king",
    "five guys": "five guys",
    "shake shack": "shake shack",
    "chick fil a": "chick fil a",
    "taco bell": "taco bell",
    "kfc": "kfc",
    "popeyes": "popeyes",
    "zaxbys": "zaxbys",
    "raising canes": "raising canes",
    "in n out": "in n out",
    "whataburger": "whataburger",
    "dominos": "dominos",
    "papa johns": "papa johns",
    "little caesars": "little caesars",
    "pizza hut": "pizza hut",
    "blaze pizza": "blaze pizza",
    "culvers": "culvers",
    "wingstop": "wingstop",
    "buffalo wild wings": "buffalo wild wings",
    "jack in the box": "jack in the box",
    "sonic": "sonic",
    # Coffee / cafes / smoothies
    "starbucks": "starbucks",
    "dunkin": "dunkin",
    "peets": "peets",
    "caribou coffee": "caribou coffee",
    "einstein bros": "einstein bros",
    "tim hortons": "tim hortons",
    "tropical smoothie cafe": "tropical smoothie cafe",
    "tropical smoothie": "tropical smoothie cafe",
    "smoothie king": "smoothie king",
}

_BRAND_CATALOG = frozenset(BRAND_ALIASES.values())


def fold(value: str | None) -> str:
    """Lowercase, strip diacritics and apostrophes, and collapse whitespace."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    without_apostrophes = _APOSTROPHES.sub("", stripped.lower())
    return _WHITESPACE.sub(" ", without_apostrophes).strip()


def simplify(value: str | None) -> str:
    """Return the comparison form of a string: folded, punctuation removed."""
    folded = fold(value)
    return _WHITESPACE.sub(" ", _NON_WORD.sub(" ", folded)).strip()


def base_label(name: str | None) -> str:
    """Strip parentheticals and package quantities from a product name."""
    if not name:
        return ""
    label = _PARENTHETICAL.sub(" ", name)
    label = _QUANTITY.sub(" ", label)
    return _WHITESPACE.sub(" ", label).strip()


def detect_brand_and_item(query: str) -> BrandAndItem:
    """Split a query into a known restaurant brand and the remaining words.

    Longer token spans win over shorter ones, and the leftmost span wins
    among spans of the same length. When no brand is recognized the whole
    simplified query becomes the item.
    """
    tokens = simplify(query).split()
    for length in range(min(_MAX_BRAND_TOKENS, len(tokens)), 0, -1):
        for start in range(len(tokens) - length + 1):
            candidate = " ".join(tokens[start : start + length])
            brand = BRAND_ALIASES.get(candidate)
            if brand is None and candidate in _BRAND_CATALOG:
                brand = candidate
            if brand:
                rest = tokens[:start] + tokens[start + length :]
                return BrandAndItem(brand=brand, item=" ".join(rest))
    return BrandAndItem(brand="", item=" ".join(tokens))


def brand_matches(food_brand: str | None, brand: str) -> bool:
    """Return True when a food's brand field contains the detected brand."""
    wanted = simplify(brand)
    if not wanted:
        return False
    return wanted in simplify(food_brand)
