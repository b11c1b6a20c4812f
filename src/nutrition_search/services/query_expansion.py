"""Query expansion for bridging vocabulary gaps between providers."""

import re

from nutrition_search.domain.foods import FallbackQueries
from nutrition_search.services.text import detect_brand_and_item, fold, simplify

MAX_TRIES = 12
_MAX_NGRAM = 4
_MIN_NGRAM = 2

# Applied one at a time to the same input, never chained.
_SUBSTITUTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"&"), " and "),
    (re.compile(r"\band\b"), " "),
    (re.compile(r"\bsandwich\b"), " "),
    (re.compile(r"\bsubs?\b"), "sub"),
    (re.compile(r"\bpb\b"), "peanut butter"),
    (re.compile(r"\byoghurt\b"), "yogurt"),
)


def expand_variants(text: str) -> list[str]:
    """Return the simplified text followed by each single-substitution form."""
    folded = fold(text)
    variants = [simplify(folded)]
    for pattern, replacement in _SUBSTITUTIONS:
        variants.append(simplify(pattern.sub(replacement, folded)))
    return _unique(variants)


def ngrams(text: str) -> list[str]:
    """Return word n-grams from longest (4) to shortest (2), left to right."""
    tokens = simplify(text).split()
    grams: list[str] = []
    for size in range(min(_MAX_NGRAM, len(tokens)), _MIN_NGRAM - 1, -1):
        for start in range(len(tokens) - size + 1):
            grams.append(" ".join(tokens[start : start + size]))
    return grams


def build_fallback_queries(query: str) -> FallbackQueries:
    """Build up to twelve deduplicated search strings for a raw query."""
    if not simplify(query):
        return FallbackQueries(tries=[], brand="", item="")

    detected = detect_brand_and_item(query)
    brand, item = detected.brand, detected.item

    query_variants = expand_variants(query)
    item_variants = expand_variants(item) if item else []

    candidates = [*query_variants, *item_variants]
    # Full-query variants already carry the brand; only item variants get it.
    if brand and item:
        candidates.extend(f"{brand} {variant}" for variant in item_variants)
    if brand:
        candidates.append(brand)
    if item:
        candidates.extend(ngrams(item))
        candidates.append(item)

    return FallbackQueries(
        tries=_unique(candidates)[:MAX_TRIES], brand=brand, item=item
    )


def _unique(values: list[str]) -> list[str]:
    """Drop empty and repeated values by simplified key, keeping first-seen order."""
    seen: set[str] = set()
    unique: list[str] = []
    for value in values:
        key = simplify(value)
        if key and key not in seen:
            seen.add(key)
            unique.append(value)
    return unique
