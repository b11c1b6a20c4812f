"""Federated food search across every configured provider."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field

from nutrition_search.domain.foods import Food
from nutrition_search.services.cancellation import (
    CancellationToken,
    SearchCancelledError,
)
from nutrition_search.services.dedupe import (
    PER_GROUP_CAP,
    admission_key,
    dedupe_and_cluster,
)
from nutrition_search.services.providers import FoodProvider, PackagedFoodProvider
from nutrition_search.services.query_expansion import build_fallback_queries
from nutrition_search.services.ranking import rank_and_normalize
from nutrition_search.services.text import brand_matches

RESULT_LIMIT = 25

_logger = logging.getLogger(__name__)


@dataclass
class SearchContext:
    """State owned by exactly one search call."""

    query: str
    token: CancellationToken
    brand: str
    item: str
    limit: int = RESULT_LIMIT
    results: list[Food] = field(default_factory=list)
    seen_keys: set[str] = field(default_factory=set)

    @property
    def budget_full(self) -> bool:
        return len(self.results) >= self.limit

    def admit(self, foods: Iterable[Food], *, require_brand: bool) -> int:
        """Append unseen foods until the budget is full; return how many."""
        self.token.raise_if_cancelled()
        admitted = 0
        for food in foods:
            if self.budget_full:
                return admitted
            if require_brand and not brand_matches(food.brand, self.brand):
                continue
            key = admission_key(food)
            if key in self.seen_keys:
                continue
            self.seen_keys.add(key)
            self.results.append(food)
            admitted += 1
        return admitted


@dataclass
class SearchService:
    """Search packaged, government and recipe sources for one query.

    A detected brand first runs brand-scoped lookups whose results must carry
    that brand. Query variants are then tried in order, each fanning out to
    all providers at once. A provider failure only empties its share of a
    round; cancellation of the token aborts the whole call.
    """

    packaged: PackagedFoodProvider
    government: FoodProvider
    recipes: FoodProvider
    result_limit: int = RESULT_LIMIT
    per_group_cap: int = PER_GROUP_CAP
    debug: bool = False

    async def search_all_providers(
        self, query: str, token: CancellationToken
    ) -> list[Food]:
        """Return up to ``result_limit`` deduplicated foods for a query."""
        token.raise_if_cancelled()
        plan = build_fallback_queries(query)
        context = SearchContext(
            query=query,
            token=token,
            brand=plan.brand,
            item=plan.item,
            limit=self.result_limit,
        )
        if plan.brand:
            await self._run_brand_phase(context)
        await self._run_variant_phase(context, plan.tries)

        _logger.info(
            "Food search: query=%s brand=%s variants=%s results=%s",
            query,
            plan.brand or "-",
            len(plan.tries),
            len(context.results),
        )
        return context.results[: self.result_limit]

    async def _run_brand_phase(self, context: SearchContext) -> None:
        brand, token = context.brand, context.token
        ranking_query = f"{brand} {context.item}".strip()

        async def brand_facet() -> list[Food]:
            products = await self.packaged.search_brand_facet(brand, token)
            return rank_and_normalize(ranking_query, products)

        async def brand_filtered() -> list[Food]:
            products = await self.packaged.search_brand_filtered(
                brand, context.item or context.query, token
            )
            return rank_and_normalize(ranking_query, products)

        steps: tuple[tuple[str, Callable[[], Awaitable[list[Food]]]], ...] = (
            ("brand_facet", brand_facet),
            ("brand_filtered", brand_filtered),
            ("recipes", lambda: self.recipes.search(context.query, token)),
        )
        for step_name, step in steps:
            if context.budget_full:
                return
            foods = await self._recover(step_name, context.query, step(), token)
            admitted = context.admit(
                dedupe_and_cluster(foods, self.per_group_cap), require_brand=True
            )
            if self.debug:
                _logger.info(
                    "Brand step %s: brand=%s fetched=%s admitted=%s",
                    step_name,
                    brand,
                    len(foods),
                    admitted,
                )

    async def _run_variant_phase(
        self, context: SearchContext, variants: list[str]
    ) -> None:
        token = context.token
        for variant in variants:
            if context.budget_full:
                return
            recipes, packaged, government = await asyncio.gather(
                *(
                    self._recover(name, variant, provider.search(variant, token), token)
                    for name, provider in (
                        ("recipes", self.recipes),
                        ("packaged", self.packaged),
                        ("government", self.government),
                    )
                )
            )
            merged = [*recipes, *packaged, *government]
            admitted = context.admit(
                dedupe_and_cluster(merged, self.per_group_cap), require_brand=False
            )
            if self.debug:
                _logger.info(
                    "Variant %r: recipes=%s packaged=%s government=%s admitted=%s",
                    variant,
                    len(recipes),
                    len(packaged),
                    len(government),
                    admitted,
                )

    async def _recover(
        self,
        provider: str,
        query: str,
        call: Awaitable[list[Food]],
        token: CancellationToken,
    ) -> list[Food]:
        """Await a provider call, turning any failure into an empty round."""
        try:
            return await token.run(call)
        except SearchCancelledError:
            raise
        except Exception as exc:
            _logger.warning(
                "Provider %s failed for query=%r (status=%s): %s",
                provider,
                query,
                _status_code_from_exception(exc),
                exc,
            )
            return []


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
