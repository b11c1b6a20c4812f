"""FastAPI application factory."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query, Request, Response

from nutrition_search.api.models import FoodItem, SearchResponse
from nutrition_search.app_logging import configure_logging
from nutrition_search.containers import AppContainer
from nutrition_search.services.cancellation import (
    CancellationToken,
    SearchCancelledError,
)

SEARCH_CACHE_CONTROL = "s-maxage=300, stale-while-revalidate=600"
DISCONNECT_POLL_SECONDS = 0.25


async def cancel_on_disconnect(
    request: Request,
    token: CancellationToken,
    poll_seconds: float = DISCONNECT_POLL_SECONDS,
) -> None:
    """Cancel the search token once the client goes away."""
    while not token.cancelled:
        if await request.is_disconnected():
            token.cancel("client disconnected")
            return
        await asyncio.sleep(poll_seconds)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/search", response_model=SearchResponse)
    async def search(
        request: Request,
        response: Response,
        q: str = Query(default="", max_length=200),
    ) -> SearchResponse:
        """Search every provider for foods matching a free-text query."""
        state_container: AppContainer = request.app.state.container
        response.headers["Cache-Control"] = SEARCH_CACHE_CONTROL
        query = q.strip()
        if not query:
            return SearchResponse(q=query, items=[])
        token = CancellationToken()
        watcher = asyncio.create_task(cancel_on_disconnect(request, token))
        try:
            foods = await state_container.search_service.search_all_providers(
                query, token
            )
        except SearchCancelledError:
            return SearchResponse(q=query, items=[])
        finally:
            watcher.cancel()
        return SearchResponse(
            q=query, items=[FoodItem.from_food(food) for food in foods]
        )

    return app
