"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

import httpx
from fastapi import (
    FastAPI,
    HTTPException,
    Request,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from nutrition_log.api.models import ImportRequest, ServingRequest
from nutrition_log.app_logging import configure_logging
from nutrition_log.containers import AppContainer
from nutrition_log.domain.errors import CatalogUnavailableError, InvalidServingError
from nutrition_log.domain.foods import FoodRecord
from nutrition_log.domain.search import SearchOutcome
from nutrition_log.domain.servings import CustomServing, ServingSelection
from nutrition_log.services.debounce import DebouncedSearch
from nutrition_log.services.seed import seed_catalog
from nutrition_log.services.servings import (
    default_serving,
    named_serving,
    resolve_serving,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: C901
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        try:
            if state_container.settings.seed_catalog:
                await seed_catalog(state_container.catalog_store)
            state_container.indexer.mark_stale()
            await state_container.curator.load()
        except Exception:
            logger.exception("Failed to prepare food catalog at startup")
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods/search")
    async def search_foods(request: Request, q: str = "") -> dict[str, object]:
        """Ranked foods for a query plus a quality report."""
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.query_planner.search(q)
        return _serialize_outcome(outcome)

    @app.get("/foods/browse")
    async def browse_foods(request: Request) -> dict[str, object]:
        """Popular and recently added foods."""
        state_container: AppContainer = request.app.state.container
        curator = state_container.curator
        try:
            await curator.load()
        except CatalogUnavailableError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        return {
            "popular": [_serialize_food(food) for food in curator.popular],
            "recent": [_serialize_food(food) for food in curator.recent],
        }

    @app.post("/foods/{food_id}/serving")
    async def resolve_food_serving(
        food_id: int, body: ServingRequest, request: Request
    ) -> dict[str, object]:
        """Nutrients for a serving of a food."""
        state_container: AppContainer = request.app.state.container
        food = await _get_food(state_container, food_id)
        try:
            selection = _selection_from_request(food, body)
            payload = resolve_serving(food, selection, quantity=body.quantity)
        except InvalidServingError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return {
            "serving": {"label": selection.label, "grams": selection.grams},
            "quantity": body.quantity,
            "raw": asdict(payload),
            "display": asdict(payload.rounded()),
        }

    @app.post("/foods/{food_id}/favorite", status_code=status.HTTP_201_CREATED)
    async def add_favorite(food_id: int, request: Request) -> dict[str, object]:
        """Save a user copy of a food."""
        state_container: AppContainer = request.app.state.container
        food = await _get_food(state_container, food_id)
        try:
            saved = await state_container.curator.add_favorite(food)
        except CatalogUnavailableError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        return _serialize_food(saved)

    @app.post("/catalog/import")
    async def import_foods(body: ImportRequest, request: Request) -> dict[str, object]:
        """Import foods from FoodData Central into the catalog."""
        state_container: AppContainer = request.app.state.container
        if state_container.import_service is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="FDC import is not configured",
            )
        try:
            inserted = await state_container.import_service.import_foods(
                body.query, limit=body.limit
            )
        except httpx.HTTPError as exc:
            logger.exception("FDC import failed: query=%s", body.query)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail="FDC request failed"
            ) from exc
        except CatalogUnavailableError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
        return {"imported": [_serialize_food(food) for food in inserted]}

    @app.websocket("/foods/search/live")
    async def live_search(websocket: WebSocket) -> None:
        """Debounced search: each text frame is the current input."""
        state_container: AppContainer = websocket.app.state.container
        await websocket.accept()

        async def push(query: str, outcome: SearchOutcome) -> None:
            await websocket.send_json({"query": query, **_serialize_outcome(outcome)})

        session = DebouncedSearch(
            state_container.query_planner,
            delay_seconds=state_container.settings.search_debounce_seconds,
            on_result=push,
        )
        try:
            while True:
                session.submit(await websocket.receive_text())
        except WebSocketDisconnect:
            logger.debug("Live search client disconnected")
        finally:
            session.close()

    return app


async def _get_food(container: AppContainer, food_id: int) -> FoodRecord:
    try:
        state = await container.indexer.current()
    except CatalogUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    food = state.find(food_id)
    if food is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return food


def _selection_from_request(food: FoodRecord, body: ServingRequest) -> ServingSelection:
    if body.serving_label is not None:
        return named_serving(food, body.serving_label)
    if body.grams is not None:
        return CustomServing(grams=body.grams)
    return default_serving(food)


def _serialize_food(food: FoodRecord) -> dict[str, object]:
    return {
        "id": food.id,
        "name": food.name,
        "brand": food.brand,
        "category": food.category,
        "tags": list(food.tags),
        "per100g": asdict(food.per100g),
        "servings": [asdict(serving) for serving in food.servings],
        "source": food.source,
        "verified": food.verified,
    }


def _serialize_outcome(outcome: SearchOutcome) -> dict[str, object]:
    quality = outcome.quality
    return {
        "results": [
            {"food": _serialize_food(result.food), "score": result.score}
            for result in outcome.results
        ],
        "quality": (
            {
                "quality": quality.quality.value,
                "totalFound": quality.total_found,
                "qualityKept": quality.quality_kept,
                "threshold": quality.threshold,
                "method": quality.method.value,
            }
            if quality is not None
            else None
        ),
    }
