"""FoodData Central lookups with caching and a short retry."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from nutrition_log.adapters.fdc_client import FdcClient
from nutrition_log.domain.foods import NutrientProfile
from nutrition_log.domain.nutrition import FdcFoodDetails, FdcFoodSummary
from nutrition_log.services.cache import Cache

# FDC nutrient ids
_NUTRIENT_FIELDS = {
    1008: "kcal",
    1003: "protein",
    1005: "carbs",
    1004: "fat",
}
EXTERNAL_SEARCH_TTL_SECONDS = 300

_logger = logging.getLogger(__name__)


@dataclass
class NutritionService:
    """Looks up foods on FDC."""

    fdc_client: FdcClient
    cache: Cache
    search_ttl_seconds: int = EXTERNAL_SEARCH_TTL_SECONDS
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 5) -> list[FdcFoodSummary]:
        """Search FDC, reusing results for the same query for a few minutes."""
        cache_key = f"fdc:search:{query.strip().lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            _logger.debug("FDC search cache hit: query=%s", query)
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(query, page_size=limit),
            action="search",
        )
        foods = [_parse_summary(food) for food in payload.get("foods", [])]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        _logger.info("FDC search: query=%s results=%s", query, len(foods))
        return foods

    async def get_food(self, fdc_id: int) -> FdcFoodDetails:
        """Return an FDC food with per-100 g nutrients."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FdcFoodDetails):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        serving_size = payload.get("servingSize")
        unit = str(payload.get("servingSizeUnit") or "g").lower()
        details = FdcFoodDetails(
            summary=_parse_summary(payload),
            per100g=_extract_per100g(payload.get("foodNutrients", [])),
            serving_size_g=(
                float(serving_size)
                if isinstance(serving_size, int | float) and unit == "g"
                else None
            ),
            serving_label=payload.get("householdServingFullText"),
        )
        self.cache.set(cache_key, details, ttl_seconds=self.food_ttl_seconds)
        return details

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                if attempt > self.retry_attempts:
                    raise
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    return str(status_code) if isinstance(status_code, int) else "n/a"


def _parse_summary(food: dict[str, object]) -> FdcFoodSummary:
    return FdcFoodSummary(
        fdc_id=int(food["fdcId"]),
        description=str(food.get("description", "")),
        brand_owner=food.get("brandOwner"),
        brand_name=food.get("brandName"),
        data_type=food.get("dataType"),
    )


def _extract_per100g(food_nutrients: list[dict[str, object]]) -> NutrientProfile:
    """Pick energy and macros out of FDC's nutrient list."""
    values = dict.fromkeys(_NUTRIENT_FIELDS.values(), 0.0)
    for nutrient in food_nutrients:
        info = nutrient.get("nutrient") or {}
        nutrient_id = info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount", nutrient.get("value"))
        field_name = _NUTRIENT_FIELDS.get(nutrient_id)
        if field_name and isinstance(amount, int | float):
            values[field_name] = max(float(amount), 0.0)
    return NutrientProfile(**values)
