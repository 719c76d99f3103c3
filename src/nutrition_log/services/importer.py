"""Import foods from FoodData Central into the local catalog."""

import asyncio
import logging
from dataclasses import dataclass

from nutrition_log.domain.errors import CatalogUnavailableError
from nutrition_log.domain.foods import SOURCE_EXTERNAL, FoodRecord, ServingPreset
from nutrition_log.domain.nutrition import FdcFoodDetails
from nutrition_log.services.catalog import CatalogIndexer, CatalogStore
from nutrition_log.services.nutrition import NutritionService

_VERIFIED_DATA_TYPES = {"Foundation", "SR Legacy", "Survey (FNDDS)"}

_logger = logging.getLogger(__name__)


@dataclass
class CatalogImportService:
    """Copies FDC search hits into the catalog, skipping known foods."""

    nutrition_service: NutritionService
    store: CatalogStore
    indexer: CatalogIndexer

    async def import_foods(self, query: str, limit: int = 5) -> list[FoodRecord]:
        """Import up to ``limit`` FDC foods matching ``query``.

        A food whose name and brand are already in the catalog is skipped.
        Returns the newly inserted records.
        """
        summaries = await self.nutrition_service.search(query, limit=limit)
        if not summaries:
            return []

        state = await self.indexer.current()
        known = {_dedupe_key(food.name, food.brand) for food in state.snapshot}
        inserted: list[FoodRecord] = []
        for summary in summaries:
            details = await self.nutrition_service.get_food(summary.fdc_id)
            record = to_food_record(details)
            key = _dedupe_key(record.name, record.brand)
            if key in known:
                continue
            try:
                saved = await asyncio.to_thread(self.store.insert, record)
            except Exception as exc:
                _logger.exception("Failed to import FDC food %s", summary.fdc_id)
                raise CatalogUnavailableError(
                    "Imported food could not be saved"
                ) from exc
            known.add(key)
            inserted.append(saved)

        if inserted:
            self.indexer.mark_stale()
            await self.indexer.refresh()
        _logger.info(
            "FDC import: query=%s found=%s inserted=%s",
            query,
            len(summaries),
            len(inserted),
        )
        return inserted


def to_food_record(details: FdcFoodDetails) -> FoodRecord:
    """Convert an FDC food to an unsaved catalog record."""
    summary = details.summary
    servings: tuple[ServingPreset, ...] = ()
    if details.serving_size_g and details.serving_size_g > 0:
        label = details.serving_label or "1 serving"
        servings = (ServingPreset(label=label, grams=details.serving_size_g),)
    return FoodRecord(
        id=None,
        name=summary.description.strip() or f"FDC {summary.fdc_id}",
        brand=summary.brand_name or summary.brand_owner,
        tags=_tags_from_description(summary.description),
        per100g=details.per100g,
        servings=servings,
        source=SOURCE_EXTERNAL,
        verified=summary.data_type in _VERIFIED_DATA_TYPES,
        category=summary.data_type,
    )


def _dedupe_key(name: str, brand: str | None) -> tuple[str, str]:
    return name.strip().lower(), (brand or "").strip().lower()


def _tags_from_description(description: str) -> tuple[str, ...]:
    """FDC descriptions are comma-separated qualifiers, e.g. "Rice, white, cooked"."""
    parts = (part.strip().lower() for part in description.split(","))
    return tuple(part for part in parts if part)
