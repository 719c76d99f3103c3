"""Supabase implementation of the food catalog."""

import logging
from dataclasses import dataclass

from supabase import Client

from nutrition_log.domain.errors import CatalogUnavailableError
from nutrition_log.domain.foods import (
    SOURCE_EXTERNAL,
    FoodRecord,
    NutrientProfile,
    ServingPreset,
)
from nutrition_log.services.catalog import CatalogStore

_PAGE_SIZE = 1000

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseCatalogStore(CatalogStore):
    """Supabase-backed catalog table."""

    client: Client
    table: str = "foods"
    page_size: int = _PAGE_SIZE

    def read_all(self) -> list[FoodRecord]:
        """Return every valid food ordered by id, one page at a time.

        Rows that do not form a valid food are logged and skipped.
        """
        foods: list[FoodRecord] = []
        start = 0
        while True:
            response = (
                self.client.table(self.table)
                .select("*")
                .order("id")
                .range(start, start + self.page_size - 1)
                .execute()
            )
            rows = response.data or []
            for row in rows:
                try:
                    foods.append(_parse_food(row))
                except (KeyError, TypeError, ValueError):
                    _logger.warning(
                        "Skipping invalid catalog row: id=%s",
                        row.get("id"),
                        exc_info=True,
                    )
            if len(rows) < self.page_size:
                return foods
            start += self.page_size

    def insert(self, record: FoodRecord) -> FoodRecord:
        """Insert a food and return the stored row."""
        response = self.client.table(self.table).insert(_to_row(record)).execute()
        if not response.data:
            raise CatalogUnavailableError("Failed to insert food")
        return _parse_food(response.data[0])


def _to_row(record: FoodRecord) -> dict[str, object]:
    return {
        "name": record.name,
        "brand": record.brand,
        "category": record.category,
        "tags": list(record.tags),
        "kcal": record.per100g.kcal,
        "protein": record.per100g.protein,
        "carbs": record.per100g.carbs,
        "fat": record.per100g.fat,
        "servings": [
            {"label": serving.label, "grams": serving.grams}
            for serving in record.servings
        ],
        "source": record.source,
        "verified": record.verified,
    }


def _parse_food(row: dict[str, object]) -> FoodRecord:
    """Parse a catalog row into a domain model."""
    servings = row.get("servings") or []
    return FoodRecord(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        brand=row.get("brand"),
        category=row.get("category"),
        tags=tuple(str(tag) for tag in row.get("tags") or []),
        per100g=NutrientProfile(
            kcal=float(row.get("kcal") or 0.0),
            protein=float(row.get("protein") or 0.0),
            carbs=float(row.get("carbs") or 0.0),
            fat=float(row.get("fat") or 0.0),
        ),
        servings=tuple(
            ServingPreset(label=str(item["label"]), grams=float(item["grams"]))
            for item in servings
        ),
        source=str(row.get("source") or SOURCE_EXTERNAL),
        verified=bool(row.get("verified", False)),
    )
