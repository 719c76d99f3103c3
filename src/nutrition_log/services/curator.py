"""Browse lists shown before a query is typed, and favorites."""

import asyncio
import logging
from dataclasses import dataclass, field

from nutrition_log.domain.errors import CatalogUnavailableError
from nutrition_log.domain.foods import SOURCE_USER, FoodRecord
from nutrition_log.services.catalog import CatalogIndexer, CatalogStore

BROWSE_LIST_LIMIT = 8

_logger = logging.getLogger(__name__)


@dataclass
class FavoritesCurator:
    """Maintains the popular and recently added lists."""

    store: CatalogStore
    indexer: CatalogIndexer
    limit: int = BROWSE_LIST_LIMIT
    popular: list[FoodRecord] = field(default_factory=list)
    recent: list[FoodRecord] = field(default_factory=list)

    async def load(self) -> None:
        """Refresh both lists from the current catalog."""
        state = await self.indexer.current()
        self.popular = popular_foods(state.snapshot, self.limit)
        self.recent = recent_foods(state.snapshot, self.limit)

    async def add_favorite(self, food: FoodRecord) -> FoodRecord:
        """Save a user-origin copy of ``food`` and rebuild the index.

        Favoriting the same food twice stores two copies.
        """
        try:
            saved = await asyncio.to_thread(self.store.insert, food.as_favorite())
        except Exception as exc:
            _logger.exception("Failed to add favorite: %s", food.name)
            raise CatalogUnavailableError("Favorite could not be saved") from exc
        self.indexer.mark_stale()
        state = await self.indexer.refresh()
        self.popular = popular_foods(state.snapshot, self.limit)
        _logger.info("Favorite added: id=%s name=%s", saved.id, saved.name)
        return saved


def popular_foods(
    snapshot: list[FoodRecord], limit: int = BROWSE_LIST_LIMIT
) -> list[FoodRecord]:
    """User-origin foods in catalog order."""
    return [food for food in snapshot if food.source == SOURCE_USER][:limit]


def recent_foods(
    snapshot: list[FoodRecord], limit: int = BROWSE_LIST_LIMIT
) -> list[FoodRecord]:
    """Most recently inserted foods, newest first."""
    ordered = sorted(
        (food for food in snapshot if food.id is not None),
        key=lambda food: food.id,
        reverse=True,
    )
    return ordered[:limit]
