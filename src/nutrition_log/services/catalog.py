"""Catalog snapshot and index lifecycle."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from nutrition_log.domain.errors import CatalogUnavailableError
from nutrition_log.domain.foods import FoodRecord
from nutrition_log.services.fuzzy_index import SearchIndex, build_index

_logger = logging.getLogger(__name__)


class CatalogStore(Protocol):
    """Persistence interface for the food catalog."""

    def read_all(self) -> list[FoodRecord]:
        """Return every food in insertion order."""

    def insert(self, record: FoodRecord) -> FoodRecord:
        """Insert a food and return it with its assigned id."""


@dataclass(frozen=True)
class CatalogState:
    """A catalog snapshot and the index built from it.

    ``index`` is None when the last build failed.
    """

    snapshot: list[FoodRecord]
    index: SearchIndex | None

    def find(self, food_id: int) -> FoodRecord | None:
        """Return the food with ``food_id`` from the snapshot, if present."""
        for food in self.snapshot:
            if food.id == food_id:
                return food
        return None


@dataclass
class CatalogIndexer:
    """Owns the current index and rebuilds it when the catalog changes."""

    store: CatalogStore
    index_factory: Callable[[Sequence[FoodRecord]], SearchIndex] = build_index
    _state: CatalogState | None = field(default=None, init=False)
    _version: int = field(default=0, init=False)
    _built_version: int = field(default=-1, init=False)

    @property
    def is_stale(self) -> bool:
        return self._state is None or self._built_version != self._version

    def mark_stale(self) -> None:
        """Record that the catalog changed since the last build."""
        self._version += 1

    async def current(self) -> CatalogState:
        """Return the index for the latest snapshot, rebuilding if stale."""
        if self.is_stale:
            return await self.refresh()
        return self._state

    async def refresh(self) -> CatalogState:
        """Re-read the catalog and rebuild the index."""
        version = self._version
        try:
            snapshot = await asyncio.to_thread(self.store.read_all)
        except Exception as exc:
            _logger.exception("Failed to read food catalog")
            raise CatalogUnavailableError("Food catalog could not be read") from exc

        index: SearchIndex | None
        try:
            index = await asyncio.to_thread(self.index_factory, snapshot)
        except Exception:
            _logger.exception(
                "Failed to build search index over %s foods", len(snapshot)
            )
            index = None

        if version >= self._built_version:
            self._state = CatalogState(snapshot=snapshot, index=index)
            self._built_version = version
            _logger.info(
                "Catalog index rebuilt: foods=%s version=%s", len(snapshot), version
            )
        return CatalogState(snapshot=snapshot, index=index)
