"""Process-local catalog store."""

import threading
from dataclasses import dataclass, field, replace

from nutrition_log.domain.foods import FoodRecord
from nutrition_log.services.catalog import CatalogStore


@dataclass
class InMemoryCatalogStore(CatalogStore):
    """Catalog kept in a list; ids are assigned in insertion order."""

    foods: list[FoodRecord] = field(default_factory=list)
    _next_id: int = field(default=1, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def __post_init__(self) -> None:
        assigned = [food.id for food in self.foods if food.id is not None]
        self._next_id = max(assigned, default=0) + 1

    def read_all(self) -> list[FoodRecord]:
        with self._lock:
            return list(self.foods)

    def insert(self, record: FoodRecord) -> FoodRecord:
        with self._lock:
            saved = replace(record, id=self._next_id)
            self._next_id += 1
            self.foods.append(saved)
            return saved
