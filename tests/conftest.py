"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from nutrition_log.adapters.fdc_client import FdcClient
from nutrition_log.adapters.memory_catalog_store import InMemoryCatalogStore
from nutrition_log.config import Settings
from nutrition_log.containers import AppContainer, build_container
from nutrition_log.domain.foods import (
    SOURCE_EXTERNAL,
    FoodRecord,
    NutrientProfile,
    ServingPreset,
)
from nutrition_log.domain.search import RankedResult
from nutrition_log.services.catalog import CatalogStore
from nutrition_log.services.fuzzy_index import SearchIndex


def make_food(  # noqa: PLR0913
    name: str,
    *,
    food_id: int | None = None,
    tags: tuple[str, ...] = (),
    kcal: float = 100,
    protein: float = 10,
    carbs: float = 10,
    fat: float = 5,
    servings: tuple[tuple[str, float], ...] = (),
    source: str = SOURCE_EXTERNAL,
    brand: str | None = None,
) -> FoodRecord:
    return FoodRecord(
        id=food_id,
        name=name,
        brand=brand,
        tags=tags,
        per100g=NutrientProfile(kcal=kcal, protein=protein, carbs=carbs, fat=fat),
        servings=tuple(ServingPreset(label, grams) for label, grams in servings),
        source=source,
    )


def store_with(*foods: FoodRecord) -> InMemoryCatalogStore:
    store = InMemoryCatalogStore()
    for food in foods:
        store.insert(food)
    return store


@dataclass
class FailingCatalogStore(CatalogStore):
    """Catalog store whose reads and/or inserts raise."""

    fail_reads: bool = True
    fail_inserts: bool = True
    foods: list[FoodRecord] = field(default_factory=list)

    def read_all(self) -> list[FoodRecord]:
        if self.fail_reads:
            raise ConnectionError("catalog offline")
        return list(self.foods)

    def insert(self, record: FoodRecord) -> FoodRecord:
        if self.fail_inserts:
            raise ConnectionError("catalog offline")
        self.foods.append(record)
        return record


@dataclass
class StubIndex(SearchIndex):
    """Index returning canned hits and recording queries."""

    hits: list[RankedResult] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    def search(self, text: str) -> list[RankedResult]:
        self.calls.append(text)
        return list(self.hits)


@dataclass
class RaisingIndex(SearchIndex):
    """Index that fails on every query."""

    def search(self, text: str) -> list[RankedResult]:
        raise RuntimeError("corrupt index")


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with in-memory responses."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 171077,
                    "description": "Chicken, broiler, breast, roasted",
                    "dataType": "SR Legacy",
                },
                {
                    "fdcId": 2345,
                    "description": "Greek Yogurt",
                    "brandOwner": "Fage",
                    "brandName": "Fage",
                    "dataType": "Branded",
                },
            ]
        }
    )
    foods: dict[int, dict[str, object]] = field(
        default_factory=lambda: {
            171077: {
                "fdcId": 171077,
                "description": "Chicken, broiler, breast, roasted",
                "dataType": "SR Legacy",
                "foodNutrients": [
                    {"nutrient": {"id": 1008}, "amount": 165},
                    {"nutrient": {"id": 1003}, "amount": 31},
                    {"nutrient": {"id": 1004}, "amount": 3.6},
                    {"nutrient": {"id": 1005}, "amount": 0},
                ],
            },
            2345: {
                "fdcId": 2345,
                "description": "Greek Yogurt",
                "brandOwner": "Fage",
                "brandName": "Fage",
                "dataType": "Branded",
                "servingSize": 170,
                "servingSizeUnit": "g",
                "householdServingFullText": "1 container",
                "foodNutrients": [
                    {"nutrientId": 1008, "amount": 59},
                    {"nutrientId": 1003, "amount": 10.3},
                    {"nutrientId": 1004, "amount": 0.4},
                    {"nutrientId": 1005, "amount": 3.6},
                ],
            },
        }
    )
    search_calls: int = 0
    food_calls: int = 0

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        self.search_calls += 1
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        return self.foods[fdc_id]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url=None,
        supabase_service_key=None,
        fdc_api_key=None,
        search_debounce_ms=20,
        seed_catalog=True,
    )


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_container(settings)
