"""Tests for importing FDC foods into the catalog."""

import asyncio

import pytest

from nutrition_log.domain.errors import CatalogUnavailableError
from nutrition_log.domain.foods import NutrientProfile
from nutrition_log.domain.nutrition import FdcFoodDetails, FdcFoodSummary
from nutrition_log.services.cache import InMemoryCache
from nutrition_log.services.catalog import CatalogIndexer
from nutrition_log.services.importer import CatalogImportService, to_food_record
from nutrition_log.services.nutrition import NutritionService
from nutrition_log.services.search import QueryPlanner
from tests.conftest import FailingCatalogStore, FakeFdcClient, make_food, store_with


def _service(store, client=None) -> CatalogImportService:
    return CatalogImportService(
        nutrition_service=NutritionService(client or FakeFdcClient(), InMemoryCache()),
        store=store,
        indexer=CatalogIndexer(store),
    )


def test_import_inserts_and_indexes_foods() -> None:
    store = store_with(make_food("Idli"))
    service = _service(store)
    planner = QueryPlanner(service.indexer)

    async def scenario():  # type: ignore[no-untyped-def]
        inserted = await service.import_foods("chicken")
        outcome = await planner.search("greek yogurt")
        return inserted, outcome

    inserted, outcome = asyncio.run(scenario())

    assert [food.name for food in inserted] == [
        "Chicken, broiler, breast, roasted",
        "Greek Yogurt",
    ]
    assert [food.id for food in inserted] == [2, 3]
    assert outcome.foods[0].name == "Greek Yogurt"


def test_import_skips_known_name_and_brand() -> None:
    store = store_with(make_food("greek yogurt", brand="FAGE"))
    service = _service(store)

    inserted = asyncio.run(service.import_foods("yogurt"))

    assert [food.name for food in inserted] == ["Chicken, broiler, breast, roasted"]
    assert len(store.read_all()) == 2


def test_import_with_no_hits() -> None:
    store = store_with()
    service = _service(store, FakeFdcClient(search_payload={"foods": []}))

    assert asyncio.run(service.import_foods("nothing")) == []


def test_import_insert_failure() -> None:
    service = _service(FailingCatalogStore(fail_reads=False))

    with pytest.raises(CatalogUnavailableError):
        asyncio.run(service.import_foods("chicken"))


def test_to_food_record_maps_fdc_fields() -> None:
    details = FdcFoodDetails(
        summary=FdcFoodSummary(
            fdc_id=1,
            description="Rice, white, cooked",
            brand_owner=None,
            brand_name=None,
            data_type="Foundation",
        ),
        per100g=NutrientProfile(kcal=130, protein=2.7, carbs=28, fat=0.3),
        serving_size_g=158,
    )

    record = to_food_record(details)

    assert record.id is None
    assert record.tags == ("rice", "white", "cooked")
    assert record.verified is True
    assert record.category == "Foundation"
    assert record.servings[0].label == "1 serving"
    assert record.servings[0].grams == 158


def test_branded_foods_are_not_verified() -> None:
    details = FdcFoodDetails(
        summary=FdcFoodSummary(
            fdc_id=2,
            description="Protein Bar",
            brand_owner="Acme Foods",
            brand_name=None,
            data_type="Branded",
        ),
        per100g=NutrientProfile(kcal=400, protein=30, carbs=40, fat=12),
        serving_size_g=None,
    )

    record = to_food_record(details)

    assert record.verified is False
    assert record.brand == "Acme Foods"
    assert record.servings == ()
