"""Curated starter catalog."""

import asyncio
import logging

from nutrition_log.domain.foods import (
    SOURCE_EXTERNAL,
    FoodRecord,
    NutrientProfile,
    ServingPreset,
)
from nutrition_log.services.catalog import CatalogStore

_logger = logging.getLogger(__name__)

# name, brand, category, tags, (kcal, protein, carbs, fat) per 100 g, servings
_SEED_ROWS = [
    (
        "Pintola Chocolate Oats",
        "Pintola",
        "breakfast",
        ("oats", "chocolate", "breakfast", "cereal"),
        (380, 12, 65, 8),
        (("1 cup", 100), ("1/2 cup", 50), ("1 bowl", 150)),
    ),
    (
        "Poha (Flattened Rice)",
        "Generic",
        "breakfast",
        ("poha", "rice", "breakfast", "indian"),
        (360, 7, 78, 1),
        (("1 cup", 100), ("1 plate", 200), ("1 bowl", 150)),
    ),
    (
        "Upma (Semolina)",
        "Generic",
        "breakfast",
        ("upma", "semolina", "breakfast", "indian"),
        (340, 10, 70, 2),
        (("1 cup", 100), ("1 plate", 200), ("1 bowl", 150)),
    ),
    (
        "Idli",
        "Generic",
        "breakfast",
        ("idli", "rice", "lentil", "breakfast", "indian"),
        (120, 4, 25, 0.5),
        (("1 piece", 50), ("2 pieces", 100), ("3 pieces", 150)),
    ),
    (
        "Dosa",
        "Generic",
        "breakfast",
        ("dosa", "rice", "lentil", "breakfast", "indian"),
        (150, 5, 30, 1),
        (("1 piece", 80), ("2 pieces", 160), ("1 plate", 200)),
    ),
    (
        "Aloo Paratha",
        "Generic",
        "breakfast",
        ("paratha", "potato", "wheat", "breakfast", "indian"),
        (320, 9, 48, 12),
        (("1 piece", 80), ("2 pieces", 160), ("1 plate", 240)),
    ),
    (
        "Basmati Rice",
        "Generic",
        "grains",
        ("rice", "basmati", "grain", "indian"),
        (350, 7, 78, 1),
        (("1 cup cooked", 150), ("1/2 cup cooked", 75), ("1 plate", 200)),
    ),
    (
        "Whole Wheat Flour (Atta)",
        "Generic",
        "grains",
        ("wheat", "flour", "atta", "grain"),
        (340, 13, 72, 2),
        (("1 cup", 120), ("1 tbsp", 8)),
    ),
    (
        "Roti (Chapati)",
        "Generic",
        "grains",
        ("roti", "chapati", "wheat", "bread", "indian"),
        (297, 11, 46, 7.5),
        (("1 piece", 40), ("2 pieces", 80)),
    ),
    (
        "Toor Dal (Cooked)",
        "Generic",
        "pulses",
        ("dal", "lentil", "toor", "protein", "indian"),
        (116, 7, 20, 0.4),
        (("1 katori", 150), ("1 cup", 200)),
    ),
    (
        "Rajma (Kidney Beans Curry)",
        "Generic",
        "pulses",
        ("rajma", "kidney beans", "beans", "curry", "indian"),
        (140, 6.5, 19, 4.5),
        (("1 katori", 150), ("1 bowl", 250)),
    ),
    (
        "Chana Masala",
        "Generic",
        "pulses",
        ("chana", "chickpea", "curry", "indian"),
        (164, 8, 22, 5),
        (("1 katori", 150), ("1 bowl", 250)),
    ),
    (
        "Paneer",
        "Amul",
        "dairy",
        ("paneer", "cottage cheese", "dairy", "protein"),
        (265, 18, 1.2, 21),
        (("1 cube", 25), ("100 g block", 100)),
    ),
    (
        "Curd (Dahi)",
        "Generic",
        "dairy",
        ("curd", "dahi", "yogurt", "dairy"),
        (60, 3.1, 4.7, 3.3),
        (("1 katori", 150), ("1 cup", 240)),
    ),
    (
        "Toned Milk",
        "Amul",
        "dairy",
        ("milk", "dairy", "beverage"),
        (58, 3, 4.7, 3),
        (("1 glass", 250), ("1 cup", 240)),
    ),
    (
        "Chicken Breast (Cooked)",
        "Generic",
        "protein",
        ("chicken", "poultry", "protein", "meat"),
        (165, 31, 0, 3.6),
        (("1 piece", 120), ("100 g", 100)),
    ),
    (
        "Chicken Curry",
        "Generic",
        "protein",
        ("chicken", "curry", "meat", "indian"),
        (150, 14, 5, 8),
        (("1 katori", 150), ("1 bowl", 250)),
    ),
    (
        "Boiled Egg",
        "Generic",
        "protein",
        ("egg", "protein", "breakfast"),
        (155, 13, 1.1, 11),
        (("1 large egg", 50), ("2 eggs", 100)),
    ),
    (
        "Banana",
        "Generic",
        "fruits",
        ("banana", "fruit", "snack"),
        (89, 1.1, 23, 0.3),
        (("1 medium", 118), ("1 small", 100)),
    ),
    (
        "Samosa",
        "Generic",
        "snacks",
        ("samosa", "snack", "fried", "indian"),
        (262, 4.5, 30, 14),
        (("1 piece", 60),),
    ),
]


def seed_foods() -> list[FoodRecord]:
    """Return the starter catalog as unsaved records."""
    return [
        FoodRecord(
            id=None,
            name=name,
            brand=brand,
            category=category,
            tags=tags,
            per100g=NutrientProfile(*per100g),
            servings=tuple(ServingPreset(label, grams) for label, grams in servings),
            source=SOURCE_EXTERNAL,
            verified=True,
        )
        for name, brand, category, tags, per100g, servings in _SEED_ROWS
    ]


async def seed_catalog(store: CatalogStore) -> int:
    """Insert the starter catalog if the store is empty. Returns rows added."""
    existing = await asyncio.to_thread(store.read_all)
    if existing:
        return 0
    foods = seed_foods()
    for food in foods:
        await asyncio.to_thread(store.insert, food)
    _logger.info("Seeded catalog with %s foods", len(foods))
    return len(foods)
