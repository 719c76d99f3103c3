"""Serving resolution and nutrient scaling."""

import re
from collections.abc import Iterable

from nutrition_log.domain.errors import InvalidServingError
from nutrition_log.domain.foods import FoodRecord
from nutrition_log.domain.servings import (
    CustomServing,
    NamedServing,
    NutrientPayload,
    ServingSelection,
)

DEFAULT_SERVING_GRAMS = 100
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def default_serving(food: FoodRecord) -> ServingSelection:
    """Preselect the food's first serving preset, or 100 g."""
    if food.servings:
        preset = food.servings[0]
        return NamedServing(label=preset.label, grams=preset.grams)
    return NamedServing(label=f"{DEFAULT_SERVING_GRAMS}g", grams=DEFAULT_SERVING_GRAMS)


def named_serving(food: FoodRecord, label: str) -> NamedServing:
    """Select one of the food's presets by label."""
    for preset in food.servings:
        if preset.label == label:
            return NamedServing(label=preset.label, grams=preset.grams)
    raise InvalidServingError(f"{food.name!r} has no serving {label!r}")


def custom_serving_from_text(value: str) -> CustomServing:
    """Parse a typed gram amount; unparseable or zero input means 100 g."""
    match = _LEADING_INT.match(value)
    grams = int(match.group(1)) if match else 0
    return CustomServing(grams=grams or DEFAULT_SERVING_GRAMS)


def resolve_serving(
    food: FoodRecord, selection: ServingSelection, quantity: float = 1.0
) -> NutrientPayload:
    """Scale the food's per-100 g values to the selected amount."""
    if quantity <= 0:
        raise InvalidServingError("Quantity must be greater than 0")
    grams = selection.grams * quantity
    if grams <= 0:
        raise InvalidServingError("Serving must resolve to more than 0 g")
    per100g = food.per100g
    return NutrientPayload(
        grams=grams,
        kcal=per100g.kcal * grams / 100,
        protein=per100g.protein * grams / 100,
        carbs=per100g.carbs * grams / 100,
        fat=per100g.fat * grams / 100,
    )


def sum_payloads(payloads: Iterable[NutrientPayload]) -> NutrientPayload:
    """Add up unrounded payloads, e.g. for a multi-item meal."""
    total = NutrientPayload(0.0, 0.0, 0.0, 0.0, 0.0)
    for payload in payloads:
        total = NutrientPayload(
            grams=total.grams + payload.grams,
            kcal=total.kcal + payload.kcal,
            protein=total.protein + payload.protein,
            carbs=total.carbs + payload.carbs,
            fat=total.fat + payload.fat,
        )
    return total
