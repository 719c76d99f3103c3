"""Tests for serving resolution and nutrient scaling."""

import pytest

from nutrition_log.domain.errors import InvalidServingError
from nutrition_log.domain.servings import CustomServing, NamedServing, NutrientPayload
from nutrition_log.services.servings import (
    custom_serving_from_text,
    default_serving,
    named_serving,
    resolve_serving,
    sum_payloads,
)
from tests.conftest import make_food


def _chicken():
    return make_food(
        "Chicken Breast (Cooked)",
        kcal=165,
        protein=31,
        carbs=0,
        fat=3.6,
        servings=(("1 piece", 120), ("100 g", 100)),
    )


def test_custom_grams_scale_linearly() -> None:
    payload = resolve_serving(_chicken(), CustomServing(grams=150))

    assert payload.grams == 150
    assert payload.kcal == pytest.approx(247.5)
    assert payload.protein == pytest.approx(46.5)
    assert payload.fat == pytest.approx(5.4)
    assert payload.rounded().kcal == 248


def test_named_preset() -> None:
    food = _chicken()

    payload = resolve_serving(food, named_serving(food, "1 piece"))

    assert payload.grams == 120
    assert payload.kcal == pytest.approx(198)


def test_default_serving_is_first_preset() -> None:
    assert default_serving(_chicken()) == NamedServing(label="1 piece", grams=120)


def test_default_serving_without_presets_is_100g() -> None:
    selection = default_serving(make_food("Plain Rice"))

    assert selection.grams == 100
    assert selection.label == "100g"


def test_unknown_preset_label() -> None:
    with pytest.raises(InvalidServingError):
        named_serving(_chicken(), "1 bucket")


@pytest.mark.parametrize("grams", [0, -10])
def test_non_positive_custom_amount_rejected(grams: float) -> None:
    with pytest.raises(InvalidServingError):
        CustomServing(grams=grams)


@pytest.mark.parametrize(
    ("text", "grams"),
    [("150", 150), (" 75g", 75), ("250.7", 250), ("abc", 100), ("", 100), ("0", 100)],
)
def test_custom_amount_from_text(text: str, grams: float) -> None:
    assert custom_serving_from_text(text).grams == grams


def test_negative_typed_amount_rejected() -> None:
    with pytest.raises(InvalidServingError):
        custom_serving_from_text("-20")


def test_quantity_multiplies_serving() -> None:
    food = _chicken()

    payload = resolve_serving(food, named_serving(food, "1 piece"), quantity=2)

    assert payload.grams == 240
    assert payload.kcal == pytest.approx(396)


def test_non_positive_quantity_rejected() -> None:
    with pytest.raises(InvalidServingError):
        resolve_serving(_chicken(), CustomServing(grams=100), quantity=0)


def test_resolution_does_not_mutate_food() -> None:
    food = _chicken()
    before = food.per100g

    first = resolve_serving(food, CustomServing(grams=80))
    second = resolve_serving(food, CustomServing(grams=80))

    assert food.per100g == before
    assert first == second


def test_rounding_is_half_up() -> None:
    payload = NutrientPayload(grams=50, kcal=0.5, protein=0.25, carbs=2.45, fat=0.05)

    display = payload.rounded()

    assert display.kcal == 1
    assert display.protein == 0.3
    assert display.carbs == 2.5
    assert display.fat == 0.1


def test_totals_sum_unrounded_values() -> None:
    food = make_food("Rice", kcal=130, protein=2.7, carbs=28, fat=0.3)
    parts = [resolve_serving(food, CustomServing(grams=33)) for _ in range(3)]

    total = sum_payloads(parts)

    assert total.grams == 99
    assert total.kcal == pytest.approx(128.7)
    assert total.rounded().kcal == 129
    assert sum(part.rounded().kcal for part in parts) == 129


def test_sum_of_nothing_is_zero() -> None:
    assert sum_payloads([]) == NutrientPayload(0.0, 0.0, 0.0, 0.0, 0.0)
