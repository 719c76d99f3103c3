"""Serving selections and scaled nutrient payloads."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from nutrition_log.domain.errors import InvalidServingError


@dataclass(frozen=True)
class NamedServing:
    """One of the food's serving presets."""

    label: str
    grams: float

    def __post_init__(self) -> None:
        if self.grams <= 0:
            raise InvalidServingError(f"Serving {self.label!r} must be > 0 g")


@dataclass(frozen=True)
class CustomServing:
    """A gram amount entered by the user."""

    grams: float

    def __post_init__(self) -> None:
        if self.grams <= 0:
            raise InvalidServingError("Custom amount must be > 0 g")

    @property
    def label(self) -> str:
        return f"{self.grams:g}g"


ServingSelection = NamedServing | CustomServing


@dataclass(frozen=True)
class DisplayNutrients:
    """Nutrients rounded for display."""

    kcal: int
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class NutrientPayload:
    """Unrounded nutrients for a resolved gram amount."""

    grams: float
    kcal: float
    protein: float
    carbs: float
    fat: float

    def rounded(self) -> DisplayNutrients:
        """Round energy to a whole unit and macros to one decimal."""
        return DisplayNutrients(
            kcal=int(_round_half_up(self.kcal, "1")),
            protein=float(_round_half_up(self.protein, "0.1")),
            carbs=float(_round_half_up(self.carbs, "0.1")),
            fat=float(_round_half_up(self.fat, "0.1")),
        )


def _round_half_up(value: float, step: str) -> Decimal:
    return Decimal(repr(value)).quantize(Decimal(step), rounding=ROUND_HALF_UP)
