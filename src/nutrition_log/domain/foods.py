"""Domain models for the food catalog."""

from dataclasses import dataclass, replace

SOURCE_USER = "user"
SOURCE_EXTERNAL = "external"


@dataclass(frozen=True)
class NutrientProfile:
    """Energy and macronutrients for a fixed amount of food."""

    kcal: float
    protein: float
    carbs: float
    fat: float

    def __post_init__(self) -> None:
        for name in ("kcal", "protein", "carbs", "fat"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class ServingPreset:
    """Named serving size, e.g. "1 cup" -> 240 g."""

    label: str
    grams: float

    def __post_init__(self) -> None:
        if self.grams <= 0:
            raise ValueError(f"Serving {self.label!r} must weigh more than 0 g")


@dataclass(frozen=True)
class FoodRecord:
    """A food in the local catalog with values per 100 g."""

    id: int | None
    name: str
    per100g: NutrientProfile
    brand: str | None = None
    tags: tuple[str, ...] = ()
    servings: tuple[ServingPreset, ...] = ()
    source: str = SOURCE_EXTERNAL
    verified: bool = False
    category: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Food name must not be empty")

    def as_favorite(self) -> "FoodRecord":
        """Return an unsaved user-origin copy of this food."""
        return replace(self, id=None, source=SOURCE_USER, verified=True)
