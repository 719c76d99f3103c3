"""FoodData Central lookup models."""

from dataclasses import dataclass

from nutrition_log.domain.foods import NutrientProfile


@dataclass(frozen=True)
class FdcFoodSummary:
    """Search hit from FDC."""

    fdc_id: int
    description: str
    brand_owner: str | None
    brand_name: str | None
    data_type: str | None


@dataclass(frozen=True)
class FdcFoodDetails:
    """FDC food with its per-100 g nutrients."""

    summary: FdcFoodSummary
    per100g: NutrientProfile
    serving_size_g: float | None
    serving_label: str | None = None
