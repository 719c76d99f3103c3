"""Search result models."""

from dataclasses import dataclass, field
from enum import StrEnum

from nutrition_log.domain.foods import FoodRecord


class SearchQuality(StrEnum):
    """Coarse quality tier of a completed search."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class SearchMethod(StrEnum):
    """Which path produced the results."""

    INDEX = "index"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RankedResult:
    """A matched food. Score is in [0, 1], lower is better; None when unscored."""

    food: FoodRecord
    score: float | None = None


@dataclass(frozen=True)
class QualityReport:
    """Classification of a completed search."""

    quality: SearchQuality
    total_found: int
    quality_kept: int
    threshold: float
    method: SearchMethod


@dataclass(frozen=True)
class SearchOutcome:
    """Results of one query plus its quality report."""

    results: list[RankedResult] = field(default_factory=list)
    quality: QualityReport | None = None

    @property
    def foods(self) -> list[FoodRecord]:
        return [result.food for result in self.results]
