"""Approximate-match index over the food catalog.

Scoring follows the weighted-field model used by the catalog search UI:
each field value gets an error score in [0, 1] (0 is an exact match), values
above ``threshold`` do not match, and a record's score is the product of its
matching values' scores raised to ``key weight * field-length norm``. Records
are returned best first.
"""

import logging
import math
import re
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from fuzzywuzzy import fuzz

from nutrition_log.domain.foods import FoodRecord
from nutrition_log.domain.search import RankedResult

_EPSILON = sys.float_info.epsilon
_MIN_SCORE = 0.001
_TOKEN = re.compile(r"[^ ]+")

_logger = logging.getLogger(__name__)


class SearchIndex(Protocol):
    """Anything that can rank catalog foods for a query."""

    def search(self, text: str) -> list[RankedResult]:
        """Return matches sorted by ascending score."""


@dataclass(frozen=True)
class IndexKey:
    """A searchable field and its relative weight."""

    name: str
    weight: float


@dataclass(frozen=True)
class FuzzyIndexOptions:
    """Matching configuration for the catalog index."""

    keys: tuple[IndexKey, ...] = (IndexKey("name", 1.0), IndexKey("tags", 0.5))
    threshold: float = 0.4
    min_match_char_length: int = 2
    distance: int = 50
    ignore_location: bool = True


@dataclass(frozen=True)
class _FieldValue:
    key_weight: float
    text: str
    norm: float


@dataclass
class FuzzyIndex(SearchIndex):
    """Precomputed lowercase field values for every catalog food."""

    foods: list[FoodRecord]
    options: FuzzyIndexOptions = field(default_factory=FuzzyIndexOptions)
    _entries: list[list[_FieldValue]] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        total_weight = sum(key.weight for key in self.options.keys)
        norms: dict[int, float] = {}
        for food in self.foods:
            values: list[_FieldValue] = []
            for key in self.options.keys:
                weight = key.weight / total_weight
                for raw in _field_values(food, key.name):
                    text = raw.lower()
                    tokens = len(_TOKEN.findall(text)) or 1
                    if tokens not in norms:
                        norms[tokens] = round(1 / math.sqrt(tokens), 3)
                    values.append(_FieldValue(weight, text, norms[tokens]))
            self._entries.append(values)

    def search(self, text: str) -> list[RankedResult]:
        """Score every food against ``text`` and return matches best first."""
        pattern = text.lower()
        if len(pattern) < self.options.min_match_char_length:
            return []
        scored: list[tuple[float, int]] = []
        for position, values in enumerate(self._entries):
            total = 1.0
            matched = False
            for value in values:
                score = self._score_value(pattern, value.text)
                if score is None:
                    continue
                matched = True
                base = _EPSILON if score == 0 else score
                total *= base ** (value.key_weight * value.norm)
            if matched:
                scored.append((total, position))
        scored.sort()
        return [
            RankedResult(food=self.foods[position], score=score)
            for score, position in scored
        ]

    def _score_value(self, pattern: str, text: str) -> float | None:
        """Return the error score of ``pattern`` in ``text`` or None."""
        options = self.options
        if len(text) < options.min_match_char_length:
            return None
        if pattern == text:
            return 0.0
        if len(pattern) <= len(text):
            similarity = fuzz.partial_ratio(pattern, text)
        else:
            similarity = fuzz.ratio(pattern, text)
        score = 1 - similarity / 100
        if not options.ignore_location:
            location = text.find(pattern[: options.min_match_char_length])
            proximity = max(location, 0)
            if options.distance:
                score += proximity / options.distance
            elif proximity:
                score = 1.0
        if score > options.threshold:
            return None
        return max(_MIN_SCORE, score)


def build_index(
    foods: Sequence[FoodRecord], options: FuzzyIndexOptions | None = None
) -> FuzzyIndex:
    """Build a fresh index from a catalog snapshot."""
    index = FuzzyIndex(list(foods), options or FuzzyIndexOptions())
    _logger.debug("Built fuzzy index over %s foods", len(index.foods))
    return index


def _field_values(food: FoodRecord, key: str) -> list[str]:
    value = getattr(food, key, None)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [item for item in value if isinstance(item, str)]
