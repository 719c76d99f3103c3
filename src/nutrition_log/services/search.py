"""Query planning: index search, quality filtering and substring fallback."""

import logging
from dataclasses import dataclass

from nutrition_log.domain.foods import FoodRecord
from nutrition_log.domain.search import (
    QualityReport,
    RankedResult,
    SearchMethod,
    SearchOutcome,
    SearchQuality,
)
from nutrition_log.services.catalog import CatalogIndexer

QUALITY_THRESHOLD = 0.5
MAX_INDEX_RESULTS = 20
MAX_FALLBACK_RESULTS = 10
MIN_FALLBACK_QUERY_LENGTH = 2
HIGH_QUALITY_MIN_KEPT = 11
MEDIUM_QUALITY_MIN_KEPT = 6

_logger = logging.getLogger(__name__)


@dataclass
class QueryPlanner:
    """Turns one query into ranked foods and a quality report."""

    indexer: CatalogIndexer
    quality_threshold: float = QUALITY_THRESHOLD
    max_results: int = MAX_INDEX_RESULTS
    fallback_limit: int = MAX_FALLBACK_RESULTS
    min_fallback_length: int = MIN_FALLBACK_QUERY_LENGTH

    async def search(self, query: str) -> SearchOutcome:
        """Search the catalog. Never raises; failures yield no results."""
        text = query.strip()
        if not text:
            return SearchOutcome()

        try:
            state = await self.indexer.current()
        except Exception:
            _logger.exception("Search skipped, catalog unavailable: query=%s", text)
            return SearchOutcome()

        if state.index is None:
            _logger.warning("No search index, using substring fallback: %s", text)
            return self._fallback(text, state.snapshot)

        try:
            hits = state.index.search(text)
        except Exception:
            _logger.exception("Index search failed: query=%s", text)
            return SearchOutcome()

        kept = [
            hit
            for hit in hits
            if hit.score is not None and hit.score < self.quality_threshold
        ][: self.max_results]
        if not kept:
            return self._fallback(text, state.snapshot)

        _logger.debug(
            "Index search: query=%s found=%s kept=%s", text, len(hits), len(kept)
        )
        return SearchOutcome(
            results=kept,
            quality=QualityReport(
                quality=classify_quality(len(kept)),
                total_found=len(hits),
                quality_kept=len(kept),
                threshold=self.quality_threshold,
                method=SearchMethod.INDEX,
            ),
        )

    def _fallback(self, text: str, snapshot: list[FoodRecord]) -> SearchOutcome:
        """Plain case-insensitive substring match on names, in catalog order."""
        if len(text) < self.min_fallback_length:
            return SearchOutcome()
        needle = text.lower()
        matches = [
            RankedResult(food=food)
            for food in snapshot
            if needle in food.name.lower()
        ][: self.fallback_limit]
        if not matches:
            _logger.debug("No matches: query=%s", text)
            return SearchOutcome()
        return SearchOutcome(
            results=matches,
            quality=QualityReport(
                quality=SearchQuality.LOW,
                total_found=len(matches),
                quality_kept=len(matches),
                threshold=self.quality_threshold,
                method=SearchMethod.FALLBACK,
            ),
        )


def classify_quality(kept: int) -> SearchQuality:
    """Tier an index result count."""
    if kept >= HIGH_QUALITY_MIN_KEPT:
        return SearchQuality.HIGH
    if kept >= MEDIUM_QUALITY_MIN_KEPT:
        return SearchQuality.MEDIUM
    return SearchQuality.LOW
