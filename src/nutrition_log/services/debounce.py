"""Debounced, last-query-wins search for as-you-type input."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

from nutrition_log.domain.search import SearchOutcome

DEFAULT_DEBOUNCE_SECONDS = 0.15

_logger = logging.getLogger(__name__)


class Searcher(Protocol):
    """Anything that answers a query asynchronously."""

    async def search(self, query: str) -> SearchOutcome:
        """Return the outcome for a query."""


@dataclass
class DebouncedSearch:
    """Runs only the last query issued within an idle window.

    Each submission bumps a generation counter. A search starts once its
    debounce timer expires while it is still the latest submission, and its
    outcome is applied only if no newer query was issued meanwhile. Superseded
    searches are left to finish and their results are dropped.
    """

    searcher: Searcher
    delay_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    on_result: Callable[[str, SearchOutcome], Awaitable[None]] | None = None
    latest: SearchOutcome | None = None
    latest_query: str | None = None
    _generation: int = field(default=0, init=False)
    _timer: asyncio.Task[None] | None = field(default=None, init=False)
    _inflight: set[asyncio.Task[None]] = field(default_factory=set, init=False)

    @property
    def generation(self) -> int:
        return self._generation

    def submit(self, query: str) -> int:
        """Schedule ``query``, superseding any pending one. Returns its token."""
        self._generation += 1
        token = self._generation
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().create_task(
            self._wait_then_search(token, query)
        )
        return token

    async def wait_idle(self) -> None:
        """Wait for the pending timer and all in-flight searches."""
        while True:
            pending = [
                task
                for task in (self._timer, *self._inflight)
                if task is not None and not task.done()
            ]
            if not pending:
                return
            await asyncio.wait(pending)

    def close(self) -> None:
        """Cancel the pending timer and drop results of in-flight searches."""
        self._generation += 1
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()

    async def _wait_then_search(self, token: int, query: str) -> None:
        await asyncio.sleep(self.delay_seconds)
        if token != self._generation:
            return
        task = asyncio.get_running_loop().create_task(self._execute(token, query))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _execute(self, token: int, query: str) -> None:
        try:
            outcome = await self.searcher.search(query)
        except Exception:
            _logger.exception("Debounced search failed: query=%s", query)
            outcome = SearchOutcome()
        if token != self._generation:
            _logger.debug("Discarding stale results: query=%s", query)
            return
        self.latest = outcome
        self.latest_query = query
        if self.on_result is None:
            return
        try:
            await self.on_result(query, outcome)
        except Exception:
            _logger.exception("Delivering search results failed: query=%s", query)
