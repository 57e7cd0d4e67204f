"""
Data Ingestion - Debounced Symbol Search.

Type-ahead search where only the last query typed within the
debounce window reaches the provider. Each schedule() cancels the
pending search task and starts a new one.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.constants import SEARCH_DEBOUNCE_SECONDS
from core.exceptions import InsightsError
from data_sources.models import SymbolMatch


logger = logging.getLogger(__name__)

SearchFn = Callable[[str], Awaitable[list[SymbolMatch]]]
ResultsCallback = Callable[[str, list[SymbolMatch]], None]


class DebouncedSymbolSearch:
    """
    Cancel-and-reschedule debouncer around a search coroutine.

    Usage:
        search = DebouncedSymbolSearch(fetcher.search_symbols, on_results=show)
        search.schedule("APP")
        search.schedule("APPL")   # cancels the "APP" search
    """

    def __init__(
        self,
        search: SearchFn,
        on_results: ResultsCallback,
        delay: float = SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._search = search
        self._on_results = on_results
        self._delay = delay
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, keywords: str) -> None:
        """Replace any pending search with one for `keywords`."""
        self.cancel()
        if not keywords or not keywords.strip():
            self._on_results(keywords, [])
            return
        self._task = asyncio.get_running_loop().create_task(self._run(keywords))

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait for the pending search, if any, to finish."""
        task = self._task
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _run(self, keywords: str) -> None:
        await asyncio.sleep(self._delay)
        try:
            results = await self._search(keywords)
        except InsightsError as e:
            logger.warning(f"Symbol search failed for '{keywords}': {e}")
            results = []
        self._on_results(keywords, results)
