"""
Debounced Symbol Search Tests.

Uses a real (short) debounce delay; the search coroutine is a mock.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from data_ingestion.search import DebouncedSymbolSearch
from data_sources.exceptions import TransportError
from data_sources.models import SymbolMatch


APPLE = SymbolMatch(symbol="AAPL", name="Apple Inc", type="Equity", region="United States", currency="USD")


class TestDebounce:

    @pytest.mark.asyncio
    async def test_only_last_query_runs(self):
        search = AsyncMock(return_value=[APPLE])
        received = []
        debounced = DebouncedSymbolSearch(search, lambda q, r: received.append((q, r)), delay=0.01)

        debounced.schedule("A")
        debounced.schedule("AP")
        debounced.schedule("APPLE")
        await debounced.wait()

        search.assert_awaited_once_with("APPLE")
        assert received == [("APPLE", [APPLE])]
        assert debounced.pending is False

    @pytest.mark.asyncio
    async def test_blank_query_clears_immediately(self):
        search = AsyncMock(return_value=[APPLE])
        received = []
        debounced = DebouncedSymbolSearch(search, lambda q, r: received.append((q, r)), delay=0.01)

        debounced.schedule("APP")
        debounced.schedule("  ")
        await asyncio.sleep(0.03)

        search.assert_not_awaited()
        assert received == [("  ", [])]

    @pytest.mark.asyncio
    async def test_cancel(self):
        search = AsyncMock(return_value=[APPLE])
        debounced = DebouncedSymbolSearch(search, lambda q, r: None, delay=0.01)

        debounced.schedule("APPLE")
        assert debounced.pending is True
        debounced.cancel()
        await asyncio.sleep(0.03)

        search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_search_failure_yields_empty_results(self):
        search = AsyncMock(side_effect=TransportError("down", status_code=503))
        received = []
        debounced = DebouncedSymbolSearch(search, lambda q, r: received.append((q, r)), delay=0)

        debounced.schedule("APPLE")
        await debounced.wait()

        assert received == [("APPLE", [])]

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            DebouncedSymbolSearch(AsyncMock(), lambda q, r: None, delay=-1)
