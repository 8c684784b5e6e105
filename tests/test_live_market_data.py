import asyncio

import pytest

from stocktw.data.errors import AllProxiesFailedError, InsufficientDataError
from stocktw.data.live import DEFAULT_SYMBOL_URLS, fetch_live_market_data
from stocktw.data.providers.yahoo import YahooPriceExtractor


def _page(price: str) -> str:
    return f"<html><body><span class='Fz(32px) Fw(b)'>{price}</span></body></html>"


class FakeFetcher:
    """Returns canned pages per URL; URLs mapped to ``None`` fail."""

    def __init__(self, pages):
        self.pages = pages
        self.started: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_html(self, target_url: str) -> str:
        self.started.append(target_url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1
        page = self.pages.get(target_url)
        if page is None:
            raise AllProxiesFailedError(target_url)
        return page


def _pages(index=None, futures=None, vix=None):
    return {
        DEFAULT_SYMBOL_URLS["index"]: index,
        DEFAULT_SYMBOL_URLS["futures"]: futures,
        DEFAULT_SYMBOL_URLS["vix"]: vix,
    }


def test_all_three_symbols_parsed():
    fetcher = FakeFetcher(_pages(_page("27,600.00"), _page("27,650.00"), _page("16.80")))

    result = asyncio.run(fetch_live_market_data(fetcher, YahooPriceExtractor()))

    assert result.index_price == pytest.approx(27600.0)
    assert result.futures_price == pytest.approx(27650.0)
    assert result.volatility_index == pytest.approx(16.8)
    assert fetcher.max_in_flight == 3


def test_volatility_failure_is_tolerated():
    fetcher = FakeFetcher(_pages(_page("27,600.00"), _page("27,650.00"), None))

    result = asyncio.run(fetch_live_market_data(fetcher))

    assert result.volatility_index is None
    assert result.index_price == pytest.approx(27600.0)


def test_one_primary_symbol_is_enough():
    fetcher = FakeFetcher(_pages(_page("27,600.00"), None, _page("16.80")))

    result = asyncio.run(fetch_live_market_data(fetcher))

    assert result.index_price == pytest.approx(27600.0)
    assert result.futures_price is None


def test_unparsable_page_counts_as_unavailable():
    fetcher = FakeFetcher(_pages(_page("27,600.00"), "<html>moved</html>", _page("16.80")))

    result = asyncio.run(fetch_live_market_data(fetcher))

    assert result.futures_price is None


def test_both_primary_symbols_missing_raises():
    fetcher = FakeFetcher(_pages(None, "<html>blocked</html>", _page("16.80")))

    with pytest.raises(InsufficientDataError) as excinfo:
        asyncio.run(fetch_live_market_data(fetcher))

    assert excinfo.value.partial.volatility_index == pytest.approx(16.8)
    assert len(fetcher.started) == 3


def test_total_network_failure_raises():
    fetcher = FakeFetcher(_pages())

    with pytest.raises(InsufficientDataError):
        asyncio.run(fetch_live_market_data(fetcher))


def test_symbol_urls_can_be_overridden():
    urls = {"index": "https://a.test", "futures": "https://b.test", "vix": "https://c.test"}
    fetcher = FakeFetcher({
        "https://a.test": _page("1.00"),
        "https://b.test": _page("2.00"),
        "https://c.test": _page("3.00"),
    })

    result = asyncio.run(fetch_live_market_data(fetcher, symbol_urls=urls))

    assert (result.index_price, result.futures_price, result.volatility_index) == (1.0, 2.0, 3.0)


def test_unexpected_errors_propagate():
    class BrokenFetcher:
        async def fetch_html(self, target_url: str) -> str:
            raise RuntimeError("bug")

    with pytest.raises(RuntimeError):
        asyncio.run(fetch_live_market_data(BrokenFetcher()))
