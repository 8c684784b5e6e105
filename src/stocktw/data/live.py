"""Fetch the index, futures and volatility quotes for today."""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping, Optional, Protocol

from .errors import InsufficientDataError, MarketDataError
from .providers.base import PriceExtractor
from .providers.proxy import ProxyRotationFetcher
from .providers.yahoo import YahooPriceExtractor
from .schemas import LiveQuoteResult, is_usable_price
from .seed import FUTURES_URL, INDEX_URL, VIX_URL

logger = logging.getLogger(__name__)

SYMBOL_FIELDS: tuple[str, ...] = ("index", "futures", "vix")
DEFAULT_SYMBOL_URLS: dict[str, str] = {
    "index": INDEX_URL,
    "futures": FUTURES_URL,
    "vix": VIX_URL,
}


class HtmlFetcher(Protocol):
    async def fetch_html(self, target_url: str) -> str:
        ...


async def fetch_live_market_data(
        fetcher: Optional[HtmlFetcher] = None,
        extractor: Optional[PriceExtractor] = None,
        symbol_urls: Optional[Mapping[str, str]] = None,
) -> LiveQuoteResult:
    """Scrape the three quote pages concurrently and parse their prices.

    Each page is fetched independently; one failure never cancels the others.
    A page that could not be fetched or yielded no price is reported as
    ``None``. The call fails with :class:`InsufficientDataError` only when both
    the index and the futures price are missing; a missing volatility quote is
    tolerated.
    """

    fetcher = fetcher or ProxyRotationFetcher()
    extractor = extractor or YahooPriceExtractor()
    urls = dict(DEFAULT_SYMBOL_URLS)
    if symbol_urls:
        urls.update(symbol_urls)

    outcomes = await asyncio.gather(
        *(fetcher.fetch_html(urls[field]) for field in SYMBOL_FIELDS),
        return_exceptions=True,
    )

    prices: dict[str, float | None] = {}
    for field, outcome in zip(SYMBOL_FIELDS, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, MarketDataError):
                raise outcome
            logger.warning("Quote page for %s unavailable: %s", field, outcome)
            prices[field] = None
            continue
        price = extractor.extract_price(outcome)
        if not is_usable_price(price):
            logger.warning("No price found in %s page (%d chars)", field, len(outcome))
            prices[field] = None
            continue
        prices[field] = float(price)

    result = LiveQuoteResult(
        index_price=prices["index"],
        futures_price=prices["futures"],
        volatility_index=prices["vix"],
    )
    if not result.has_primary:
        raise InsufficientDataError(result)
    logger.info("Live quotes: %s", result.as_dict())
    return result
