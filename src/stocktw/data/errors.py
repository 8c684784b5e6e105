"""Exceptions raised by the live-data acquisition pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .schemas import LiveQuoteResult


class MarketDataError(Exception):
    """Base class for acquisition failures."""


class NetworkError(MarketDataError):
    """A single proxied request did not yield usable content."""

    def __init__(self, message: str, *, url: str | None = None, proxy: str | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.proxy = proxy


class FetchTimeoutError(NetworkError):
    """The request exceeded its deadline and was abandoned."""

    def __init__(self, url: str, timeout: float, *, proxy: str | None = None) -> None:
        super().__init__(
            f"Request to {url} timed out after {timeout:g}s", url=url, proxy=proxy)
        self.timeout = timeout


class ProxyHTTPError(NetworkError):
    """The proxy answered with a non-success status code."""

    def __init__(self, status_code: int, *, url: str | None = None, proxy: str | None = None) -> None:
        super().__init__(f"Proxy error: {status_code}", url=url, proxy=proxy)
        self.status_code = status_code


class ProxyShapeError(NetworkError):
    """A JSON-wrapped proxy response lacked the ``contents`` field."""


class AllProxiesFailedError(MarketDataError):
    """Every configured proxy failed for one target page."""

    def __init__(self, target_url: str, last_error: BaseException | None = None) -> None:
        detail = f": {last_error}" if last_error is not None else ""
        super().__init__(f"All proxies failed for {target_url}{detail}")
        self.target_url = target_url
        self.last_error = last_error


class InsufficientDataError(MarketDataError):
    """Neither the index nor the futures price could be obtained."""

    def __init__(self, partial: "LiveQuoteResult", message: str | None = None) -> None:
        super().__init__(
            message or "Failed to parse index and futures prices; page layout may have changed.")
        self.partial = partial
