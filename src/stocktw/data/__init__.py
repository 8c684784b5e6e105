"""Data layer exports for the StockTW dashboard."""

from .errors import (
    AllProxiesFailedError,
    FetchTimeoutError,
    InsufficientDataError,
    MarketDataError,
    NetworkError,
    ProxyHTTPError,
    ProxyShapeError,
)
from .schemas import LiveQuoteResult, MarketObservation, ObservationFrame, day_label
from .seed import initial_series

__all__ = [
    "AllProxiesFailedError",
    "FetchTimeoutError",
    "InsufficientDataError",
    "LiveQuoteResult",
    "MarketDataError",
    "MarketObservation",
    "NetworkError",
    "ObservationFrame",
    "ProxyHTTPError",
    "ProxyShapeError",
    "day_label",
    "initial_series",
]
