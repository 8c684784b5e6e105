"""Network and parsing providers for live quotes."""

from .base import PriceExtractor, ProxyDescriptor, ResponseShape
from .http import fetch_with_deadline
from .proxy import DEFAULT_PROXIES, ProxyRotationFetcher, fetch_html_via_proxy
from .yahoo import YahooPriceExtractor, extract_price

__all__ = [
    "DEFAULT_PROXIES",
    "PriceExtractor",
    "ProxyDescriptor",
    "ProxyRotationFetcher",
    "ResponseShape",
    "YahooPriceExtractor",
    "extract_price",
    "fetch_html_via_proxy",
    "fetch_with_deadline",
]
