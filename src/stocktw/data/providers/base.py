"""Building blocks shared by the proxy fetcher and price extractors."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol
from urllib.parse import quote

# Characters left unescaped by a browser's encodeURIComponent.
_URI_COMPONENT_SAFE = "-_.!~*'()"


class ResponseShape(str, Enum):
    """How a proxy hands back the upstream page."""

    JSON_WRAPPED = "json"
    RAW_TEXT = "text"


@dataclass(frozen=True, slots=True)
class ProxyDescriptor:
    """A CORS relay that wraps a target URL.

    Attributes
    ----------
    name:
        Short label used in logs and errors, e.g. ``"allorigins"``.
    url_template:
        Proxied URL with a ``{target}`` placeholder receiving the
        percent-encoded target URL.
    response_shape:
        :class:`ResponseShape` of the proxy's body.
    """

    name: str
    url_template: str
    response_shape: ResponseShape = ResponseShape.RAW_TEXT

    def build_url(self, target_url: str) -> str:
        return self.url_template.format(target=quote(target_url, safe=_URI_COMPONENT_SAFE))


class PriceExtractor(Protocol):
    """Interface for pulling a quote out of a page's HTML."""

    def extract_price(self, html: str) -> float:
        """Return the price found in ``html`` or ``0.0`` when none is found."""

        raise NotImplementedError
