"""Price extraction from Yahoo Finance Taiwan quote pages."""

from __future__ import annotations

import math
import re
from typing import Iterable, Sequence

from lxml import etree
from lxml import html as lxml_html

# Yahoo renders the headline quote with atomic CSS classes; the desktop
# layout uses Fz(32px), responsive layouts use the other sizes.
DEFAULT_CLASS_MARKERS: tuple[str, ...] = ("Fz(32px)", "Fz(36px)", "Fz(28px)", "Fz(24px)")
DEFAULT_ATTRIBUTE_MARKERS: tuple[tuple[str, str], ...] = (
    ("data-test", "qsp-price"),
    ("data-testid", "qsp-price"),
)

_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)")


def parse_price_text(text: str | None) -> float:
    """Parse the leading number of ``text`` after removing thousands separators.

    Returns ``0.0`` when nothing numeric is found.
    """

    if not text:
        return 0.0
    cleaned = text.replace(",", "").strip()
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return 0.0
    value = float(match.group(0))
    if not math.isfinite(value):
        return 0.0
    return value


class YahooPriceExtractor:
    """Locate the headline price on a quote page.

    Heuristics run in order and the first parsable, non-zero match wins:
    elements whose ``class`` contains one of ``class_markers``, elements
    carrying one of ``attribute_markers``, then ``<meta itemprop="price">``.
    """

    def __init__(
            self,
            class_markers: Sequence[str] = DEFAULT_CLASS_MARKERS,
            attribute_markers: Sequence[tuple[str, str]] = DEFAULT_ATTRIBUTE_MARKERS,
    ) -> None:
        self.class_markers = tuple(class_markers)
        self.attribute_markers = tuple(attribute_markers)

    def extract_price(self, html: str) -> float:
        if not html or not html.strip():
            return 0.0
        try:
            document = lxml_html.fromstring(html)
        except (etree.ParserError, ValueError):
            return 0.0

        for marker in self.class_markers:
            price = _first_price(document.xpath(
                "//*[contains(@class, $marker)]", marker=marker))
            if price:
                return price

        for attribute, value in self.attribute_markers:
            price = _first_price(document.xpath(
                "//*[@*[name()=$attr]=$value]", attr=attribute, value=value))
            if price:
                return price

        for content in document.xpath("//meta[@itemprop='price']/@content"):
            price = parse_price_text(str(content))
            if price:
                return price
        return 0.0


def _first_price(elements: Iterable[lxml_html.HtmlElement]) -> float:
    for element in elements:
        price = parse_price_text(element.text_content())
        if price:
            return price
    return 0.0


_DEFAULT_EXTRACTOR = YahooPriceExtractor()


def extract_price(html: str) -> float:
    """Return the headline price in ``html`` or ``0.0`` when none is found."""

    return _DEFAULT_EXTRACTOR.extract_price(html)
