"""Merge policy for the in-memory rolling market series."""

from __future__ import annotations

from datetime import date
from typing import Sequence

from .data.schemas import LiveQuoteResult, MarketObservation, day_label, is_usable_price


def _pick(candidate: float | None, fallback: float) -> float:
    return float(candidate) if is_usable_price(candidate) else fallback


def build_observation(
        last: MarketObservation,
        update: LiveQuoteResult | MarketObservation,
        *,
        today: date | None = None,
) -> MarketObservation:
    """Resolve ``update`` against ``last`` into a committable observation.

    Missing or zero prices fall back to ``last``. Margin balance and short
    interest always come from ``last``. A live result is labelled with
    today's date; a ready-made observation keeps its own label.
    """

    label = update.date if isinstance(update, MarketObservation) else day_label(today)
    return MarketObservation(
        date=label,
        index_price=_pick(update.index_price, last.index_price),
        futures_price=_pick(update.futures_price, last.futures_price),
        volatility_index=_pick(update.volatility_index, last.volatility_index),
        margin_balance=last.margin_balance,
        short_interest=last.short_interest,
    )


def merge_observation(
        series: Sequence[MarketObservation],
        update: LiveQuoteResult | MarketObservation,
        *,
        today: date | None = None,
) -> list[MarketObservation]:
    """Return a new series with ``update`` committed as today's row.

    The last row is replaced when it already carries today's label,
    otherwise the new row is appended. The input sequence is not modified.
    """

    if not series:
        raise ValueError("Series must contain at least one observation.")
    last = series[-1]
    entry = build_observation(last, update, today=today)
    merged = list(series)
    if last.date == entry.date:
        merged[-1] = entry
    else:
        merged.append(entry)
    return merged
