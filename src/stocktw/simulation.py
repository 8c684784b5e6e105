"""Synthetic next-point generator used when live quotes are unreachable."""

from __future__ import annotations

import random
from datetime import date

from .data.schemas import MarketObservation, day_label

DEFAULT_PRICE_BOUND = 0.0015
DEFAULT_VIX_BOUND = 0.01


def _perturb(value: float, bound: float, rng: random.Random) -> float:
    return value + value * rng.uniform(-bound, bound)


def simulate_next(
        last: MarketObservation,
        *,
        rng: random.Random | None = None,
        today: date | None = None,
        price_bound: float = DEFAULT_PRICE_BOUND,
        vix_bound: float = DEFAULT_VIX_BOUND,
) -> MarketObservation:
    """Return a plausible observation for today derived from ``last``.

    Index and futures move by a uniform random fraction within
    ``±price_bound``, the volatility index within ``±vix_bound``. Margin
    balance and short interest are copied unchanged.
    """

    if price_bound < 0 or vix_bound < 0:
        raise ValueError("Perturbation bounds must be non-negative.")
    rng = rng or random.Random()
    return MarketObservation(
        date=day_label(today),
        index_price=_perturb(last.index_price, price_bound, rng),
        futures_price=_perturb(last.futures_price, price_bound, rng),
        volatility_index=_perturb(last.volatility_index, vix_bound, rng),
        margin_balance=last.margin_balance,
        short_interest=last.short_interest,
    )
