import random
from datetime import date

import pytest

from stocktw.data.seed import initial_series
from stocktw.simulation import simulate_next

TODAY = date(2024, 12, 17)


def test_simulated_point_stays_within_bounds():
    last = initial_series()[-1]
    rng = random.Random(7)

    for _ in range(500):
        point = simulate_next(last, rng=rng, today=TODAY)
        assert abs(point.index_price / last.index_price - 1) <= 0.0015 + 1e-12
        assert abs(point.futures_price / last.futures_price - 1) <= 0.0015 + 1e-12
        assert abs(point.volatility_index / last.volatility_index - 1) <= 0.01 + 1e-12
        assert point.margin_balance == last.margin_balance
        assert point.short_interest == last.short_interest
        assert point.date == "12/17"


def test_configured_bound_is_respected():
    last = initial_series()[-1]
    rng = random.Random(11)

    for _ in range(200):
        point = simulate_next(last, rng=rng, today=TODAY, price_bound=0.003, vix_bound=0.0)
        assert abs(point.index_price / last.index_price - 1) <= 0.003 + 1e-12
        assert point.volatility_index == pytest.approx(last.volatility_index)


def test_seeded_generator_is_reproducible():
    last = initial_series()[-1]

    first = simulate_next(last, rng=random.Random(3), today=TODAY)
    second = simulate_next(last, rng=random.Random(3), today=TODAY)

    assert first == second


def test_negative_bound_rejected():
    with pytest.raises(ValueError):
        simulate_next(initial_series()[-1], price_bound=-0.1)
