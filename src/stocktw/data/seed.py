"""Seed dataset and quote-page locations for the dashboard."""

from __future__ import annotations

from .schemas import MarketObservation

INDEX_URL = "https://tw.stock.yahoo.com/quote/%5ETWII"
FUTURES_URL = "https://tw.stock.yahoo.com/future/WTX&"
VIX_URL = "https://tw.stock.yahoo.com/quote/%5EVIX"

_SEED_ROWS: tuple[tuple[str, float, float, float, float, float], ...] = (
    ("12/01", 27342.53, 27380.00, 14.80, 3193.60, 301654),
    ("12/02", 27564.27, 27600.00, 14.50, 3197.37, 305582),
    ("12/03", 27793.04, 27820.00, 14.20, 3214.25, 302856),
    ("12/04", 27795.71, 27805.00, 14.10, 3228.26, 299991),
    ("12/05", 27980.89, 28020.00, 14.30, 3229.17, 303648),
    ("12/08", 28303.78, 28350.00, 14.60, 3247.39, 310486),
    ("12/09", 28182.60, 28200.00, 14.90, 3268.84, 313708),
    ("12/10", 28400.73, 28450.00, 15.20, 3276.95, 303179),
    ("12/11", 28024.75, 28050.00, 15.80, 3266.72, 307829),
    ("12/12", 28198.02, 28240.00, 15.70, 3293.50, 307405),
    ("12/15", 27866.94, 27910.00, 16.20, 3318.59, 304195),
    ("12/16", 27536.66, 27624.00, 16.50, 3325.10, 302500),
)


def initial_series() -> list[MarketObservation]:
    """Return a fresh copy of the 12-row seed series."""

    return [
        MarketObservation(
            date=label,
            twii=twii,
            wtx=wtx,
            vix=vix,
            margin=margin,
            short=short,
        )
        for label, twii, wtx, vix, margin, short in _SEED_ROWS
    ]
