"""Data schemas for the rolling market series."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, ClassVar, Iterable, Sequence

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

OBSERVATION_COLUMNS: tuple[str, ...] = (
    "date",
    "twii",
    "wtx",
    "vix",
    "margin",
    "short",
)


def day_label(today: date | None = None) -> str:
    """Return the ``MM/DD`` label used as the series key for ``today``."""

    today = today or date.today()
    return today.strftime("%m/%d")


def is_usable_price(value: float | None) -> bool:
    """True when ``value`` is a real, non-zero quote."""

    if value is None:
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number != 0.0


class MarketObservation(BaseModel):
    """One dated row of the rolling market series.

    Numeric fields reject ``NaN``/``inf`` so a committed row never carries a
    missing value. Field aliases match the short keys the dashboard charts use.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
        str_strip_whitespace=True,
    )

    date: str = Field(..., min_length=1, description="Calendar-day label, e.g. ``12/16``.")
    index_price: float = Field(..., alias="twii")
    futures_price: float = Field(..., alias="wtx")
    volatility_index: float = Field(..., alias="vix")
    margin_balance: float = Field(..., alias="margin")
    short_interest: float = Field(..., alias="short")

    def to_row(self) -> dict[str, float | str]:
        """Return the observation keyed by :data:`OBSERVATION_COLUMNS`."""

        return self.model_dump(by_alias=True)

    @property
    def spread(self) -> float:
        """Futures minus index."""

        return self.futures_price - self.index_price


@dataclass(slots=True)
class LiveQuoteResult:
    """Prices scraped during one acquisition cycle; any field may be missing."""

    index_price: float | None = None
    futures_price: float | None = None
    volatility_index: float | None = None

    @property
    def has_primary(self) -> bool:
        return is_usable_price(self.index_price) or is_usable_price(self.futures_price)

    def as_dict(self) -> dict[str, float | None]:
        return {
            "index_price": self.index_price,
            "futures_price": self.futures_price,
            "volatility_index": self.volatility_index,
        }


@dataclass(slots=True)
class ObservationFrame:
    """Helper to build :class:`pandas.DataFrame` views of the rolling series."""

    columns: ClassVar[tuple[str, ...]] = OBSERVATION_COLUMNS

    @classmethod
    def from_observations(cls, observations: Iterable[MarketObservation]) -> pd.DataFrame:
        """Convert observations to a DataFrame, preserving series order."""

        return pd.DataFrame([obs.to_row() for obs in observations], columns=cls.columns)

    @classmethod
    def latest_summary(cls, observations: Sequence[MarketObservation]) -> dict[str, Any]:
        """Return the latest row with day-over-day diffs and the futures spread.

        With a single row the previous row is the row itself, so every diff is 0.
        """

        if not observations:
            raise ValueError("Series must contain at least one observation.")
        df = cls.from_observations(observations[-2:])
        numeric = df.drop(columns=["date"])
        latest = numeric.iloc[-1]
        previous = numeric.iloc[-2] if len(numeric) > 1 else latest
        diffs = (latest - previous).round(4)
        return {
            "date": str(df.iloc[-1]["date"]),
            "values": {key: float(val) for key, val in latest.items()},
            "diffs": {key: float(val) for key, val in diffs.items()},
            "spread": float(latest["wtx"] - latest["twii"]),
        }
