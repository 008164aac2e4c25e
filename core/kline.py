"""Simulated daily candles anchored to a real price and a trend direction."""

from __future__ import annotations

import datetime

import numpy as np
import pandas as pd

from config.settings import TREND_THRESHOLD_PCT
from core.models import KLineData


UP = "up"
DOWN = "down"
FLAT = "flat"

# Shift of the uniform daily move, in units of volatility
TREND_BIAS = {UP: 0.2, DOWN: -0.2, FLAT: 0.0}
VOLATILITY_RATIO = 0.02
WICK_RATIO = 0.5


def trend_from_change(change_percent: float, threshold: float = TREND_THRESHOLD_PCT) -> str:
    """Map a daily change percent onto a trend tag."""
    if change_percent > threshold:
        return UP
    if change_percent < -threshold:
        return DOWN
    return FLAT


def generate_simulated_kline(
    days: int,
    current_price: float,
    trend: str,
    rng: np.random.Generator | None = None,
    today: datetime.date | None = None,
) -> list[KLineData]:
    """
    Build `days` candles ending today, oldest first.

    The walk runs backward from `current_price`: each candle closes at the
    running price and opens one random move earlier, and the open becomes the
    close of the previous day. Pass a seeded `rng` for reproducible output.
    """
    if trend not in TREND_BIAS:
        raise ValueError(f"Unknown trend tag: {trend!r}")
    if current_price <= 0:
        raise ValueError(f"Current price must be positive, got {current_price!r}")
    if days <= 0:
        return []

    rng = rng if rng is not None else np.random.default_rng()
    today = today or datetime.date.today()
    bias = TREND_BIAS[trend]

    candles: list[KLineData] = []
    price = float(current_price)
    for offset in range(days):
        date = today - datetime.timedelta(days=offset)
        volatility = price * VOLATILITY_RATIO
        change = (rng.random() - 0.5 + bias) * volatility

        close = price
        open_ = price - change
        high = max(open_, close) + rng.random() * volatility * WICK_RATIO
        low = min(open_, close) - rng.random() * volatility * WICK_RATIO

        candles.append(KLineData(date=date.strftime("%m-%d"), open=open_, close=close, high=high, low=low))
        price = open_

    candles.reverse()
    return candles


def kline_frame(candles: list[KLineData]) -> pd.DataFrame:
    """Return candles as an OHLC DataFrame for charting."""
    return pd.DataFrame(
        {
            "Date": [item.date for item in candles],
            "Open": [item.open for item in candles],
            "High": [item.high for item in candles],
            "Low": [item.low for item in candles],
            "Close": [item.close for item in candles],
        },
        columns=["Date", "Open", "High", "Low", "Close"],
    )
