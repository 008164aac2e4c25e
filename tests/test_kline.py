import datetime

import numpy as np
import pytest

from core.kline import DOWN, FLAT, UP, generate_simulated_kline, kline_frame, trend_from_change


TODAY = datetime.date(2024, 3, 2)


@pytest.mark.parametrize("days", [1, 2, 30, 90])
def test_returns_exactly_requested_days(days, rng):
    candles = generate_simulated_kline(days, 100.0, FLAT, rng=rng, today=TODAY)
    assert len(candles) == days


@pytest.mark.parametrize("days", [0, -5])
def test_non_positive_days_yield_empty_series(days, rng):
    assert generate_simulated_kline(days, 100.0, UP, rng=rng) == []


def test_dates_run_oldest_to_newest_ending_today(rng):
    candles = generate_simulated_kline(4, 50.0, UP, rng=rng, today=TODAY)
    assert [item.date for item in candles] == ["02-28", "02-29", "03-01", "03-02"]


def test_latest_candle_closes_at_current_price(rng):
    candles = generate_simulated_kline(30, 1234.5, DOWN, rng=rng, today=TODAY)
    assert candles[-1].close == pytest.approx(1234.5)


def test_each_open_is_previous_close(rng):
    candles = generate_simulated_kline(30, 80.0, UP, rng=rng, today=TODAY)
    for earlier, later in zip(candles, candles[1:]):
        assert earlier.close == pytest.approx(later.open)


@pytest.mark.parametrize("trend", [UP, DOWN, FLAT])
def test_wicks_bound_every_body(trend):
    rng = np.random.default_rng(11)
    for _ in range(50):
        for candle in generate_simulated_kline(30, 250.0, trend, rng=rng, today=TODAY):
            assert candle.low <= min(candle.open, candle.close)
            assert candle.high >= max(candle.open, candle.close)


def test_seeded_generators_reproduce_series():
    first = generate_simulated_kline(30, 100.0, UP, rng=np.random.default_rng(5), today=TODAY)
    second = generate_simulated_kline(30, 100.0, UP, rng=np.random.default_rng(5), today=TODAY)
    assert first == second


def _mean_drift(trend: str, runs: int = 300) -> float:
    rng = np.random.default_rng(7)
    drifts = []
    for _ in range(runs):
        candles = generate_simulated_kline(30, 100.0, trend, rng=rng, today=TODAY)
        drifts.append((candles[-1].close - candles[0].close) / candles[0].close)
    return float(np.mean(drifts))


def test_up_trend_drifts_upward():
    assert _mean_drift(UP) > 0.05


def test_down_trend_drifts_downward():
    assert _mean_drift(DOWN) < -0.05


def test_flat_trend_has_no_meaningful_drift():
    assert abs(_mean_drift(FLAT)) < 0.01


def test_unknown_trend_is_rejected(rng):
    with pytest.raises(ValueError):
        generate_simulated_kline(5, 100.0, "sideways", rng=rng)


@pytest.mark.parametrize(
    ("change", "expected"),
    [(1.2, UP), (0.51, UP), (0.5, FLAT), (0.0, FLAT), (-0.5, FLAT), (-0.6, DOWN), (-3.0, DOWN)],
)
def test_trend_from_change(change, expected):
    assert trend_from_change(change) == expected


def test_kline_frame_columns(rng):
    candles = generate_simulated_kline(5, 10.0, FLAT, rng=rng, today=TODAY)
    frame = kline_frame(candles)
    assert list(frame.columns) == ["Date", "Open", "High", "Low", "Close"]
    assert len(frame) == 5
    assert frame["Date"].iloc[-1] == "03-02"


def test_kline_frame_empty():
    assert kline_frame([]).empty


@pytest.mark.parametrize("price", [0.0, -12.5])
def test_non_positive_price_is_rejected(price, rng):
    with pytest.raises(ValueError):
        generate_simulated_kline(30, price, FLAT, rng=rng, today=TODAY)
