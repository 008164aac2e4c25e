import datetime

import pytest

from core.kline import FLAT, generate_simulated_kline
from core.mock_data import MockStockAnalyst
from core.models import UserProfile
from ui.charts import build_kline_chart, build_radar_chart, render_kline_png
from ui.models import build_platform_detail_view, build_stock_view, platform_commentary


@pytest.fixture
def stock(rng):
    return MockStockAnalyst(rng=rng).analyze_stock_with_search("600519", UserProfile())


@pytest.fixture
def kline(rng):
    return generate_simulated_kline(30, 1850.0, FLAT, rng=rng, today=datetime.date(2024, 3, 2))


def test_platforms_ranked_by_match_rate(stock):
    view = build_stock_view(stock, [], with_charts=False)
    rates = [item.match_rate for item in view.ranked_platforms]
    assert rates == sorted(rates, reverse=True)
    assert view.ranked_platforms[0].name == "雪球"
    assert view.kline_chart_html is None


def test_change_text_and_tone(stock):
    from dataclasses import replace

    rising = build_stock_view(replace(stock, change_percent=1.5), [], with_charts=False)
    falling = build_stock_view(replace(stock, change_percent=-0.25), [], with_charts=False)

    assert rising.change_text == "+1.50%"
    assert rising.change_tone == "bullish"
    assert rising.trend == "up"
    assert falling.change_text == "-0.25%"
    assert falling.change_tone == "bearish"
    assert falling.trend == "flat"


def test_stock_view_embeds_kline_chart(stock, kline):
    view = build_stock_view(stock, kline)
    assert view.kline_chart_html.startswith("<div")


def test_detail_view_cards(stock, kline):
    platform = stock.platform("p-1")
    detail = build_platform_detail_view(stock, platform, UserProfile(), kline, with_charts=False)

    assert [card.label for card in detail.stat_cards] == ["综合推荐率", "历史准确率", "用户适配度", "近期信号"]
    assert detail.stat_cards[0].value == f"{platform.match_rate}%"
    assert detail.stat_cards[3].value == platform.signal_label
    assert f"{stock.price:.2f}" in detail.chart_note
    assert detail.radar_chart_html is None


def test_commentary_follows_profile_and_platform(stock):
    xueqiu = stock.platform("p-2")
    text = platform_commentary(stock, xueqiu, UserProfile(risk_tolerance=0))
    assert "保守型" in text
    assert "Smart Money" in text
    assert "积极/买入" in text

    other = platform_commentary(stock, stock.platform("p-1"), UserProfile(risk_tolerance=2))
    assert "稳健/激进型" in other
    assert "Hot Money" in other


def test_chart_builders_return_divs(stock, kline):
    assert build_kline_chart(kline, title="k").startswith("<div")
    assert build_radar_chart(stock.platform("p-1")).startswith("<div")


def test_png_render(kline):
    assert render_kline_png(kline, "test").startswith(b"\x89PNG")
