from config import settings
from core.analyst import StockAnalyst
from core.mock_data import MOCK_SOURCES, MockStockAnalyst, build_analyst
from core.models import UserProfile


def test_code_query_gets_default_name(rng):
    stock = MockStockAnalyst(rng=rng).analyze_stock_with_search("600519", UserProfile())

    assert stock.name == "贵州茅台"
    assert stock.symbol == "600519"
    assert 1800 <= stock.price <= 1900
    assert -2.5 <= stock.change_percent <= 2.5
    assert [item.name for item in stock.platforms] == ["东方财富", "雪球", "同花顺"]
    assert stock.parse_issues == ()
    assert stock.grounding_sources == MOCK_SOURCES


def test_ticker_query_is_upper_cased(rng):
    stock = MockStockAnalyst(rng=rng).analyze_stock_with_search("aapl", UserProfile())
    assert stock.symbol == "AAPL"
    assert stock.name == "aapl"


def test_name_query_keeps_name(rng):
    stock = MockStockAnalyst(rng=rng).analyze_stock_with_search("贵州茅台", UserProfile())
    assert stock.name == "贵州茅台"
    assert stock.symbol == "600519"


def test_blank_query_yields_nothing(rng):
    assert MockStockAnalyst(rng=rng).analyze_stock_with_search("  ", UserProfile()) is None


def test_risk_tolerance_tilts_match_rates(rng):
    analyst = MockStockAnalyst(rng=rng)
    cautious = analyst.analyze_stock_with_search("600519", UserProfile(risk_tolerance=0))
    bold = analyst.analyze_stock_with_search("600519", UserProfile(risk_tolerance=2))

    assert bold.platform("p-1").match_rate > cautious.platform("p-1").match_rate
    assert bold.platform("p-2").match_rate < cautious.platform("p-2").match_rate


def test_build_analyst_picks_mode():
    assert isinstance(build_analyst(use_mock=True), MockStockAnalyst)
    real = build_analyst(use_mock=False)
    assert isinstance(real, StockAnalyst)
    assert real.available == bool(settings.API_KEY)
