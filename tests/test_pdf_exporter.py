import datetime

from core.kline import UP, generate_simulated_kline
from core.mock_data import MockStockAnalyst
from core.models import UserProfile
from ui.charts import render_kline_png
from ui.utils.pdf_exporter import build_risk_report_pdf, report_filename


def test_report_without_chart(rng):
    stock = MockStockAnalyst(rng=rng).analyze_stock_with_search("600519", UserProfile())
    pdf = build_risk_report_pdf(stock=stock, profile=UserProfile(name="张三"))
    assert pdf.startswith(b"%PDF")


def test_report_with_chart_is_larger(rng):
    stock = MockStockAnalyst(rng=rng).analyze_stock_with_search("600519", UserProfile())
    kline = generate_simulated_kline(30, stock.price, UP, rng=rng, today=datetime.date(2024, 3, 2))
    plain = build_risk_report_pdf(stock=stock, profile=UserProfile())
    charted = build_risk_report_pdf(stock=stock, profile=UserProfile(), kline_png=render_kline_png(kline, "k"))
    assert charted.startswith(b"%PDF")
    assert len(charted) > len(plain)


def test_filename_uses_sanitised_symbol(rng):
    from dataclasses import replace

    stock = MockStockAnalyst(rng=rng).analyze_stock_with_search("600519", UserProfile())
    today = datetime.datetime.now().strftime("%Y%m%d")
    assert report_filename(stock) == f"600519_risk_report_{today}.pdf"
    assert report_filename(replace(stock, symbol="../..")) == f"stock_risk_report_{today}.pdf"
