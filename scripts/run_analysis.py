"""Run one Stock Radar analysis from the terminal and print the parsed result."""

from __future__ import annotations

import argparse
import datetime
import logging
import os
import sys

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from config import settings
from core.analyst import StockAnalyst
from core.kline import generate_simulated_kline, trend_from_change
from core.mock_data import MockStockAnalyst
from core.models import StockData, UserProfile


def _configure_logging() -> None:
    """Configure file logging for terminal runs."""
    os.makedirs(settings.LOGS_DIR, exist_ok=True)

    log_file = os.path.join(settings.LOGS_DIR, "stockradar.log")
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.INFO)

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # Keep logs focused on analysis results; HTTP clients can be noisy.
    logging.getLogger("google_genai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _print_stock(stock: StockData) -> None:
    """Print the analysis in plain text."""
    print(f"\n=== {stock.name} ({stock.symbol}) ===")
    print(f"Price: {stock.price:.2f} | Change: {stock.change_percent:+.2f}% | Risk: {stock.risk_level}")
    print(f"News: {stock.recent_situation}")
    print("Risk report:")
    print(f"  {stock.risk_report}")

    print("Platforms:")
    for platform in sorted(stock.platforms, key=lambda item: item.match_rate, reverse=True):
        print(
            f"- {platform.name}: match {platform.match_rate} | acc {platform.accuracy_score} | "
            f"wisdom {platform.community_wisdom} | impact {platform.market_impact} | "
            f"fit {platform.user_fit} | {platform.recent_signal}"
        )

    if stock.grounding_sources:
        print("Sources:")
        for source in stock.grounding_sources:
            print(f"- {source.title}: {source.uri}")

    if stock.parse_issues:
        print("Defaulted fields:")
        for issue in stock.parse_issues:
            detail = f" ({issue.raw})" if issue.raw else ""
            print(f"- {issue.field}: {issue.kind}{detail}")

    print(f"Illustration: {'yes' if stock.generated_image else 'none'}")


def main(argv: list[str] | None = None) -> int:
    _configure_logging()
    logger = logging.getLogger("stockradar.runner")

    parser = argparse.ArgumentParser(description="Run one Stock Radar analysis")
    parser.add_argument("query", help="Stock code or name, e.g. 600519")
    parser.add_argument("--capital", type=int, default=1, choices=range(0, 4), help="Capital bucket 0-3")
    parser.add_argument("--risk", type=int, default=1, choices=range(0, 3), help="Risk tolerance bucket 0-2")
    parser.add_argument("--mock", action="store_true", help="Use offline mock data")
    parser.add_argument("--strict", action="store_true", help="Reject responses that miss template fields")
    parser.add_argument("--days", type=int, default=settings.KLINE_DAYS, help="Simulated K-line days to print")
    args = parser.parse_args(argv)

    profile = UserProfile(capital=args.capital, risk_tolerance=args.risk)
    analyst = MockStockAnalyst() if args.mock or settings.USE_MOCK_DATA else StockAnalyst(strict=args.strict)

    start = datetime.datetime.now(datetime.timezone.utc)
    logger.info("Analysis run started at %s for %r", start.isoformat(), args.query)

    stock = analyst.analyze_stock_with_search(args.query, profile)
    if stock is None:
        print("No analysis available. Check the API key, the query spelling, or retry later.")
        logger.warning("Analysis run produced no result for %r", args.query)
        return 1

    _print_stock(stock)

    kline = generate_simulated_kline(args.days, stock.price, trend_from_change(stock.change_percent))
    if kline:
        print(f"\nSimulated K-line ({len(kline)} days, {trend_from_change(stock.change_percent)}):")
        for candle in kline:
            print(f"  {candle.date} O {candle.open:.2f} H {candle.high:.2f} L {candle.low:.2f} C {candle.close:.2f}")

    end = datetime.datetime.now(datetime.timezone.utc)
    logger.info("Analysis run ended at %s", end.isoformat())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
