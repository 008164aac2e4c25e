"""Offline stand-in for the Gemini analyst, for demos without an API key."""

from __future__ import annotations

import logging

import numpy as np

from config import settings
from core.analyst import StockAnalyst
from core.models import GroundingSource, StockData, UserProfile
from core.response_parser import format_tagged_response, parse_analysis_text, platform_key


logger = logging.getLogger("stockradar.mock")

DEFAULT_STOCK_NAME = "贵州茅台"
DEFAULT_STOCK_SYMBOL = "600519"

MOCK_RISK_REPORT = "当前股价处于合理估值区间，短期受市场情绪影响有波动风险，长期基本面稳健。"
MOCK_NEWS = "近期白酒板块整体回暖，龙头企业批价企稳，经销商库存周转效率提升。"

# name, match, accuracy, wisdom, impact, fit, signal, description
MOCK_PLATFORMS = (
    ("东方财富", 78, 76, 80, 90, 75, "Hold", "东方财富平台散户参与度高，短期情绪波动较大，但整体对该股票的共识偏乐观。"),
    ("雪球", 89, 85, 92, 70, 88, "Buy", "雪球平台用户以价值投资者为主，对该股票的长期逻辑分析较为深入，与您的风险偏好高度匹配。"),
    ("同花顺", 72, 74, 68, 78, 70, "Hold", "同花顺用户偏重技术面，短线信号密集，适合关注量价配合的交易者。"),
)

MOCK_SOURCES = (
    GroundingSource(title="茅台2024年报解读", uri="https://example.com/1"),
    GroundingSource(title="白酒行业Q3数据分析", uri="https://example.com/2"),
)


class MockStockAnalyst:
    """Produce plausible analyses locally through the same tagged-response parser."""

    available = True

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()

    def _mock_fields(self, query: str, profile: UserProfile) -> dict[str, object]:
        is_code = query.isascii() and query.isalnum()
        fields: dict[str, object] = {
            "NAME": DEFAULT_STOCK_NAME if query.isdigit() else query,
            "SYMBOL": query.upper() if is_code else DEFAULT_STOCK_SYMBOL,
            "PRICE": f"{1800 + self._rng.random() * 100:.2f}",
            "CHANGE": f"{(self._rng.random() - 0.5) * 5:+.2f}%",
            "NEWS": MOCK_NEWS,
            "RISK": "Medium",
        }
        # Aggressive profiles lean toward the high-impact platform
        tilt = (profile.risk_tolerance - 1) * 3
        for index, (name, match, acc, wisdom, impact, fit, signal, desc) in enumerate(MOCK_PLATFORMS, start=1):
            adjusted = match + tilt if impact >= 80 else match - tilt
            fields.update(
                {
                    platform_key(index, "NAME"): name,
                    platform_key(index, "MATCH"): min(max(adjusted, 0), 100),
                    platform_key(index, "ACC"): acc,
                    platform_key(index, "WISDOM"): wisdom,
                    platform_key(index, "IMPACT"): impact,
                    platform_key(index, "FIT"): fit,
                    platform_key(index, "DESC"): desc,
                    platform_key(index, "SIG"): signal,
                }
            )
        return fields

    def analyze_stock_with_search(self, query: str, profile: UserProfile) -> StockData | None:
        query = (query or "").strip()
        if not query:
            return None

        text = format_tagged_response(self._mock_fields(query, profile))
        parsed = parse_analysis_text(text, query)
        logger.info("Mock analysis served for %r", query)
        return StockData(
            symbol=parsed.symbol,
            name=parsed.name,
            price=parsed.price,
            change_percent=parsed.change_percent,
            risk_level=parsed.risk_level,
            risk_report=MOCK_RISK_REPORT,
            recent_situation=parsed.news,
            platforms=parsed.platforms,
            grounding_sources=MOCK_SOURCES,
            generated_image=None,
            parse_issues=parsed.issues,
        )


def build_analyst(use_mock: bool = settings.USE_MOCK_DATA) -> StockAnalyst | MockStockAnalyst:
    """Return the analyst the app should use for the configured mode."""
    if use_mock:
        return MockStockAnalyst()
    return StockAnalyst()
