"""Session-scoped data model for profiles, parsed analyses and candles."""

from __future__ import annotations

from dataclasses import dataclass, field


SIGNALS = ("Buy", "Hold", "Sell")
RISK_LEVELS = ("Low", "Medium", "High")

CAPITAL_LABELS = ("10万以下", "10-50万", "50-200万", "200万以上")
RISK_LABELS = ("保守型", "稳健型", "激进型")
RISK_TOLERANCE_NAMES = ("Conservative", "Balanced", "Aggressive")
SIGNAL_LABELS = {"Buy": "看涨", "Sell": "看跌", "Hold": "持仓"}


@dataclass(frozen=True)
class UserProfile:
    """Risk and capital answers from the profile questionnaire."""

    name: str = "Investor"
    capital: int = 1
    risk_tolerance: int = 1
    experience: int = 3

    @property
    def capital_label(self) -> str:
        return CAPITAL_LABELS[min(max(self.capital, 0), len(CAPITAL_LABELS) - 1)]

    @property
    def risk_label(self) -> str:
        return RISK_LABELS[min(max(self.risk_tolerance, 0), len(RISK_LABELS) - 1)]

    @property
    def risk_tolerance_name(self) -> str:
        """English tolerance name used in report prompts."""
        return RISK_TOLERANCE_NAMES[min(max(self.risk_tolerance, 0), len(RISK_TOLERANCE_NAMES) - 1)]


@dataclass(frozen=True)
class PlatformMetric:
    """Per-platform fit scores parsed from one AI response."""

    id: str
    name: str
    match_rate: int
    accuracy_score: int
    community_wisdom: int
    market_impact: int
    user_fit: int
    description: str
    recent_signal: str

    @property
    def signal_label(self) -> str:
        return SIGNAL_LABELS.get(self.recent_signal, SIGNAL_LABELS["Hold"])

    @property
    def scores(self) -> dict[str, int]:
        """Five radar dimensions keyed by display label."""
        return {
            "预测准确率": self.accuracy_score,
            "群体智慧": self.community_wisdom,
            "市场传导力": self.market_impact,
            "用户匹配度": self.user_fit,
            "综合推荐率": self.match_rate,
        }


@dataclass(frozen=True)
class GroundingSource:
    """Citation returned alongside a search-grounded answer."""

    title: str
    uri: str


@dataclass(frozen=True)
class ParseIssue:
    """One field that was defaulted while parsing a tagged response."""

    field: str
    kind: str
    raw: str | None = None


@dataclass(frozen=True)
class StockData:
    """Complete analysis result for one search; replaced wholesale by the next."""

    symbol: str
    name: str
    price: float
    change_percent: float
    risk_level: str
    risk_report: str
    recent_situation: str
    platforms: tuple[PlatformMetric, ...]
    grounding_sources: tuple[GroundingSource, ...] = ()
    generated_image: str | None = None
    parse_issues: tuple[ParseIssue, ...] = field(default_factory=tuple)

    def platform(self, platform_id: str) -> PlatformMetric | None:
        for item in self.platforms:
            if item.id == platform_id:
                return item
        return None


@dataclass(frozen=True)
class KLineData:
    """One simulated daily candle."""

    date: str
    open: float
    close: float
    high: float
    low: float
