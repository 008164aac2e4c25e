"""UI data models for the dashboard and platform-detail screens."""

from __future__ import annotations

from dataclasses import dataclass

from core.kline import trend_from_change
from core.models import KLineData, PlatformMetric, StockData, UserProfile
from ui.charts import build_kline_chart, build_radar_chart


STAT_TOOLTIPS = {
    "match": "算法模型：(准确率×40% + 适配度×30% + 智慧度×30%)",
    "accuracy": "算法模型：过去30天平台情感指数与次日股价涨跌的皮尔逊相关系数",
    "fit": "算法模型：基于您的资金体量与风险偏好与平台用户画像的余弦相似度",
    "signal": "算法模型：NLP提取最近24小时评论中的显性买卖指令",
}

SIGNAL_MOODS = {"Buy": "积极/买入", "Sell": "恐慌/卖出", "Hold": "观望"}
SIGNAL_TONES = {"Buy": "bullish", "Sell": "bearish", "Hold": "neutral"}


@dataclass(frozen=True)
class StatCard:
    """One headline number on the platform-detail screen."""

    label: str
    value: str
    tooltip: str
    tone: str


@dataclass
class StockViewModel:
    """Dashboard payload for one loaded stock."""

    stock: StockData
    kline: list[KLineData]
    trend: str
    price_text: str
    change_text: str
    change_tone: str
    ranked_platforms: list[PlatformMetric]
    kline_chart_html: str | None = None


@dataclass
class PlatformDetailViewModel:
    """Drill-down payload for one platform of the loaded stock."""

    stock: StockData
    platform: PlatformMetric
    stat_cards: list[StatCard]
    commentary: str
    chart_note: str
    radar_chart_html: str | None = None
    kline_chart_html: str | None = None


def _change_text(change_percent: float) -> str:
    sign = "+" if change_percent >= 0 else ""
    return f"{sign}{change_percent:.2f}%"


def build_stock_view(stock: StockData, kline: list[KLineData], with_charts: bool = True) -> StockViewModel:
    ranked = sorted(stock.platforms, key=lambda item: item.match_rate, reverse=True)
    chart_html = None
    if with_charts and kline:
        chart_html = build_kline_chart(kline, title=f"{stock.name} 近{len(kline)}天模拟K线")
    return StockViewModel(
        stock=stock,
        kline=kline,
        trend=trend_from_change(stock.change_percent),
        price_text=f"{stock.price:.2f}",
        change_text=_change_text(stock.change_percent),
        change_tone="bullish" if stock.change_percent >= 0 else "bearish",
        ranked_platforms=ranked,
        kline_chart_html=chart_html,
    )


def platform_commentary(stock: StockData, platform: PlatformMetric, profile: UserProfile) -> str:
    """Flavor text explaining why the platform is weighted for this profile."""
    preference = "保守型" if profile.risk_tolerance == 0 else "稳健/激进型"
    style = "深度逻辑分析（Smart Money）" if "雪球" in platform.name else "市场情绪传导（Hot Money）"
    mood = SIGNAL_MOODS.get(platform.recent_signal, SIGNAL_MOODS["Hold"])
    return (
        f"该平台在过去30天内，针对{stock.name}的“{mood}”情绪指数与实际走势吻合度极高。"
        f"结合您的{preference}偏好，该平台的{style}权重被算法自动放大，以匹配您的决策需求。"
    )


def build_platform_detail_view(
    stock: StockData,
    platform: PlatformMetric,
    profile: UserProfile,
    kline: list[KLineData],
    with_charts: bool = True,
) -> PlatformDetailViewModel:
    stat_cards = [
        StatCard("综合推荐率", f"{platform.match_rate}%", STAT_TOOLTIPS["match"], "gold"),
        StatCard("历史准确率", f"{platform.accuracy_score}%", STAT_TOOLTIPS["accuracy"], "green"),
        StatCard("用户适配度", f"{platform.user_fit}%", STAT_TOOLTIPS["fit"], "blue"),
        StatCard(
            "近期信号",
            platform.signal_label,
            STAT_TOOLTIPS["signal"],
            SIGNAL_TONES.get(platform.recent_signal, "neutral"),
        ),
    ]
    chart_note = (
        f"* 注：K线图为基于真实价格({stock.price:.2f})与近期趋势({stock.change_percent:.2f}%)"
        "生成的模拟走势，仅供趋势参考。"
    )
    return PlatformDetailViewModel(
        stock=stock,
        platform=platform,
        stat_cards=stat_cards,
        commentary=platform_commentary(stock, platform, profile),
        chart_note=chart_note,
        radar_chart_html=build_radar_chart(platform) if with_charts else None,
        kline_chart_html=build_kline_chart(kline, title="K线走势 / 预测准确度复盘") if with_charts and kline else None,
    )
