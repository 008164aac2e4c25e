"""Chart helpers for the dashboard, detail view and PDF export."""

from __future__ import annotations

import io

from matplotlib.figure import Figure
import plotly.graph_objects as go
from plotly.offline import plot

from core.kline import kline_frame
from core.models import KLineData, PlatformMetric


# A-share convention: red for up days, green for down days
UP_COLOR = "#ef4444"
DOWN_COLOR = "#22c55e"
RADAR_COLOR = "#fbbf24"


def _as_div(figure: go.Figure) -> str:
    return plot(
        figure,
        output_type="div",
        include_plotlyjs=False,
        config={"displaylogo": False, "responsive": True},
    )


def build_kline_chart(kline: list[KLineData], title: str) -> str:
    """Build an interactive candlestick div with a close-price line."""
    data = kline_frame(kline)
    figure = go.Figure()
    figure.add_trace(
        go.Candlestick(
            x=data["Date"],
            open=data["Open"],
            high=data["High"],
            low=data["Low"],
            close=data["Close"],
            name="K线",
            increasing={"line": {"color": UP_COLOR}, "fillcolor": UP_COLOR},
            decreasing={"line": {"color": DOWN_COLOR}, "fillcolor": DOWN_COLOR},
        )
    )
    figure.add_trace(
        go.Scatter(
            x=data["Date"],
            y=data["Close"],
            mode="lines",
            name="收盘价",
            line={"color": "#10b981", "width": 1.5},
            hovertemplate="%{x}<br>收盘价: %{y:.2f}<extra></extra>",
        )
    )
    figure.update_layout(
        title=title,
        template="plotly_dark",
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        hovermode="x unified",
        showlegend=False,
        margin={"l": 40, "r": 10, "t": 50, "b": 30},
        xaxis={"type": "category", "rangeslider": {"visible": False}},
        yaxis={"title": "价格"},
    )
    return _as_div(figure)


def build_radar_chart(platform: PlatformMetric) -> str:
    """Build the five-dimension platform/stock/user fit radar."""
    labels = list(platform.scores.keys())
    values = list(platform.scores.values())
    figure = go.Figure(
        go.Scatterpolar(
            r=values + values[:1],
            theta=labels + labels[:1],
            fill="toself",
            name=platform.name,
            line={"color": RADAR_COLOR, "width": 2},
            opacity=0.6,
        )
    )
    figure.update_layout(
        title="平台-股票-用户 适配模型",
        template="plotly_dark",
        paper_bgcolor="rgba(0,0,0,0)",
        showlegend=False,
        polar={"radialaxis": {"range": [0, 100], "showticklabels": False}},
        margin={"l": 40, "r": 40, "t": 50, "b": 30},
    )
    return _as_div(figure)


def render_kline_png(kline: list[KLineData], title: str) -> bytes:
    """Render a static candlestick chart to PNG bytes for PDF export."""
    fig = Figure(figsize=(11, 4.2))
    ax = fig.add_subplot(111)

    for idx, candle in enumerate(kline):
        color = UP_COLOR if candle.close >= candle.open else DOWN_COLOR
        ax.vlines(idx, candle.low, candle.high, color=color, linewidth=1.0)
        body_low = min(candle.open, candle.close)
        body_height = max(abs(candle.close - candle.open), 1e-9)
        ax.bar(idx, body_height, bottom=body_low, width=0.6, color=color)

    step = max(1, len(kline) // 10)
    ticks = list(range(0, len(kline), step))
    ax.set_xticks(ticks)
    ax.set_xticklabels([kline[idx].date for idx in ticks])
    ax.set_title(title)
    ax.set_ylabel("Price")
    ax.grid(alpha=0.25)
    fig.tight_layout()

    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=130)
    return buffer.getvalue()
