"""PDF export of the risk report for the loaded stock."""

from __future__ import annotations

from datetime import datetime
import io

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import inch
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas

from core.models import StockData, UserProfile


# Built-in CID font so Chinese text from the AI response renders
CJK_FONT = "STSong-Light"
pdfmetrics.registerFont(UnicodeCIDFont(CJK_FONT))

DISCLAIMER = "免责声明：内容由AI生成，K线为模拟走势，仅供参考，不构成投资建议。"


def report_filename(stock: StockData) -> str:
    date_stamp = datetime.now().strftime("%Y%m%d")
    safe_symbol = "".join(ch for ch in stock.symbol if ch.isalnum()) or "stock"
    return f"{safe_symbol}_risk_report_{date_stamp}.pdf"


def build_risk_report_pdf(
    *,
    stock: StockData,
    profile: UserProfile,
    kline_png: bytes | None = None,
) -> bytes:
    """Render the risk report to PDF bytes; nothing is written to disk."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    left_margin = 0.75 * inch
    text_width = width - 2 * left_margin
    top = height - 0.75 * inch
    y = top

    def draw_title(text: str, size: int = 16) -> None:
        nonlocal y
        pdf.setFont(CJK_FONT, size)
        pdf.drawString(left_margin, y, text)
        y -= 0.32 * inch

    def draw_line(text: str, size: int = 10, color: tuple[float, float, float] | None = None) -> None:
        nonlocal y
        pdf.setFont(CJK_FONT, size)
        if color is not None:
            pdf.setFillColorRGB(*color)
        else:
            pdf.setFillColor(colors.black)

        for chunk in simpleSplit(text, CJK_FONT, size, text_width) or [""]:
            if y < 0.8 * inch:
                pdf.showPage()
                pdf.setFont(CJK_FONT, size)
                y = top
            pdf.drawString(left_margin, y, chunk)
            y -= 0.2 * inch
        pdf.setFillColor(colors.black)

    draw_title(f"{stock.name} ({stock.symbol}) 风险评估报告")
    draw_line(f"生成时间: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    draw_line(f"投资者: {profile.name} | 资金: {profile.capital_label} | 风险偏好: {profile.risk_label}")

    change_color = (0.80, 0.15, 0.15) if stock.change_percent >= 0 else (0.10, 0.55, 0.25)
    draw_line(f"价格: {stock.price:.2f}  涨跌幅: {stock.change_percent:+.2f}%", color=change_color)
    draw_line(f"风险等级: {stock.risk_level}")

    y -= 0.1 * inch
    draw_line("风险评估", size=12)
    draw_line(stock.risk_report)

    y -= 0.1 * inch
    draw_line("近期动态", size=12)
    draw_line(stock.recent_situation)

    y -= 0.1 * inch
    draw_line("平台智能优选", size=12)
    for platform in sorted(stock.platforms, key=lambda item: item.match_rate, reverse=True):
        draw_line(
            f"- {platform.name}: 推荐率 {platform.match_rate}% | 准确率 {platform.accuracy_score}% | "
            f"适配度 {platform.user_fit}% | 信号 {platform.signal_label}"
        )

    if stock.grounding_sources:
        y -= 0.1 * inch
        draw_line("信息来源", size=12)
        for source in stock.grounding_sources:
            draw_line(f"- {source.title}: {source.uri}", size=8)

    if kline_png:
        image_height = 2.6 * inch
        if y < image_height + 1.0 * inch:
            pdf.showPage()
            y = top
        y -= 0.1 * inch
        draw_line("模拟K线", size=12)
        pdf.drawImage(
            ImageReader(io.BytesIO(kline_png)),
            left_margin,
            y - image_height,
            width=text_width,
            height=image_height,
            preserveAspectRatio=True,
        )
        y -= image_height + 0.2 * inch

    draw_line(DISCLAIMER, size=9)
    pdf.save()
    return buffer.getvalue()
