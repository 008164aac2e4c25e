"""Form parsing and JSON payload helpers for Stock Radar routes."""

from __future__ import annotations

from typing import Any, Mapping

from core.models import KLineData, PlatformMetric, StockData, UserProfile
from core.session import DashboardSession


MAX_EXPERIENCE_YEARS = 60
MAX_NAME_LENGTH = 40


def parse_int(raw_value: str | None, default: int, min_value: int, max_value: int) -> int:
    """Parse bounded int from request args."""
    try:
        value = int(raw_value) if raw_value is not None else default
    except (TypeError, ValueError):
        value = default
    return max(min_value, min(max_value, value))


def profile_from_form(form: Mapping[str, str], current: UserProfile) -> UserProfile:
    """Build a profile from questionnaire fields, clamping buckets into range."""
    name = (form.get("name") or "").strip()[:MAX_NAME_LENGTH] or current.name
    return UserProfile(
        name=name,
        capital=parse_int(form.get("capital"), current.capital, 0, 3),
        risk_tolerance=parse_int(form.get("risk_tolerance"), current.risk_tolerance, 0, 2),
        experience=parse_int(form.get("experience"), current.experience, 0, MAX_EXPERIENCE_YEARS),
    )


def serialize_profile(profile: UserProfile) -> dict[str, Any]:
    return {
        "name": profile.name,
        "capital": profile.capital,
        "risk_tolerance": profile.risk_tolerance,
        "experience": profile.experience,
    }


def serialize_platform(platform: PlatformMetric) -> dict[str, Any]:
    return {
        "id": platform.id,
        "name": platform.name,
        "match_rate": platform.match_rate,
        "accuracy_score": platform.accuracy_score,
        "community_wisdom": platform.community_wisdom,
        "market_impact": platform.market_impact,
        "user_fit": platform.user_fit,
        "description": platform.description,
        "recent_signal": platform.recent_signal,
    }


def serialize_stock(stock: StockData) -> dict[str, Any]:
    """Convert an analysis result to API payload."""
    return {
        "symbol": stock.symbol,
        "name": stock.name,
        "price": round(stock.price, 2),
        "change_percent": round(stock.change_percent, 2),
        "risk_level": stock.risk_level,
        "risk_report": stock.risk_report,
        "recent_situation": stock.recent_situation,
        "generated_image": stock.generated_image,
        "platforms": [serialize_platform(item) for item in stock.platforms],
        "grounding_sources": [{"title": item.title, "uri": item.uri} for item in stock.grounding_sources],
        "parse_issues": [{"field": item.field, "kind": item.kind, "raw": item.raw} for item in stock.parse_issues],
    }


def serialize_kline(kline: list[KLineData]) -> list[dict[str, Any]]:
    return [
        {
            "date": item.date,
            "open": round(item.open, 2),
            "close": round(item.close, 2),
            "high": round(item.high, 2),
            "low": round(item.low, 2),
        }
        for item in kline
    ]


def serialize_session(session: DashboardSession) -> dict[str, Any]:
    """Snapshot of what the renderer would show for this session."""
    return {
        "view": session.resolve_view().value,
        "profile": serialize_profile(session.profile),
        "loading": session.loading,
        "error": session.last_error,
        "stock": serialize_stock(session.stock) if session.stock is not None else None,
        "kline": serialize_kline(session.kline),
        "selected_platform": session.selected_platform.id if session.selected_platform is not None else None,
    }
