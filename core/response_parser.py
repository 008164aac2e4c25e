"""Delimiter-tagged response template: prompt, formatter and tolerant parser."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any

from config import settings
from core.models import RISK_LEVELS, SIGNALS, ParseIssue, PlatformMetric, UserProfile


STOCK_KEYS = ("NAME", "SYMBOL", "PRICE", "CHANGE", "NEWS", "RISK")
PLATFORM_FIELDS = ("NAME", "MATCH", "ACC", "WISDOM", "IMPACT", "FIT", "DESC", "SIG")
PLATFORM_COUNT = 3

_NUMBER_PATTERN = re.compile(r"[-+]?\d+(?:\.\d+)?")


class ResponseParseError(ValueError):
    """Raised in strict mode when a tagged response misses or garbles fields."""

    def __init__(self, issues: list[ParseIssue]) -> None:
        self.issues = issues
        summary = ", ".join(f"{item.field} ({item.kind})" for item in issues)
        super().__init__(f"Malformed analysis response: {summary}")


@dataclass(frozen=True)
class ParsedAnalysis:
    """Fields recovered from one tagged response, before enrichment."""

    name: str
    symbol: str
    price: float
    change_percent: float
    news: str
    risk_level: str
    platforms: tuple[PlatformMetric, ...]
    issues: tuple[ParseIssue, ...]

    @property
    def complete(self) -> bool:
        return not self.issues


def platform_key(index: int, field: str) -> str:
    return f"P{index}_{field}"


def template_keys() -> list[str]:
    """All keys of the template in prompt order."""
    keys = list(STOCK_KEYS)
    for index in range(1, PLATFORM_COUNT + 1):
        keys.extend(platform_key(index, field) for field in PLATFORM_FIELDS)
    return keys


def extract_field(text: str, key: str) -> str | None:
    """Return the first `||KEY||: value` on a line, or None when absent or blank."""
    match = re.search(rf"\|\|{re.escape(key)}\|\|:[ \t]*(.*)", text)
    if match is None:
        return None
    value = match.group(1).strip()
    return value or None


def format_tagged_response(fields: dict[str, Any]) -> str:
    """Render values as template lines; keys without a value are left out."""
    lines = []
    for key in template_keys():
        if key in fields and fields[key] is not None:
            lines.append(f"||{key}||: {fields[key]}")
    return "\n".join(lines)


def _read_number(raw: str) -> float | None:
    """Read the first number out of text like '¥1,800.50' or '+1.2%'."""
    match = _NUMBER_PATTERN.search(raw.replace(",", ""))
    if match is None:
        return None
    return float(match.group(0))


def _read_choice(raw: str, choices: tuple[str, ...]) -> str | None:
    lowered = raw.strip().strip("[]").lower()
    for choice in choices:
        if lowered == choice.lower():
            return choice
    return None


class _FieldReader:
    """Per-field extraction that records every fallback it takes."""

    def __init__(self, text: str) -> None:
        self._text = text
        self.issues: list[ParseIssue] = []

    def text(self, key: str, default: str) -> str:
        raw = extract_field(self._text, key)
        if raw is None:
            self.issues.append(ParseIssue(key, "missing"))
            return default
        return raw

    def number(self, key: str, default: float) -> float:
        raw = extract_field(self._text, key)
        if raw is None:
            self.issues.append(ParseIssue(key, "missing"))
            return default
        value = _read_number(raw)
        if value is None:
            self.issues.append(ParseIssue(key, "invalid", raw))
            return default
        return value

    def positive_number(self, key: str, default: float) -> float:
        raw = extract_field(self._text, key)
        value = self.number(key, default)
        if raw is not None and value <= 0:
            self.issues.append(ParseIssue(key, "invalid", raw))
            return default
        return value

    def score(self, key: str, default: int) -> int:
        raw = extract_field(self._text, key)
        if raw is None:
            self.issues.append(ParseIssue(key, "missing"))
            return default
        value = _read_number(raw)
        if value is None:
            self.issues.append(ParseIssue(key, "invalid", raw))
            return default
        score = int(value)
        if not 0 <= score <= 100:
            self.issues.append(ParseIssue(key, "invalid", raw))
            return min(max(score, 0), 100)
        return score

    def choice(self, key: str, choices: tuple[str, ...], default: str) -> str:
        raw = extract_field(self._text, key)
        if raw is None:
            self.issues.append(ParseIssue(key, "missing"))
            return default
        value = _read_choice(raw, choices)
        if value is None:
            self.issues.append(ParseIssue(key, "invalid", raw))
            return default
        return value


def parse_analysis_text(text: str, query: str, strict: bool = False) -> ParsedAnalysis:
    """
    Parse a tagged AI response into typed fields.

    Each field is read on its own. A missing or unreadable field falls back to
    its configured default and is reported in `issues`; with `strict=True` any
    such fallback raises ResponseParseError instead.
    """
    reader = _FieldReader(text or "")

    name = reader.text("NAME", query)
    symbol = reader.text("SYMBOL", settings.DEFAULT_SYMBOL)
    price = reader.positive_number("PRICE", settings.DEFAULT_PRICE)
    change_percent = reader.number("CHANGE", settings.DEFAULT_CHANGE_PERCENT)
    news = reader.text("NEWS", settings.DEFAULT_NEWS)
    risk_level = reader.choice("RISK", RISK_LEVELS, settings.DEFAULT_RISK_LEVEL)

    platforms: list[PlatformMetric] = []
    for index in range(1, PLATFORM_COUNT + 1):
        default_name = settings.DEFAULT_PLATFORM_NAMES[index - 1]
        platforms.append(
            PlatformMetric(
                id=f"p-{index}",
                name=reader.text(platform_key(index, "NAME"), default_name),
                match_rate=reader.score(platform_key(index, "MATCH"), settings.DEFAULT_SCORE),
                accuracy_score=reader.score(platform_key(index, "ACC"), settings.DEFAULT_SCORE),
                community_wisdom=reader.score(platform_key(index, "WISDOM"), settings.DEFAULT_SCORE),
                market_impact=reader.score(platform_key(index, "IMPACT"), settings.DEFAULT_SCORE),
                user_fit=reader.score(platform_key(index, "FIT"), settings.DEFAULT_SCORE),
                description=reader.text(platform_key(index, "DESC"), settings.DEFAULT_PLATFORM_DESCRIPTION),
                recent_signal=reader.choice(platform_key(index, "SIG"), SIGNALS, settings.DEFAULT_SIGNAL),
            )
        )

    if strict and reader.issues:
        raise ResponseParseError(reader.issues)

    return ParsedAnalysis(
        name=name,
        symbol=symbol,
        price=price,
        change_percent=change_percent,
        news=news,
        risk_level=risk_level,
        platforms=tuple(platforms),
        issues=tuple(reader.issues),
    )


def build_analysis_prompt(query: str, profile: UserProfile) -> str:
    """Instruction prompt asking for search-grounded facts in the tagged template."""
    platform_blocks = []
    for index, platform_name in enumerate(settings.DEFAULT_PLATFORM_NAMES, start=1):
        platform_blocks.append(
            "\n".join(
                [
                    f"||{platform_key(index, 'NAME')}||: {platform_name}",
                    f"||{platform_key(index, 'MATCH')}||: [0-100]",
                    f"||{platform_key(index, 'ACC')}||: [0-100]",
                    f"||{platform_key(index, 'WISDOM')}||: [0-100]",
                    f"||{platform_key(index, 'IMPACT')}||: [0-100]",
                    f"||{platform_key(index, 'FIT')}||: [0-100]",
                    f"||{platform_key(index, 'DESC')}||: [Reason]",
                    f"||{platform_key(index, 'SIG')}||: [Buy/Hold/Sell]",
                ]
            )
        )

    return (
        f'Perform a real-time analysis for stock: "{query}".\n'
        "Use Google Search to find:\n"
        "1. The exact Stock Name and Symbol (e.g., 贵州茅台 600519).\n"
        "2. The latest PRICE and Change Percentage (e.g. +1.2%).\n"
        "3. Recent news summary (last 3-5 days).\n\n"
        f"Then, simulate an analysis of {PLATFORM_COUNT} platforms "
        f"({', '.join(settings.DEFAULT_PLATFORM_NAMES)}) based on the *actual* news sentiment you found.\n\n"
        "Output the data in this STRICT format (do not use markdown code blocks, "
        "just plain text with delimiters):\n\n"
        "||NAME||: [Stock Name]\n"
        "||SYMBOL||: [Stock Symbol]\n"
        "||PRICE||: [Price Number]\n"
        "||CHANGE||: [Change Percent Number]\n"
        "||NEWS||: [A 3 sentence summary of recent news/situation]\n"
        "||RISK||: [Low/Medium/High based on volatility]\n\n"
        "Then for platforms, provide metrics (0-100) based on this logic:\n"
        '- "EastMoney" fits retail/hot money (High Impact).\n'
        '- "Xueqiu" fits value investors (High Wisdom).\n'
        '- "Tonghuashun" fits technical traders.\n\n'
        f"Adjust 'MatchRate' based on User Profile: Capital={profile.capital} (0=Low, 3=High), "
        f"Risk={profile.risk_tolerance} (0=Low, 2=High).\n\n" + "\n\n".join(platform_blocks) + "\n"
    )
