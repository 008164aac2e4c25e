"""Search-grounded stock analysis on the Gemini API."""

from __future__ import annotations

import base64
import logging
from typing import Any

from google import genai
from google.genai import types

from config import settings
from core.models import GroundingSource, StockData, UserProfile
from core.response_parser import ResponseParseError, build_analysis_prompt, parse_analysis_text


logger = logging.getLogger("stockradar.analyst")

MISSING_KEY_REPORT = "API Key missing. Cannot generate report."
EMPTY_REPORT = "Report generation failed."
FAILED_REPORT = "Unable to generate risk report at this time due to network or API issues."


def _risk_report_prompt(stock_name: str, risk_tolerance: str) -> str:
    return (
        "Generate a concise, professional financial risk assessment report (approx 150 words) "
        f'for the stock "{stock_name}".\n'
        f'Consider a user with a "{risk_tolerance}" risk tolerance.\n'
        "Focus on market volatility, recent sentiment analysis, and potential downside risks.\n"
        'Do not give financial advice, but assess the "noise" in community comments.'
    )


def _illustration_prompt(stock_name: str) -> str:
    return (
        f'A professional 3d render icon for finance app representing stock "{stock_name}".\n'
        "Minimalist, high tech, blue and gold, rising trend, reliable. White background.\n"
        "Aspect ratio 16:9."
    )


def extract_grounding_sources(response: Any, limit: int = settings.MAX_GROUNDING_SOURCES) -> list[GroundingSource]:
    """Collect web citations from the first candidate's grounding metadata."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources: list[GroundingSource] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        if not uri:
            continue
        sources.append(GroundingSource(title=getattr(web, "title", None) or "Source", uri=uri))
        if len(sources) >= limit:
            break
    return sources


def extract_inline_image(response: Any) -> str | None:
    """Return the first inline image part as a data URI."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is None or not getattr(inline, "data", None):
            continue
        data = inline.data
        if isinstance(data, (bytes, bytearray)):
            data = base64.b64encode(data).decode("ascii")
        mime_type = getattr(inline, "mime_type", None) or "image/png"
        return f"data:{mime_type};base64,{data}"
    return None


class StockAnalyst:
    """Ask Gemini for grounded stock facts and per-platform fit metrics."""

    def __init__(
        self,
        api_key: str | None = None,
        client: Any | None = None,
        strict: bool = False,
    ) -> None:
        self._api_key = settings.API_KEY if api_key is None else api_key
        self._client = client
        self._strict = strict

    @property
    def available(self) -> bool:
        return bool(self._api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def generate_risk_report(self, stock_name: str, risk_tolerance: str) -> str:
        """Generate a short prose risk assessment; degrades to a placeholder string."""
        if not self.available:
            return MISSING_KEY_REPORT

        try:
            response = self._get_client().models.generate_content(
                model=settings.REPORT_MODEL,
                contents=_risk_report_prompt(stock_name, risk_tolerance),
                config=types.GenerateContentConfig(
                    max_output_tokens=settings.REPORT_MAX_OUTPUT_TOKENS,
                    temperature=settings.REPORT_TEMPERATURE,
                ),
            )
        except Exception as exc:
            logger.warning("Risk report generation failed for %s: %s", stock_name, exc)
            return FAILED_REPORT

        return (getattr(response, "text", None) or "").strip() or EMPTY_REPORT

    def generate_stock_illustration(self, stock_name: str) -> str | None:
        """Generate an illustrative image as a data URI, or None."""
        if not self.available:
            return None

        try:
            response = self._get_client().models.generate_content(
                model=settings.IMAGE_MODEL,
                contents=_illustration_prompt(stock_name),
            )
        except Exception as exc:
            logger.warning("Illustration generation failed for %s: %s", stock_name, exc)
            return None

        return extract_inline_image(response)

    def analyze_stock_with_search(self, query: str, profile: UserProfile) -> StockData | None:
        """
        Run the grounded analysis for one query.

        Returns None when the key is unset, the query is blank, the primary call
        fails, or (strict mode only) the response does not follow the template.
        Report and image failures never fail the result.
        """
        query = (query or "").strip()
        if not query:
            return None
        if not self.available:
            logger.warning("Analysis skipped for %r: API key not configured", query)
            return None

        try:
            response = self._get_client().models.generate_content(
                model=settings.ANALYSIS_MODEL,
                contents=build_analysis_prompt(query, profile),
                config=types.GenerateContentConfig(
                    tools=[types.Tool(google_search=types.GoogleSearch())],
                    temperature=settings.ANALYSIS_TEMPERATURE,
                ),
            )
            parsed = parse_analysis_text(getattr(response, "text", None) or "", query, strict=self._strict)
        except ResponseParseError as exc:
            logger.error("Analysis response for %r rejected: %s", query, exc)
            return None
        except Exception as exc:
            logger.error("Analysis request failed for %r: %s", query, exc)
            return None

        if parsed.issues:
            logger.warning(
                "Analysis for %r defaulted %d field(s): %s",
                query,
                len(parsed.issues),
                ", ".join(item.field for item in parsed.issues),
            )

        grounding_sources = extract_grounding_sources(response)
        risk_report = self.generate_risk_report(parsed.name, profile.risk_tolerance_name)
        image = self.generate_stock_illustration(parsed.name)

        logger.info("Analysis ready for %r: %s (%s)", query, parsed.name, parsed.symbol)
        return StockData(
            symbol=parsed.symbol,
            name=parsed.name,
            price=parsed.price,
            change_percent=parsed.change_percent,
            risk_level=parsed.risk_level,
            risk_report=risk_report,
            recent_situation=parsed.news,
            platforms=parsed.platforms,
            grounding_sources=tuple(grounding_sources),
            generated_image=image,
            parse_issues=parsed.issues,
        )
