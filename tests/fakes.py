"""Stand-ins for Gemini responses and the genai client."""

from __future__ import annotations

from types import SimpleNamespace


WELL_FORMED_FIELDS = {
    "NAME": "贵州茅台",
    "SYMBOL": "600519",
    "PRICE": "1688.5",
    "CHANGE": "-1.25",
    "NEWS": "白酒板块回暖，批价企稳。",
    "RISK": "High",
    "P1_NAME": "东方财富",
    "P1_MATCH": 70,
    "P1_ACC": 65,
    "P1_WISDOM": 60,
    "P1_IMPACT": 95,
    "P1_FIT": 72,
    "P1_DESC": "散户情绪集中，短线传导快。",
    "P1_SIG": "Sell",
    "P2_NAME": "雪球",
    "P2_MATCH": 91,
    "P2_ACC": 88,
    "P2_WISDOM": 93,
    "P2_IMPACT": 71,
    "P2_FIT": 90,
    "P2_DESC": "价值投资者讨论深入。",
    "P2_SIG": "Buy",
    "P3_NAME": "同花顺",
    "P3_MATCH": 0,
    "P3_ACC": 100,
    "P3_WISDOM": 55,
    "P3_IMPACT": 80,
    "P3_FIT": 61,
    "P3_DESC": "技术面信号密集。",
    "P3_SIG": "Hold",
}


def text_response(text: str, sources: list[tuple[str | None, str | None]] | None = None) -> SimpleNamespace:
    """Mimic a generate_content response carrying text and grounding chunks."""
    chunks = [SimpleNamespace(web=SimpleNamespace(title=title, uri=uri)) for title, uri in sources or []]
    candidate = SimpleNamespace(
        grounding_metadata=SimpleNamespace(grounding_chunks=chunks),
        content=SimpleNamespace(parts=[SimpleNamespace(text=text, inline_data=None)]),
    )
    return SimpleNamespace(text=text, candidates=[candidate])


def image_response(data: bytes, mime_type: str = "image/png") -> SimpleNamespace:
    parts = [
        SimpleNamespace(text="here you go", inline_data=None),
        SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type)),
    ]
    candidate = SimpleNamespace(grounding_metadata=None, content=SimpleNamespace(parts=parts))
    return SimpleNamespace(text=None, candidates=[candidate])


class FakeModels:
    """Records calls and dispatches on the kind of request."""

    def __init__(self, analysis=None, report=None, image=None) -> None:
        self.calls: list[SimpleNamespace] = []
        self._handlers = {"analysis": analysis, "report": report, "image": image}

    @staticmethod
    def kind_of(config) -> str:
        if config is None:
            return "image"
        if getattr(config, "tools", None):
            return "analysis"
        return "report"

    def generate_content(self, *, model, contents, config=None):
        kind = self.kind_of(config)
        self.calls.append(SimpleNamespace(kind=kind, model=model, contents=contents, config=config))
        handler = self._handlers[kind]
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler()
        return handler


class FakeClient:
    def __init__(self, **handlers) -> None:
        self.models = FakeModels(**handlers)
