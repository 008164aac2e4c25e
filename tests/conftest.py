"""Shared fixtures: fake Gemini client, tagged responses and Flask app."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.models import UserProfile
from core.response_parser import format_tagged_response
from tests.fakes import WELL_FORMED_FIELDS, FakeClient, image_response, text_response


@pytest.fixture
def well_formed_fields() -> dict:
    return dict(WELL_FORMED_FIELDS)


@pytest.fixture
def well_formed_text(well_formed_fields) -> str:
    return format_tagged_response(well_formed_fields)


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(name="Tester", capital=2, risk_tolerance=1, experience=5)


@pytest.fixture
def fake_client(well_formed_text) -> FakeClient:
    return FakeClient(
        analysis=text_response(
            well_formed_text,
            sources=[("年报解读", "https://example.com/a"), (None, "https://example.com/b"), ("no uri", None)],
        ),
        report=text_response("波动加剧，注意回撤风险。"),
        image=image_response(b"\x89PNG-fake"),
    )


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20240301)


@pytest.fixture
def app_factory(tmp_path, monkeypatch):
    """Build a test app around a given analyst, logging into a temp dir."""
    from config import settings
    from ui.app import create_app

    monkeypatch.setattr(settings, "LOGS_DIR", str(tmp_path / "logs"))

    def _build(analyst, store=None):
        app = create_app(analyst=analyst, store=store)
        app.config["TESTING"] = True
        return app

    return _build
