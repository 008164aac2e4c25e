import logging

import pytest

from config import settings
from scripts import run_analysis


@pytest.fixture(autouse=True)
def _logs_in_tmp(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "LOGS_DIR", str(tmp_path))
    root = logging.getLogger()
    saved = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in saved:
            handler.close()
    root.handlers[:] = saved


def test_mock_run_prints_analysis_and_kline(capsys, tmp_path):
    assert run_analysis.main(["600519", "--mock", "--days", "5"]) == 0
    out = capsys.readouterr().out

    assert "=== 贵州茅台 (600519) ===" in out
    assert "雪球" in out
    assert "Simulated K-line (5 days" in out
    assert (tmp_path / "stockradar.log").exists()


def test_blank_query_returns_failure(capsys):
    assert run_analysis.main(["  ", "--mock"]) == 1
    assert "No analysis available" in capsys.readouterr().out


def test_bucket_out_of_range_is_rejected():
    with pytest.raises(SystemExit):
        run_analysis.main(["600519", "--mock", "--risk", "5"])
