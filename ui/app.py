"""Local Flask UI for the Stock Radar evaluation dashboard."""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
import sys
import tempfile
from typing import Any

MPL_CONFIG_DIR = os.path.join(tempfile.gettempdir(), "matplotlib")
os.environ.setdefault("MPLCONFIGDIR", MPL_CONFIG_DIR)
os.makedirs(MPL_CONFIG_DIR, exist_ok=True)

import matplotlib

matplotlib.use("Agg")

from flask import (
    Flask,
    abort,
    got_request_exception,
    jsonify,
    redirect,
    render_template,
    request,
    send_file,
    session as cookie_session,
    url_for,
)
from plotly.offline import get_plotlyjs

# Make `python ui/app.py` work without external PYTHONPATH setup.
THIS_DIR = Path(__file__).resolve().parent
PROJECT_DIR = THIS_DIR.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from config import settings
from core.kline import generate_simulated_kline, trend_from_change
from core.mock_data import MockStockAnalyst, build_analyst
from core.models import CAPITAL_LABELS, RISK_LABELS
from core.session import DashboardSession, SessionStore, ViewState
from ui.api import profile_from_form, serialize_kline, serialize_session, serialize_stock
from ui.charts import render_kline_png
from ui.models import build_platform_detail_view, build_stock_view
from ui.utils.pdf_exporter import build_risk_report_pdf, report_filename


UI_DIR = THIS_DIR
STATIC_DIR = UI_DIR / "static"

SESSION_COOKIE_KEY = "sid"
SEARCH_FAILED_MESSAGE = "抱歉，暂时无法获取该股票数据，请检查拼写或稍后重试。"
SEARCH_BUSY_MESSAGE = "搜索进行中，请稍候。"

PLOTLY_VENDOR_RELATIVE_PATH = "vendor/plotly.min.js"
PLOTLY_VENDOR_PATH = STATIC_DIR / PLOTLY_VENDOR_RELATIVE_PATH

logging.getLogger("google_genai").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)


def _configure_ui_logger() -> logging.Logger:
    """Configure file logger for the UI app and the analysis client."""
    logs_dir = Path(settings.LOGS_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "ui.log"

    logger = logging.getLogger("stockradar")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    existing = None
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            existing = handler
            break

    if existing is None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
        logger.addHandler(handler)

    return logging.getLogger("stockradar.ui")


def create_app(analyst: Any | None = None, store: SessionStore | None = None) -> Flask:
    """Create and configure the local Flask application."""
    app = Flask(
        __name__,
        template_folder=str(UI_DIR / "templates"),
        static_folder=str(STATIC_DIR),
    )
    app.config["SECRET_KEY"] = settings.SECRET_KEY
    app.config["TEMPLATES_AUTO_RELOAD"] = True
    app.config["SEND_FILE_MAX_AGE_DEFAULT"] = 86400

    PLOTLY_VENDOR_PATH.parent.mkdir(parents=True, exist_ok=True)
    logger = _configure_ui_logger()

    if not PLOTLY_VENDOR_PATH.exists():
        try:
            PLOTLY_VENDOR_PATH.write_text(get_plotlyjs(), encoding="utf-8")
            logger.info("Wrote local Plotly bundle: %s", PLOTLY_VENDOR_PATH)
        except Exception as exc:
            logger.warning("Failed to write local Plotly bundle: %s", exc)

    analyst = analyst if analyst is not None else build_analyst()
    store = store if store is not None else SessionStore()
    if not analyst.available:
        logger.warning("No API key configured; searches will report the service as unavailable.")
    mock_mode = isinstance(analyst, MockStockAnalyst)
    logger.info("UI app initialized (mock=%s)", mock_mode)

    def _current_session() -> DashboardSession:
        """Return the view state bound to this browser's cookie, creating it if needed."""
        token, session = store.get_or_create(cookie_session.get(SESSION_COOKIE_KEY))
        cookie_session[SESSION_COOKIE_KEY] = token
        return session

    def _viewed_session() -> DashboardSession:
        """Read-only lookup; an unknown browser sees a fresh, unstored session."""
        session = store.get(cookie_session.get(SESSION_COOKIE_KEY))
        return session if session is not None else DashboardSession()

    def _refused(action: str, session: DashboardSession) -> None:
        logger.info("Refused %s from view %s", action, session.resolve_view().value)

    def _run_search(session: DashboardSession, query: str) -> bool:
        """Run one analysis into the session; False when it produced nothing."""
        stock = None
        kline = []
        try:
            stock = analyst.analyze_stock_with_search(query, session.profile)
            if stock is not None:
                trend = trend_from_change(stock.change_percent)
                kline = generate_simulated_kline(settings.KLINE_DAYS, stock.price, trend)
        finally:
            if stock is None:
                session.fail_search(SEARCH_FAILED_MESSAGE)
            else:
                session.complete_search(stock, kline)
        return stock is not None

    @app.route("/")
    def index() -> str:
        """Render whichever of the four screens the session is on."""
        session = _viewed_session()
        view = session.resolve_view()

        if view is ViewState.LOGIN:
            return render_template("login.html")

        if view is ViewState.PROFILE:
            return render_template(
                "profile.html",
                profile=session.profile,
                capital_labels=CAPITAL_LABELS,
                risk_labels=RISK_LABELS,
            )

        plotly_script_url = url_for("static", filename=PLOTLY_VENDOR_RELATIVE_PATH)
        if view is ViewState.PLATFORM_DETAIL:
            detail = build_platform_detail_view(session.stock, session.selected_platform, session.profile, session.kline)
            return render_template(
                "platform_detail.html",
                detail=detail,
                profile=session.profile,
                plotly_script_url=plotly_script_url,
            )

        stock_view = build_stock_view(session.stock, session.kline) if session.stock is not None else None
        return render_template(
            "dashboard.html",
            stock_view=stock_view,
            profile=session.profile,
            error=session.last_error,
            loading=session.loading,
            plotly_script_url=plotly_script_url,
        )

    @app.route("/login", methods=["POST"])
    def login():
        session = _current_session()
        if not session.continue_from_login():
            _refused("login", session)
        return redirect(url_for("index"))

    @app.route("/profile", methods=["POST"])
    def submit_profile():
        session = _current_session()
        profile = profile_from_form(request.form, session.profile)
        if not session.submit_profile(profile):
            _refused("profile submission", session)
            return redirect(url_for("index"))
        logger.info("Profile submitted: capital=%s risk=%s", profile.capital, profile.risk_tolerance)
        return redirect(url_for("index"))

    @app.route("/search", methods=["POST"])
    def search():
        """Run the AI analysis for the typed query and show it on the dashboard."""
        session = _current_session()
        query = (request.form.get("q") or "").strip()
        if not query:
            return redirect(url_for("index"))

        if session.resolve_view() is not ViewState.DASHBOARD:
            _refused("search", session)
            return redirect(url_for("index"))

        if not session.begin_search(busy_message=SEARCH_BUSY_MESSAGE):
            return redirect(url_for("index"))

        if not _run_search(session, query):
            logger.warning("Search produced no result for %r", query)
        return redirect(url_for("index"))

    @app.route("/platform/<platform_id>", methods=["POST"])
    def select_platform(platform_id: str):
        session = _current_session()
        if not session.select_platform(platform_id):
            _refused(f"selection of platform {platform_id}", session)
        return redirect(url_for("index"))

    @app.route("/back", methods=["POST"])
    def back():
        session = _current_session()
        if not session.back_to_dashboard():
            _refused("back", session)
        return redirect(url_for("index"))

    @app.route("/api/session")
    def api_session():
        return jsonify(serialize_session(_viewed_session()))

    @app.route("/api/analyze", methods=["POST"])
    def api_analyze():
        """Analyze a query for the session profile without changing the screen."""
        session = _viewed_session()
        payload = request.get_json(silent=True) or {}
        query = (payload.get("q") or request.form.get("q") or "").strip()
        if not query:
            return jsonify({"error": "Query is required."}), 400

        stock = analyst.analyze_stock_with_search(query, session.profile)
        if stock is None:
            return jsonify({"error": SEARCH_FAILED_MESSAGE}), 503

        kline = generate_simulated_kline(settings.KLINE_DAYS, stock.price, trend_from_change(stock.change_percent))
        return jsonify({"stock": serialize_stock(stock), "kline": serialize_kline(kline)})

    @app.route("/export/pdf")
    def export_pdf():
        """Download the loaded stock's risk report as PDF."""
        session = _viewed_session()
        stock = session.stock
        if stock is None:
            abort(404)

        kline_png = None
        if session.kline:
            kline_png = render_kline_png(session.kline, f"{stock.symbol} simulated K-line")

        pdf_bytes = build_risk_report_pdf(stock=stock, profile=session.profile, kline_png=kline_png)
        return send_file(
            io.BytesIO(pdf_bytes),
            as_attachment=True,
            download_name=report_filename(stock),
            mimetype="application/pdf",
        )

    @app.route("/health")
    def health():
        return jsonify(
            {
                "ok": True,
                "ai_available": bool(analyst.available),
                "mock": mock_mode,
                "sessions": len(store),
            }
        )

    def _log_unhandled_exception(sender: Flask, exception: Exception, **_: Any) -> None:
        logger.exception("Unhandled UI exception: %s", exception)

    got_request_exception.connect(_log_unhandled_exception, app)

    return app


if __name__ == "__main__":
    create_app().run(host=settings.HOST, port=settings.PORT, debug=False)
