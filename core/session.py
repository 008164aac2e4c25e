"""Per-browser view state: which screen is active and what it shows."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
import secrets
import threading

from config import settings
from core.models import KLineData, PlatformMetric, StockData, UserProfile


class ViewState(str, Enum):
    LOGIN = "LOGIN"
    PROFILE = "PROFILE"
    DASHBOARD = "DASHBOARD"
    PLATFORM_DETAIL = "PLATFORM_DETAIL"


@dataclass
class DashboardSession:
    """
    Screen state for one user session.

    Transitions only move between the four views in response to a user action
    or a finished search. `resolve_view` is what the renderer should show; it
    falls back to the dashboard when the detail view lacks its data.
    """

    view: ViewState = ViewState.LOGIN
    profile: UserProfile = field(default_factory=UserProfile)
    stock: StockData | None = None
    kline: list[KLineData] = field(default_factory=list)
    selected_platform: PlatformMetric | None = None
    loading: bool = False
    last_error: str | None = None
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False, compare=False)

    def continue_from_login(self) -> bool:
        with self._lock:
            if self.view is not ViewState.LOGIN:
                return False
            self.view = ViewState.PROFILE
            return True

    def submit_profile(self, profile: UserProfile) -> bool:
        with self._lock:
            if self.view is not ViewState.PROFILE:
                return False
            self.profile = profile
            self.view = ViewState.DASHBOARD
            return True

    def begin_search(self, busy_message: str | None = None) -> bool:
        """
        Mark a search in flight; False when one is already running.

        A refused search leaves the running one alone and shows `busy_message`.
        """
        with self._lock:
            if self.loading:
                if busy_message is not None:
                    self.last_error = busy_message
                return False
            self.loading = True
            self.last_error = None
            self.stock = None
            self.kline = []
            self.selected_platform = None
            return True

    def complete_search(self, stock: StockData, kline: list[KLineData]) -> None:
        with self._lock:
            self.stock = stock
            self.kline = list(kline)
            self.loading = False

    def fail_search(self, message: str) -> None:
        with self._lock:
            self.last_error = message
            self.loading = False

    def select_platform(self, platform_id: str) -> bool:
        """Open the detail view for a platform of the loaded stock."""
        with self._lock:
            if self.resolve_view() is not ViewState.DASHBOARD or self.stock is None:
                return False
            platform = self.stock.platform(platform_id)
            if platform is None:
                return False
            self.selected_platform = platform
            self.view = ViewState.PLATFORM_DETAIL
            return True

    def back_to_dashboard(self) -> bool:
        with self._lock:
            if self.resolve_view() is not ViewState.PLATFORM_DETAIL:
                return False
            self.view = ViewState.DASHBOARD
            return True

    def resolve_view(self) -> ViewState:
        with self._lock:
            if self.view is ViewState.PLATFORM_DETAIL and (self.selected_platform is None or self.stock is None):
                return ViewState.DASHBOARD
            return self.view


class SessionStore:
    """
    In-memory sessions keyed by an opaque token; lost on restart.

    Holds at most `max_sessions`; the least recently used one is dropped first.
    """

    def __init__(self, max_sessions: int = settings.MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._lock = threading.Lock()
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, DashboardSession] = OrderedDict()

    def get(self, token: str | None) -> DashboardSession | None:
        with self._lock:
            if not token or token not in self._sessions:
                return None
            self._sessions.move_to_end(token)
            return self._sessions[token]

    def get_or_create(self, token: str | None) -> tuple[str, DashboardSession]:
        with self._lock:
            if token and token in self._sessions:
                self._sessions.move_to_end(token)
                return token, self._sessions[token]
            new_token = secrets.token_urlsafe(16)
            session = DashboardSession()
            self._sessions[new_token] = session
            while len(self._sessions) > self._max_sessions:
                self._sessions.popitem(last=False)
            return new_token, session

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
