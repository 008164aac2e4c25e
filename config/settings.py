import os
import secrets

# Project root directory (stockradar/)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Log output directory
LOGS_DIR = os.getenv("STOCKRADAR_LOGS_DIR") or os.path.join(BASE_DIR, "logs")

# Gemini access key; empty string means every AI call degrades to "unavailable"
API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or ""

# Serve offline mock analyses instead of calling the AI backend
USE_MOCK_DATA = (os.getenv("STOCKRADAR_MOCK") or "").strip().lower() in {"1", "true", "yes"}

# Flask cookie signing key; a per-process token drops sessions on restart
SECRET_KEY = os.getenv("STOCKRADAR_SECRET_KEY") or secrets.token_hex(16)

HOST = os.getenv("STOCKRADAR_HOST", "127.0.0.1")
PORT = int(os.getenv("STOCKRADAR_PORT", "5000"))

ANALYSIS_MODEL = os.getenv("STOCKRADAR_ANALYSIS_MODEL", "gemini-2.5-flash")
REPORT_MODEL = os.getenv("STOCKRADAR_REPORT_MODEL", "gemini-2.5-flash")
IMAGE_MODEL = os.getenv("STOCKRADAR_IMAGE_MODEL", "gemini-2.5-flash-image")

ANALYSIS_TEMPERATURE = 0.5
REPORT_TEMPERATURE = 0.7
REPORT_MAX_OUTPUT_TOKENS = 300
MAX_GROUNDING_SOURCES = 5

# Fallbacks for fields missing from the tagged AI response.
# Placeholders only; they carry no market meaning.
DEFAULT_SYMBOL = "UNKNOWN"
DEFAULT_PRICE = 100.0
DEFAULT_CHANGE_PERCENT = 0.0
DEFAULT_NEWS = "暂无最新消息。"
DEFAULT_RISK_LEVEL = "Medium"
DEFAULT_SCORE = 80
DEFAULT_SIGNAL = "Hold"
DEFAULT_PLATFORM_DESCRIPTION = "适合您的投资风格"
DEFAULT_PLATFORM_NAMES = ("东方财富", "雪球", "同花顺")

# Simulated K-line window and the change-percent band treated as flat
KLINE_DAYS = 30
TREND_THRESHOLD_PCT = 0.5

# In-memory browser sessions kept before the least recently used is dropped
MAX_SESSIONS = int(os.getenv("STOCKRADAR_MAX_SESSIONS", "500"))

# Ensure required local directories exist
os.makedirs(LOGS_DIR, exist_ok=True)
