import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
DATA_DIR = BASE_DIR / os.getenv("DATA_DIR", "data")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- AI Document Import ---
# API_KEY is the name older deployments used.
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY") or os.getenv("API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# --- Storage Keys ---
REPORTS_KEY = "stationaryAppReports"
STOCK_KEY = "stationaryAppStock"
SELECTED_REPORT_KEY = "stationaryAppSelectedId"
USERS_KEY = "stationaryAppUsers"
SESSION_KEY = "stationaryAppAuth"

# --- Catalog ---
# The two rows match the layout of the item grid on the report form.
STATIONARY_ITEMS_ROW1 = [
    "A4 Paper",
    "A3 Paper",
    "Bk",
    "Pen",
    "Pencil",
    "Marker",
    "Highlighter",
    "Stapler",
    "Staples",
    "Folder",
    "Envelope",
    "Sticky Notes",
]

STATIONARY_ITEMS_ROW2 = [
    "Mouse",
    "Keyboard",
    "Webcam",
    "Headset",
    "USB Drive",
    "HDMI Cable",
    "Printer Ink",
    "Toner",
]

STATIONARY_ITEMS = STATIONARY_ITEMS_ROW1 + STATIONARY_ITEMS_ROW2

CAMPUS_OPTIONS = [
    "Campus1",
    "Campus2",
    "Campus3",
    "Campus4",
]

# --- Auth ---
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "123")


def is_ai_configured() -> bool:
    """True when an API key for document import is available."""
    return bool(OPENAI_API_KEY)
