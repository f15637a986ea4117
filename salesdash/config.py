import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# --- Paths ---
BASE_DIR = Path(__file__).resolve().parent.parent
CACHE_DIR = Path(os.getenv("SALESDASH_CACHE_DIR") or (BASE_DIR / "data_cache"))
SALES_FILE = "sales.parquet"
TARGETS_FILE = "targets.parquet"

# --- Models ---
# Ollama model used for the first-attempt answer; the rule engine covers the rest.
LLM_MODEL = os.getenv("SALESDASH_LLM_MODEL", "llama3.1:8b")
# Empty host means "not configured" unless SALESDASH_LLM_ENABLED says otherwise.
LLM_HOST = os.getenv("SALESDASH_LLM_HOST", "")
LLM_ENABLED = os.getenv("SALESDASH_LLM_ENABLED", "").strip().lower() in {"1", "true", "yes", "on"}

# --- Stores ---
# Fixed order: every per-store view follows this list, not the data.
STORES = ["Dark store", "Tagmo", "Heliopolis", "Maadi"]

# Monthly fallback targets (EGP) when no store_targets row exists
DEFAULT_TARGETS = {
    "Dark store": 1000000,
    "Tagmo": 750000,
    "Heliopolis": 1000000,
    "Maadi": 700000,
}

# Substrings that name a branch inside a question (Latin + Arabic)
BRANCH_ALIASES = {
    "Dark store": ["dark", "المظلم", "الفندق"],
    "Heliopolis": ["helio", "مصر الجديدة"],
    "Tagmo": ["tagmo", "تجمع"],
    "Maadi": ["maadi", "معادي"],
}

# --- Ingestion ---
HEADER_ROWS = 2          # title row + store/column row
STORE_BLOCK_WIDTH = 3    # orders, sales, spare
STORE_MATCH_MIN_SCORE = 80
ALLOWED_TYPES = ["xlsx", "xls"]

# --- UI ---
APP_TITLE = "cstore — Sales Dashboard"
CHART_DAYS = 10
RECENT_ROWS = 50
CURRENCY = "EGP"
