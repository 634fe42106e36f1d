from pathlib import Path
import os

from dotenv import load_dotenv

# Load environment variables from repo root and the package parent (if present).
REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")
load_dotenv(Path.cwd() / ".env")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskboard.db")
STORAGE_BACKEND = os.getenv("TASKBOARD_STORAGE", "sql").strip().lower()
SESSION_KEY = os.getenv("TASKBOARD_SESSION_KEY", "currentUser")
SEED_DEMO_DATA = _env_bool("TASKBOARD_SEED_DEMO_DATA", True)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
