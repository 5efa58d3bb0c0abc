import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DATABASE_URL_VAR = "JOBTRACKER_DATABASE_URL"
API_URL_VAR = "JOBTRACKER_API_URL"
LOG_LEVEL_VAR = "JOBTRACKER_LOG_LEVEL"
LOG_DIR_VAR = "JOBTRACKER_LOG_DIR"

DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_PORT = 5000
DEFAULT_TIMEOUT = 5.0


def load_env() -> None:
    """Load .env from the working directory if present.
    Variables already set in the environment win.
    """
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def require_database_url(explicit: Optional[str] = None) -> str:
    """Return the database URL or exit; the server cannot start without one."""
    url = explicit or os.getenv(DATABASE_URL_VAR)
    if not url:
        raise SystemExit(f"{DATABASE_URL_VAR} not set. Set env var or pass --database-url.")
    return url


def api_url(explicit: Optional[str] = None) -> str:
    return (explicit or os.getenv(API_URL_VAR) or DEFAULT_API_URL).rstrip("/")


def server_port(explicit: Optional[int] = None) -> int:
    if explicit is not None:
        return explicit
    raw = os.getenv("PORT")
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        raise SystemExit(f"PORT must be an integer, got {raw!r}")


def log_level() -> str:
    return os.getenv(LOG_LEVEL_VAR, "INFO")


def log_dir() -> Optional[Path]:
    raw = os.getenv(LOG_DIR_VAR)
    return Path(raw) if raw else None
