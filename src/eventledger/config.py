"""Process settings read from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    """Read an integer environment variable; unset or blank gives the default."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got '{raw}'")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got '{raw}'")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the CLI and the storage layer."""

    db_path: Optional[str] = None
    log_level: str = "WARNING"
    log_json: bool = False
    read_retries: int = 3
    read_backoff: float = 0.1
    user: str = "cli"


def default_db_path() -> str:
    """Return ~/.eventledger/eventledger.db, creating the directory."""
    db_dir = Path.home() / ".eventledger"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "eventledger.db")


def load_settings() -> Settings:
    """Build settings from EVENTLEDGER_* environment variables."""
    return Settings(
        db_path=os.environ.get("EVENTLEDGER_DB_PATH"),
        log_level=os.environ.get("EVENTLEDGER_LOG_LEVEL", "WARNING"),
        log_json=os.environ.get("EVENTLEDGER_LOG_JSON", "").strip().lower() in _TRUE_VALUES,
        read_retries=max(0, env_int("EVENTLEDGER_READ_RETRIES", 3)),
        read_backoff=max(0.0, _env_float("EVENTLEDGER_READ_BACKOFF", 0.1)),
        user=os.environ.get("EVENTLEDGER_USER", "cli"),
    )
