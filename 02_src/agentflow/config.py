"""Project-level configuration and path helpers."""

import os
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "agentflow.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://localhost:5174")


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def env_flag(name: str, default: bool) -> bool:
    """Read a boolean environment variable ("1", "true", "yes", "on")."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def get_step_delay_scale() -> float:
    """Multiplier applied to plan step delays (STEP_DELAY_SCALE, default 1.0)."""
    raw = os.getenv("STEP_DELAY_SCALE", "1.0")
    try:
        scale = float(raw)
    except ValueError:
        raise ValueError(f"STEP_DELAY_SCALE must be a number, got {raw!r}")
    if scale < 0:
        raise ValueError("STEP_DELAY_SCALE must not be negative")
    return scale


def get_cors_origins() -> list[str]:
    """Allowed CORS origins from CORS_ORIGINS (comma separated)."""
    raw = os.getenv("CORS_ORIGINS")
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
