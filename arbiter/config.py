"""Project-level configuration and path helpers."""

import os
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent
LOGS_DIR = Path(os.getenv("LOGS_DIR", PROJECT_ROOT / "logs"))
DEFAULT_LOG_PATH = LOGS_DIR / "arbiter.log"
DEFAULT_DB_PATH = ":memory:"
DEFAULT_HOLD_DELAY = 2.0


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve TRACE_DB_URL to an absolute path (in-memory by default)."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def resolve_hold_delay(env_value: str | float | None = None) -> float:
    """Resolve ARBITER_HOLD_DELAY to seconds."""
    if env_value is None or env_value == "":
        return DEFAULT_HOLD_DELAY

    try:
        delay = float(env_value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid hold delay: {env_value!r}") from e

    if delay < 0:
        raise ValueError(f"Hold delay must be non-negative, got {delay}")
    return delay
