"""Settings read from the environment, plus the rules of the game."""

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./volleyball.db"
DEFAULT_ROSTER_CACHE_SECONDS = 300.0

# Indoor volleyball: a set goes to 25, win by 2
SET_TARGET_POINTS = 25
MIN_SET_ADVANTAGE = 2

# Positions per side in a lineup (6 on court + libero)
LINEUP_SIZE = 7


def _float_env(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r; defaulting to %.1f", env_var, raw, default)
        return default
    if value < 0:
        logger.warning("%s cannot be negative; defaulting to %.1f", env_var, default)
        return default
    return value


def database_url() -> str:
    """Async SQLAlchemy URL of the remote point store."""
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def roster_cache_seconds() -> float:
    return _float_env("ROSTER_CACHE_SECONDS", DEFAULT_ROSTER_CACHE_SECONDS)


def configure_logging(level: str | None = None) -> None:
    """Install a root handler. LOG_LEVEL is used when no level is given."""
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
