"""Environment-driven settings for the Coup API."""

import logging
import os

# Env var names
ENV_CORS_ORIGINS = "COUP_CORS_ORIGINS"
ENV_LOG_LEVEL = "COUP_LOG_LEVEL"

DEFAULT_CORS_ORIGINS = "*"
DEFAULT_LOG_LEVEL = "INFO"


def get_cors_origins() -> list[str]:
    """Allowed CORS origins from a comma-separated env var (default: any origin)."""
    raw = os.environ.get(ENV_CORS_ORIGINS) or DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_log_level() -> int:
    """Log level from env; unknown names fall back to INFO."""
    name = (os.environ.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
