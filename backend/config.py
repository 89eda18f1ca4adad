import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_SECRET = "change-me-in-prod"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and never mutated."""

    jwt_secret: str = DEFAULT_SECRET
    database_url: str = "sqlite:///dotrack.db"
    default_list_limit: int = 20
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> "Settings":
        settings = cls(
            jwt_secret=os.environ.get("JWT_AUTH_SECRET", DEFAULT_SECRET),
            database_url=os.environ.get("DATABASE_URL", "sqlite:///dotrack.db"),
            default_list_limit=_int_env("DEFAULT_LIST_LIMIT", 20),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            log_format=os.environ.get("LOG_FORMAT", "text"),
        )
        if settings.jwt_secret == DEFAULT_SECRET:
            logger.warning("JWT_AUTH_SECRET is not set, using the development default")
        return settings
