# config.py
import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:3000/api"

# aisle labels, legend/diagram labels, single letters, pillars, gates
DEFAULT_ADMIN_LOCATION_PATTERNS: Tuple[str, ...] = (
    "走道.*",
    ".*儲位圖",
    "[A-Z]",
    "柱",
    "大門",
)


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    api_timeout: float = 10.0
    api_token: str = ""
    stats_refresh_seconds: float = 5.0
    search_debounce_ms: int = 500
    admin_location_patterns: Tuple[str, ...] = field(
        default=DEFAULT_ADMIN_LOCATION_PATTERNS
    )
    log_level: str = "INFO"

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_patterns(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return DEFAULT_ADMIN_LOCATION_PATTERNS
    return tuple(p.strip() for p in raw.split(";") if p.strip())


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Read settings from the environment (and `.env` if present).
    Explicit environment variables win over the file.
    """
    load_dotenv(env_file)

    return Settings(
        api_url=(os.getenv("INVENTORY_API_URL") or DEFAULT_API_URL).rstrip("/"),
        api_timeout=_env_number("INVENTORY_API_TIMEOUT", 10.0, float),
        api_token=os.getenv("INVENTORY_API_TOKEN", ""),
        stats_refresh_seconds=_env_number("STATS_REFRESH_SECONDS", 5.0, float),
        search_debounce_ms=_env_number("SEARCH_DEBOUNCE_MS", 500, int),
        admin_location_patterns=_env_patterns("ADMIN_LOCATION_PATTERNS"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(settings: Settings) -> None:
    # basicConfig is a no-op once the root logger has handlers,
    # so Streamlit reruns don't stack handlers
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
