from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

DEFAULT_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
CONFIG_DIR = Path(__file__).resolve().parent


def _parse_origins(raw: str) -> list[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or list(DEFAULT_ORIGINS)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(0, int(raw))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(0.0, float(raw))
    except ValueError:
        return default


@dataclass(slots=True)
class Settings:
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))
    log_level: str = "INFO"
    log_format: str = "console"
    change_log_max_retries: int = 2
    change_log_backoff_seconds: float = 1.0
    receivables_config: Path = CONFIG_DIR / "receivables.yaml"

    @classmethod
    def from_env(cls) -> "Settings":
        log_level = (os.getenv("LOG_LEVEL") or "INFO").upper()
        if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
            log_level = "INFO"
        log_format = (os.getenv("LOG_FORMAT") or "console").lower()
        if log_format not in {"console", "json"}:
            log_format = "console"
        config_path = os.getenv("RECEIVABLES_CONFIG")
        return cls(
            cors_origins=_parse_origins(os.getenv("API_CORS_ORIGINS", "")),
            log_level=log_level,
            log_format=log_format,
            change_log_max_retries=_env_int("CHANGE_LOG_MAX_RETRIES", 2),
            change_log_backoff_seconds=_env_float("CHANGE_LOG_BACKOFF_SECONDS", 1.0),
            receivables_config=Path(config_path).expanduser() if config_path else CONFIG_DIR / "receivables.yaml",
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process settings, read once from the environment."""

    return Settings.from_env()
