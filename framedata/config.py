"""
Configuration for framedata, read from the environment at import.

A .env file is loaded first: FRAMEDATA_ENV_FILE when set, otherwise the
nearest .env in the package directory or its parents (a checkout root).
Variables already present in the environment win over the file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv


def _find_env_file() -> Path | None:
    explicit = os.getenv("FRAMEDATA_ENV_FILE")
    if explicit:
        path = Path(explicit).expanduser()
        return path if path.is_file() else None
    for directory in list(Path(__file__).resolve().parents)[:3]:
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


_env_file = _find_env_file()
if _env_file:
    load_dotenv(_env_file, override=False)


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


class Config:
    """Application configuration from environment variables."""

    # Wiki source
    BASE_URL: str = os.getenv(
        "FRAMEDATA_BASE_URL", "https://wiki.supercombo.gg/w/Street_Fighter_6"
    )
    USER_AGENT: str = os.getenv(
        "FRAMEDATA_USER_AGENT", "framedata/0.3 (frame data catalog; contact@example.com)"
    )

    # Transport politeness
    REQUEST_TIMEOUT: float = _env_float("FRAMEDATA_REQUEST_TIMEOUT", 15.0)
    REQUEST_DELAY: float = _env_float("FRAMEDATA_REQUEST_DELAY", 0.2)  # seconds between requests
    MAX_RETRIES: int = _env_int("FRAMEDATA_MAX_RETRIES", 3)

    # Hitbox image for per-move blocks that carry none
    DEFAULT_IMAGE_URL: str = os.getenv(
        "FRAMEDATA_DEFAULT_IMAGE_URL",
        "https://wiki.supercombo.gg/images/thumb/4/42/SF6_Logo.png/300px-SF6_Logo.png",
    )

    # Orchestration
    MAX_CONCURRENCY: int = _env_int("FRAMEDATA_MAX_CONCURRENCY", 4)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> list[str]:
        """Validate configuration, return list of issues."""
        issues = []

        if not cls.BASE_URL.startswith(("http://", "https://")):
            issues.append(f"FRAMEDATA_BASE_URL must be an http(s) URL, got {cls.BASE_URL!r}")
        if cls.MAX_CONCURRENCY < 1:
            issues.append("FRAMEDATA_MAX_CONCURRENCY must be at least 1")
        if cls.MAX_RETRIES < 1:
            issues.append("FRAMEDATA_MAX_RETRIES must be at least 1")
        if cls.REQUEST_TIMEOUT <= 0:
            issues.append("FRAMEDATA_REQUEST_TIMEOUT must be positive")

        return issues


# Singleton config instance
config = Config()
