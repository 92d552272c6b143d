#!/usr/bin/env python3
"""
Runtime configuration read from environment variables.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_CACHE_TTL = 3600  # seconds
DEFAULT_CACHE_MAX_SIZE = 1000
DEFAULT_REQUEST_TIMEOUT_MS = 30000
MIN_REQUEST_TIMEOUT_MS = 1000
DEFAULT_MAX_README_CHARS = 500_000


@dataclass(frozen=True)
class Settings:
    github_token: Optional[str] = None
    cache_ttl: int = DEFAULT_CACHE_TTL
    cache_max_size: int = DEFAULT_CACHE_MAX_SIZE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_MS / 1000
    log_level: str = "INFO"
    logs_dir: Path = Path("./logs")
    max_readme_chars: int = DEFAULT_MAX_README_CHARS


def _non_negative_int(environ: Mapping[str, str], name: str) -> Optional[int]:
    raw = environ.get(name)
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} environment variable must be a non-negative integer", {name: raw})
    if value < 0:
        raise ConfigurationError(f"{name} environment variable must be a non-negative integer", {name: raw})
    return value


def validate_environment(environ: Optional[Mapping[str, str]] = None) -> None:
    """
    Check environment variables before the server starts.

    Raises:
        ConfigurationError: if any variable is present but malformed
    """
    if environ is None:
        environ = os.environ

    token = environ.get("GITHUB_TOKEN")
    if token is not None and not token.strip():
        raise ConfigurationError("GITHUB_TOKEN environment variable must be a non-empty string if provided")

    _non_negative_int(environ, "CACHE_TTL")
    _non_negative_int(environ, "CACHE_MAX_SIZE")
    _non_negative_int(environ, "MAX_README_CHARS")

    timeout = _non_negative_int(environ, "REQUEST_TIMEOUT")
    if timeout is not None and timeout < MIN_REQUEST_TIMEOUT_MS:
        raise ConfigurationError(
            f"REQUEST_TIMEOUT environment variable must be at least {MIN_REQUEST_TIMEOUT_MS} milliseconds",
            {"REQUEST_TIMEOUT": environ.get("REQUEST_TIMEOUT")}
        )


def get_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment, applying defaults for unset values."""
    if environ is None:
        environ = os.environ

    validate_environment(environ)

    def pick(name: str, default: int) -> int:
        value = _non_negative_int(environ, name)
        return default if value is None else value

    return Settings(
        github_token=environ.get("GITHUB_TOKEN") or None,
        cache_ttl=pick("CACHE_TTL", DEFAULT_CACHE_TTL),
        cache_max_size=pick("CACHE_MAX_SIZE", DEFAULT_CACHE_MAX_SIZE),
        request_timeout=pick("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT_MS) / 1000,
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
        logs_dir=Path(environ.get("LOGS_DIR", "./logs")),
        max_readme_chars=pick("MAX_README_CHARS", DEFAULT_MAX_README_CHARS),
    )
