"""Stirling PDF MCP configuration.

Settings come from environment variables (optionally loaded from a .env
file) and are read once at startup into an immutable ``Settings`` value
that is passed explicitly to the API client.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

# Load environment variables from a .env file
load_dotenv()

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_TIMEOUT_SECONDS = 120.0
LOGGER_NAME = "stirling-pdf"


def _bool_env(raw: Optional[str], default: bool = False) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "y", "on")


def _float_env(raw: Optional[str], default: float) -> float:
    try:
        value = float(raw) if raw is not None and raw.strip() else default
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at boot."""

    api_url: str = DEFAULT_API_URL
    api_key: str = ""
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        api_url = (env.get("STIRLING_PDF_URL") or "").strip() or DEFAULT_API_URL
        return cls(
            api_url=api_url.rstrip("/"),
            api_key=(env.get("STIRLING_PDF_API_KEY") or "").strip(),
            timeout_seconds=_float_env(env.get("STIRLING_PDF_TIMEOUT"), DEFAULT_TIMEOUT_SECONDS),
            log_level=(env.get("STIRLING_PDF_LOG_LEVEL") or "INFO").strip().upper(),
            debug=_bool_env(env.get("STIRLING_PDF_DEBUG")),
        )

    @property
    def api_key_set(self) -> bool:
        return bool(self.api_key)


def setup_logging(settings: Settings) -> logging.Logger:
    """Set up logging configuration.

    Logs go to stderr; stdout carries the stdio transport.

    Returns:
        Configured logger instance for the stirling-pdf package
    """
    level = "DEBUG" if settings.debug else settings.log_level
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level = "INFO"

    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level))
    return logger


def running_in_docker() -> bool:
    try:
        return Path("/.dockerenv").exists()
    except OSError:
        return False


def get_config_summary(settings: Settings) -> Dict[str, Any]:
    """Get a summary of current configuration settings.

    The API key itself is never included, only whether it is set.
    """
    return {
        "api_url": settings.api_url,
        "api_key_set": settings.api_key_set,
        "timeout_seconds": settings.timeout_seconds,
        "log_level": settings.log_level,
        "debug_mode": settings.debug,
        "running_in_docker": running_in_docker(),
    }
