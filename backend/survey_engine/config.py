"""Centralized runtime configuration.

Loads environment variables at import time (``.env`` supported through
python-dotenv) and exposes typed module-level settings.  Invalid values fall
back to defaults with a warning rather than failing startup.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from .constants import (
    CHECKBOX_MAX_POLICIES,
    DEFAULT_CHECKBOX_MAX_POLICY,
    DEFAULT_MAX_CONDITION_LENGTH,
)

load_dotenv()

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("[CONFIG] %s=%r is not an integer, using %d", name, raw, default)
        return default


ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
DEBUG: bool = _env_flag("DEBUG", False)
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./survey_engine.db")

# Audit logging defaults to on everywhere except production
AUDIT_LOG_ENABLED: bool = _env_flag("AUDIT_LOG_ENABLED", ENVIRONMENT != "production")

CHECKBOX_MAX_POLICY: str = os.getenv("CHECKBOX_MAX_POLICY", DEFAULT_CHECKBOX_MAX_POLICY)
if CHECKBOX_MAX_POLICY not in CHECKBOX_MAX_POLICIES:
    logger.warning(
        "[CONFIG] Unknown CHECKBOX_MAX_POLICY=%r (valid: %s), using %s",
        CHECKBOX_MAX_POLICY,
        ", ".join(CHECKBOX_MAX_POLICIES),
        DEFAULT_CHECKBOX_MAX_POLICY,
    )
    CHECKBOX_MAX_POLICY = DEFAULT_CHECKBOX_MAX_POLICY

MAX_CONDITION_LENGTH: int = _env_int("MAX_CONDITION_LENGTH", DEFAULT_MAX_CONDITION_LENGTH)


def log_config_status() -> None:
    """Print the effective configuration to stdout for startup visibility."""
    print(f"   Environment:      {ENVIRONMENT}")
    print(f"   Database:         {DATABASE_URL.split('://', 1)[0]}")
    print(f"   Audit log:        {'enabled' if AUDIT_LOG_ENABLED else 'disabled'}")
    print(f"   Checkbox max:     {CHECKBOX_MAX_POLICY}")
