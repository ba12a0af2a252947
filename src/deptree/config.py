"""Defaults for the CLI and TUI, overridable through environment variables."""

from __future__ import annotations

import logging
import os

from deptree.traversal.serializing import TOKEN_SETS

logger = logging.getLogger(__name__)

TOKENS_ENV = "DEPTREE_TOKENS"
LOG_LEVEL_ENV = "DEPTREE_LOG_LEVEL"

DEFAULT_TOKENS = "ascii"
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_token_style() -> str:
    """Token style name from DEPTREE_TOKENS, or ``ascii`` when unset or unknown."""
    value = os.environ.get(TOKENS_ENV, "").strip().lower()
    if not value:
        return DEFAULT_TOKENS
    if value not in TOKEN_SETS:
        logger.warning("Ignoring %s=%r; expected one of: %s", TOKENS_ENV, value, ", ".join(TOKEN_SETS))
        return DEFAULT_TOKENS
    return value


def default_log_level() -> str:
    value = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not value:
        return DEFAULT_LOG_LEVEL
    if value not in _LOG_LEVELS:
        logger.warning("Ignoring %s=%r; expected one of: %s", LOG_LEVEL_ENV, value, ", ".join(_LOG_LEVELS))
        return DEFAULT_LOG_LEVEL
    return value
