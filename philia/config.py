"""
Runtime configuration from environment variables.

Variables (a .env file in the working directory is loaded first):
- PHILIA_LOG_LEVEL: structlog level name (default INFO)
- PHILIA_LOG_JSON: "true" renders log lines as JSON
- PHILIA_TEST_MODE: "true" marks a test run
- PHILIA_RANDOM_SEED: integer seed for make_rng()
"""

from __future__ import annotations

import logging
import os
import random
from typing import Optional

import structlog
from dotenv import load_dotenv

from philia.errors import ConfigError

load_dotenv()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() == "true"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return _env_flag("PHILIA_TEST_MODE")


def log_level() -> str:
    return os.getenv("PHILIA_LOG_LEVEL", "INFO").upper()


def random_seed() -> Optional[int]:
    """Seed from PHILIA_RANDOM_SEED, or None when unset."""
    raw = os.getenv("PHILIA_RANDOM_SEED")
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"PHILIA_RANDOM_SEED must be an integer, got {raw!r}") from exc


def make_rng(seed: Optional[int] = None) -> random.Random:
    """
    Random source for fuzz and queue shuffles.

    Args:
        seed: Explicit seed; falls back to PHILIA_RANDOM_SEED

    Returns:
        random.Random (unseeded when neither is set)
    """
    if seed is None:
        seed = random_seed()
    return random.Random(seed)


def configure_logging(level: Optional[str] = None, json: Optional[bool] = None) -> None:
    """
    Configure structlog from the environment.

    Args:
        level: Level name, overrides PHILIA_LOG_LEVEL
        json: JSON output, overrides PHILIA_LOG_JSON
    """
    level_name = (level or log_level()).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ConfigError(f"Unknown log level: {level_name}")

    if json is None:
        json = _env_flag("PHILIA_LOG_JSON")

    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
