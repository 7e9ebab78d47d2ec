"""Utility functions for the NewsDigest Flask service."""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

logger = logging.getLogger("newsdigest")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None, log_dir: Optional[str] = None) -> None:
    """Configure root logging with a stream handler and a file handler under ``LOG_DIR``.

    Args:
        level: Log level name; defaults to ``LOG_LEVEL`` or INFO.
        log_dir: Directory for ``newsdigest.log``; defaults to ``LOG_DIR`` or ``logs``.
    """
    resolved_level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    directory = Path(log_dir or os.getenv("LOG_DIR") or "logs")
    directory.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, resolved_level, logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(directory / "newsdigest.log"),
            logging.StreamHandler(),
        ],
    )


def get_env(name: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """Get environment variable with optional validation.

    Args:
        name: Environment variable name.
        default: Default value if variable is not set.
        required: Whether the variable is required.

    Returns:
        The environment variable value or default.
    """
    env_value = os.getenv(name, default)
    if required and (not env_value or env_value.startswith("YOUR_")):
        logger.warning("Environment variable %s missing", name)
        return None
    return env_value


def get_current_timestamp() -> str:
    """Get current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()
