"""
Load the optional YAML overlay (``config/news.yaml``) with ``${VAR}`` expansion.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "news.yaml"


def load_config_file(path: Optional[Path] = None) -> Dict[str, Any]:
    config_path = path or Path(os.getenv("NEWS_CONFIG_PATH") or DEFAULT_CONFIG_PATH)
    if not config_path.exists():
        logger.debug("No config overlay at %s", config_path)
        return {}
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        logger.error("Ignoring unreadable config %s: %s", config_path, exc)
        return {}
    if not isinstance(data, dict):
        logger.error("Config %s must be a mapping at the top level; ignoring", config_path)
        return {}
    return _expand_env(data)


def _expand_env(data: Dict[str, Any]) -> Dict[str, Any]:
    def replace(value: Any) -> Any:
        if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            return os.getenv(value[2:-1], "")
        if isinstance(value, dict):
            return {k: replace(v) for k, v in value.items()}
        if isinstance(value, list):
            return [replace(item) for item in value]
        return value

    return replace(data)  # type: ignore[return-value]
