"""
Centralised configuration loader for Learning Journey.

Loads config/journey.yaml once, then exposes its sections through simple
accessor functions merged over in-code defaults.

Usage:
    from journey.utils.config import get_calendar_config, get_web_config
"""

import calendar
import logging
import os
from typing import Any, Dict, Optional

import yaml

from journey.utils.paths import base_path

logger = logging.getLogger(__name__)

CONFIG_FILE = "journey.yaml"

# ---------------------------------------------------------------------------
# Internal cache
# ---------------------------------------------------------------------------
_config_cache: Optional[Dict[str, Any]] = None


def _load_yaml(filename: str) -> Dict[str, Any]:
    """Load a YAML file from config/ and return as dict (empty on failure)."""
    path = os.path.join(base_path(), "config", filename)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.debug("Could not load %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.debug("Ignoring %s: top level is not a mapping", path)
        return {}
    return data


def _config() -> Dict[str, Any]:
    """Return cached journey.yaml contents."""
    global _config_cache
    if _config_cache is None:
        _config_cache = _load_yaml(CONFIG_FILE)
    return _config_cache


def reload() -> None:
    """Force re-read of the config file (useful after editing YAML)."""
    global _config_cache
    _config_cache = None


def _section(name: str, defaults: Dict[str, Any]) -> Dict[str, Any]:
    section = _config().get(name, {}) or {}
    merged = dict(defaults)
    merged.update({k: v for k, v in section.items() if v is not None})
    return merged


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------

# Sunday-first weeks, matching the SUN..SAT header of the calendar screen.
_CALENDAR_DEFAULTS: Dict[str, Any] = {
    "first_weekday": calendar.SUNDAY,
}


def get_calendar_config() -> Dict[str, Any]:
    """Return the ``calendar`` section with defaults."""
    merged = _section("calendar", _CALENDAR_DEFAULTS)
    try:
        merged["first_weekday"] = int(merged["first_weekday"]) % 7
    except (TypeError, ValueError):
        logger.warning("Invalid first_weekday %r, using Sunday", merged["first_weekday"])
        merged["first_weekday"] = calendar.SUNDAY
    return merged


# ---------------------------------------------------------------------------
# Web API
# ---------------------------------------------------------------------------

_WEB_DEFAULTS: Dict[str, Any] = {
    "host": "127.0.0.1",
    "port": 5000,
}


def get_web_config() -> Dict[str, Any]:
    """Return the ``web`` section with defaults."""
    merged = _section("web", _WEB_DEFAULTS)
    merged["port"] = int(merged["port"])
    return merged


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

_LOGGING_DEFAULTS: Dict[str, Any] = {
    "level": "INFO",
    "action_log": True,
}


def get_logging_config() -> Dict[str, Any]:
    """Return the ``logging`` section with defaults."""
    merged = _section("logging", _LOGGING_DEFAULTS)
    merged["level"] = str(merged["level"]).upper()
    return merged
