"""Converter settings: built-in defaults overlaid with an optional JSON file."""
import json
import logging
import os
from typing import Optional

from .errors import ConfigError
from .units import UnitError, validate_unit

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "EAGLE2GEDA_CONFIG"

_DEFAULT_CONFIG = {
    "source_unit": "mm",
    "board_name": "eagle2geda",
    "board_margin_mm": 5.0,
    "min_board_size_mm": 25.4,
    "clearance_centimils": 2000,
    "mask_centimils": 600,
    "via_annulus_centimils": 1000,
    "log_level": "WARNING",
}

_NUMERIC_KEYS = ("board_margin_mm", "min_board_size_mm")
_CENTIMIL_KEYS = ("clearance_centimils", "mask_centimils", "via_annulus_centimils")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _config_path(path: Optional[str]) -> Optional[str]:
    """Explicit path first, then the environment variable."""
    return path or os.environ.get(CONFIG_ENV_VAR) or None


def load_config(path: Optional[str] = None) -> dict:
    """Load config from a JSON file, returning defaults for missing keys.

    Unknown keys are reported and ignored.  Raises ConfigError if the file
    cannot be read, is not a JSON object, or holds an invalid value.
    """
    config = dict(_DEFAULT_CONFIG)
    path = _config_path(path)
    if path is None:
        return config

    try:
        with open(path, encoding="utf-8") as f:
            stored = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    if not isinstance(stored, dict):
        raise ConfigError(f"Config {path} must hold a JSON object")

    for key, value in stored.items():
        if key not in _DEFAULT_CONFIG:
            logger.warning("ignoring unknown config key '%s' in %s", key, path)
            continue
        config[key] = value
    return validate_config(config)


def validate_config(config: dict) -> dict:
    """Check and normalize config values in place; returns the same dict."""
    try:
        config["source_unit"] = validate_unit(str(config["source_unit"]))
    except UnitError as e:
        raise ConfigError(str(e)) from e

    if not isinstance(config["board_name"], str):
        raise ConfigError("board_name must be a string")

    for key in _NUMERIC_KEYS:
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ConfigError(f"{key} must be a non-negative number, got {value!r}")
        config[key] = float(value)

    for key in _CENTIMIL_KEYS:
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigError(f"{key} must be a non-negative integer, got {value!r}")

    level = str(config["log_level"]).upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(f"Unsupported log_level: {config['log_level']}. Supported: {_LOG_LEVELS}")
    config["log_level"] = level
    return config
