"""
Settings Module for Color Lock

Harness preferences read from config.json in the working directory.
The file is optional and hand-edited; the harness never writes it.

Example config.json:
    {
        "difficulty": "medium",
        "tick_interval_ms": 1500,
        "replay_strategy": "fallback",
        "debug_enabled": true
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from colorlock.engine import DifficultyLevel
from colorlock.replay_manager import phase_for_strategy

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug_enabled": False,
    "difficulty": DifficultyLevel.HARD.value,
    "tick_interval_ms": 3000,
    "replay_strategy": "trace"
}


def _is_difficulty(value: Any) -> bool:
    return value in {level.value for level in DifficultyLevel}


def _is_tick_interval(value: Any) -> bool:
    # bool is an int subclass, reject it explicitly
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_strategy(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        phase_for_strategy(value)
    except ValueError:
        return False
    return True


_VALIDATORS: Dict[str, Callable[[Any], bool]] = {
    "debug_enabled": lambda value: isinstance(value, bool),
    "difficulty": _is_difficulty,
    "tick_interval_ms": _is_tick_interval,
    "replay_strategy": _is_strategy,
}


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from config.json.

    Each known key is checked on its own: a bad value falls back to its
    default with a warning while the other keys are kept. Unknown keys
    are ignored.

    Args:
        path: Settings file (SETTINGS_FILE if None)

    Returns:
        Settings dictionary with every default key present
    """
    path = path or SETTINGS_FILE
    result = DEFAULT_SETTINGS.copy()

    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return result

    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return result

    if not isinstance(stored, dict):
        logger.warning("Settings file does not contain an object, using defaults")
        return result

    for key, value in stored.items():
        validator = _VALIDATORS.get(key)
        if validator is None:
            logger.debug(f"Ignoring unknown setting: {key}")
        elif validator(value):
            result[key] = value
        else:
            logger.warning(f"Invalid value for {key}: {value!r}, using {DEFAULT_SETTINGS[key]!r}")

    logger.debug(f"Settings loaded: {result}")
    return result
