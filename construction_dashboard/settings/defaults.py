"""Configuration loader for the JSON settings files."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from .. import config


def load_config(config_name: str) -> Dict[str, Any]:
    """Load a settings file by name.

    Args:
        config_name: Name of the settings file (without .json extension)

    Returns:
        Dictionary containing the settings

    Raises:
        FileNotFoundError: If the settings file doesn't exist
        json.JSONDecodeError: If the settings file is invalid JSON

    Example:
        >>> load_config('labels')['chart']['planned']
        'Planejado'
    """
    return _load_config(str(Path(config.SETTINGS_DIR) / f"{config_name}.json"))


@lru_cache(maxsize=None)
def _load_config(config_path: str) -> Dict[str, Any]:
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def get_labels_config() -> Dict[str, Any]:
    """Get the label settings (months, currency, chart and table names)."""
    return load_config('labels')


def get_config_value(config_name: str, *keys: str, default: Any = None) -> Any:
    """Get a nested settings value by key path.

    Args:
        config_name: Name of the settings file
        *keys: Path to the nested value (e.g., 'chart', 'planned')
        default: Default value if key path doesn't exist

    Returns:
        The settings value at the specified path, or default if not found

    Example:
        >>> get_config_value('labels', 'currency', 'symbol')
        'R$'
    """
    try:
        value = load_config(config_name)
        for key in keys:
            value = value[key]
        return value
    except (KeyError, TypeError, FileNotFoundError):
        return default
