"""
Configuration Loader

Loads config/settings.yaml and merges it over the built-in defaults
(currency rate, crawl pacing, retry policy, Admin API options).
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .constants import DEFAULT_SETTINGS

SETTINGS_FILE = "settings.yaml"
CONFIG_ENV_VAR = "STORECOPY_CONFIG"


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file from the config directory.

    Args:
        filename: Name of the config file (e.g., 'settings.yaml')

    Returns:
        Parsed YAML content as dictionary (empty for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def merge_settings(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge `override` into a copy of `base`.

    Nested dicts are merged key by key; any other value replaces the base value.
    """
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load application settings.

    Resolution order: explicit `path`, then $STORECOPY_CONFIG, then
    config/settings.yaml. A missing default file falls back to the built-in
    defaults; a missing explicit file is an error.

    Returns:
        Settings dict with every key from DEFAULT_SETTINGS present
    """
    explicit = path or os.environ.get(CONFIG_ENV_VAR)

    if explicit:
        settings_path = Path(explicit)
        if not settings_path.exists():
            raise FileNotFoundError(f"Config file not found: {settings_path}")
        with open(settings_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    else:
        try:
            data = load_config(SETTINGS_FILE)
        except FileNotFoundError:
            data = {}

    return merge_settings(DEFAULT_SETTINGS, data)
