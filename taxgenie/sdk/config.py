"""Configuration management for Tax Genie.

Configuration lives in a single settings.json file:

- tax_data_path: path to a custom tax data YAML file (optional)
- default_state: state code used when none is given (default: CA)
- default_filing_status: filing status used when none is given (default: single)

Config directory resolution:
1. TAX_GENIE_CONFIG_PATH environment variable (if set)
2. ~/.config/tax-genie/ (XDG_CONFIG_HOME fallback)
"""

import json
import os
from pathlib import Path
from typing import Any, Optional


APP_NAME = "tax-genie"
SETTINGS_FILENAME = "settings.json"

DEFAULT_SETTINGS = {
    "default_state": "CA",
    "default_filing_status": "single",
}

KNOWN_SETTINGS = ("tax_data_path", "default_state", "default_filing_status")


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. TAX_GENIE_CONFIG_PATH environment variable
    2. ~/.config/tax-genie/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    # 1. Check environment variable
    env_path = os.environ.get("TAX_GENIE_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    # 2. Fall back to XDG config path
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

    Args:
        settings: Settings dictionary to save

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value, falling back to DEFAULT_SETTINGS, then default.

    Args:
        key: Setting key (e.g., "tax_data_path", "default_state")
        default: Value returned when the key is neither set nor has a built-in default
    """
    settings = load_settings()
    if key in settings:
        return settings[key]
    return DEFAULT_SETTINGS.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def unset_setting(key: str) -> bool:
    """Remove a setting from settings.json.

    Returns:
        True if the key was present and removed
    """
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def get_tax_data_override() -> Optional[Path]:
    """Get the custom tax data file configured in settings, if any."""
    custom = get_setting("tax_data_path")
    if not custom:
        return None
    return Path(custom).expanduser()
