"""XDG directory management for logtint."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir

SETTINGS_FILE_NAME = "highlighters.toml"


def get_config_dir() -> Path:
    """Get the logtint config directory.

    Respects LOGTINT_CONFIG_DIR environment variable if set.
    """
    if override := os.environ.get("LOGTINT_CONFIG_DIR"):
        return Path(override)
    return Path(user_config_dir("logtint"))


def get_settings_path() -> Path:
    """Path of the settings file holding highlighter sets."""
    return get_config_dir() / SETTINGS_FILE_NAME
