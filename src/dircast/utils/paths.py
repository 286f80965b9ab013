"""Filesystem locations used by Dircast."""

from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "dircast"


def get_config_dir() -> Path:
    """Return the per-user configuration directory."""
    return Path(user_config_dir(APP_NAME))


def get_config_file() -> Path:
    """Return the default config.yaml location."""
    return get_config_dir() / "config.yaml"
