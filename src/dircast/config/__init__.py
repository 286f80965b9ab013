"""Configuration loading and logging setup for Dircast."""

from dircast.config.logging import setup_logging
from dircast.config.manager import ConfigManager
from dircast.config.schema import ChannelConfig, DropboxConfig, GlobalConfig

__all__ = [
    "ConfigManager",
    "GlobalConfig",
    "DropboxConfig",
    "ChannelConfig",
    "setup_logging",
]
