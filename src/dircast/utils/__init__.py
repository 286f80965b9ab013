"""Utility functions and helpers for Dircast."""

from dircast.utils.errors import (
    AuthError,
    AuthFailure,
    CatalogError,
    CatalogFailure,
    ConfigError,
    DircastError,
    InvalidConfigError,
    NormalizationError,
    NormalizationFailure,
    SerializationError,
    ShareLinkError,
    ShareLinkFailure,
)
from dircast.utils.paths import get_config_dir, get_config_file

__all__ = [
    # Errors
    "DircastError",
    "ConfigError",
    "InvalidConfigError",
    "AuthError",
    "AuthFailure",
    "CatalogError",
    "CatalogFailure",
    "ShareLinkError",
    "ShareLinkFailure",
    "NormalizationError",
    "NormalizationFailure",
    "SerializationError",
    # Paths
    "get_config_dir",
    "get_config_file",
]
