"""Custom exceptions for Dircast.

Errors are split into fatal ones, which abort a run before any feed is
written, and per-file ones, which drop a single episode from the feed.
"""

from enum import Enum


class DircastError(Exception):
    """Base exception for all Dircast errors."""

    fatal: bool = True


class ConfigError(DircastError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class AuthFailure(str, Enum):
    """Reasons the credential exchange can fail."""

    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_GRANT = "invalid_grant"
    TRANSPORT = "transport"
    NO_REFRESH_TOKEN_GRANTED = "no_refresh_token_granted"
    CODE_EXCHANGE_FAILED = "code_exchange_failed"


class AuthError(DircastError):
    """OAuth2 token exchange or authorization failed."""

    def __init__(self, reason: AuthFailure, message: str) -> None:
        super().__init__(f"{message} ({reason.value})")
        self.reason = reason


class CatalogFailure(str, Enum):
    """Reasons a directory listing can fail."""

    LISTING_FAILED = "listing_failed"


class CatalogError(DircastError):
    """Remote directory could not be listed."""

    def __init__(self, reason: CatalogFailure, message: str) -> None:
        super().__init__(f"{message} ({reason.value})")
        self.reason = reason


class ShareLinkFailure(str, Enum):
    """Reasons a share link could not be resolved."""

    CREATION_FAILED = "creation_failed"
    EXISTS_BUT_UNLISTABLE = "exists_but_unlistable"


class ShareLinkError(DircastError):
    """Share link for a single file could not be created or found."""

    fatal = False

    def __init__(
        self,
        reason: ShareLinkFailure,
        path: str,
        message: str,
        cause: Exception | str | None = None,
    ) -> None:
        super().__init__(f"{path}: {message} ({reason.value})")
        self.reason = reason
        self.path = path
        self.cause = cause


class NormalizationFailure(str, Enum):
    """Reasons a share link cannot become a direct-download URL."""

    UNEXPECTED_LINK_SHAPE = "unexpected_link_shape"


class NormalizationError(DircastError):
    """Share link does not look like a Dropbox share link."""

    fatal = False

    def __init__(self, reason: NormalizationFailure, link: str, message: str) -> None:
        super().__init__(f"{message}: {link} ({reason.value})")
        self.reason = reason
        self.link = link


class SerializationError(DircastError):
    """Feed document could not be produced."""

    pass
