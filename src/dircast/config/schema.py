"""Configuration schema models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

# Values "" and "-" in DROPBOX_REFRESH_TOKEN both mean "not configured"
UNSET_TOKEN_VALUES = {"", "-"}


class DropboxConfig(BaseModel):
    """OAuth client settings for the Dropbox app."""

    app_key: str | None = None
    app_secret: str | None = None
    refresh_token: str | None = None  # Never written back to disk

    @property
    def has_refresh_token(self) -> bool:
        """Whether a usable refresh token is configured."""
        return self.refresh_token is not None and self.refresh_token.strip() not in UNSET_TOKEN_VALUES


class ChannelConfig(BaseModel):
    """Channel-level metadata for the generated feed."""

    title: str = "Reilly's Awesome Podcast"
    description: str = "It's Reilly's Podcast, Baby!"
    author: str = "Reilly Watson"


class GlobalConfig(BaseModel):
    """Global Dircast configuration."""

    version: str = "1"
    log_level: LogLevel = "INFO"

    # Share links are resolved one file at a time unless workers > 1
    workers: int = Field(default=1, ge=1, le=32)
    http_timeout_seconds: float = Field(default=60.0, gt=0)

    # Suffix matching is case-sensitive: "EP1.MP3" is skipped by default
    extensions_case_sensitive: bool = True

    dropbox: DropboxConfig = Field(default_factory=DropboxConfig)
    channel: ChannelConfig = Field(default_factory=ChannelConfig)
