"""Data models for remote audio files, episodes and feeds."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ContentKind(str, Enum):
    """Audio formats published to the feed, keyed by file suffix."""

    MP3 = "mp3"
    M4A = "m4a"
    M4B = "m4b"

    @property
    def suffix(self) -> str:
        return f".{self.value}"

    @property
    def mime_type(self) -> str:
        """Enclosure MIME type; both MPEG-4 audio kinds share one."""
        if self is ContentKind.MP3:
            return "audio/mpeg"
        return "audio/x-m4a"

    @classmethod
    def from_filename(cls, name: str, case_sensitive: bool = True) -> "ContentKind | None":
        """Infer the kind from a file name, or None if it is not audio."""
        candidate = name if case_sensitive else name.lower()
        for kind in cls:
            if candidate.endswith(kind.suffix):
                return kind
        return None


class RemoteFile(BaseModel):
    """An audio file in the remote folder."""

    model_config = ConfigDict(frozen=True)

    path: str  # Lowercased provider path, used for link lookups
    display_name: str
    size_bytes: int = Field(ge=0)
    modified_at: datetime
    content_kind: ContentKind


class ShareLink(BaseModel):
    """Public link to a remote file."""

    model_config = ConfigDict(frozen=True)

    canonical_url: str


class Enclosure(BaseModel):
    """Downloadable media attached to an episode."""

    url: str
    length_bytes: int = Field(ge=0)
    mime_type: str


class Episode(BaseModel):
    """A single feed item.

    The direct-download URL doubles as the GUID so feed readers dedupe
    episodes across runs.
    """

    title: str
    link: str
    guid: str
    publication_date: str
    enclosure: Enclosure

    @model_validator(mode="after")
    def _guid_is_link(self) -> "Episode":
        if self.guid != self.link:
            raise ValueError("guid must equal link")
        if self.enclosure.url != self.link:
            raise ValueError("enclosure url must equal link")
        return self


class ChannelMetadata(BaseModel):
    """Channel-level fields supplied by configuration."""

    title: str
    link: str
    description: str
    author: str
    image_url: str


class FeedChannel(ChannelMetadata):
    """A channel with its episodes, in listing order."""

    items: list[Episode] = Field(default_factory=list)
