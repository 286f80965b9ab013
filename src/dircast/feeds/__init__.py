"""Feed synthesis: catalog, share links, URL rewriting and RSS output."""

from dircast.feeds.assembler import FeedAssembler, format_rfc2822
from dircast.feeds.catalog import FileCatalog
from dircast.feeds.links import ShareLinkResolver
from dircast.feeds.models import (
    ChannelMetadata,
    ContentKind,
    Enclosure,
    Episode,
    FeedChannel,
    RemoteFile,
    ShareLink,
)
from dircast.feeds.urls import to_direct_download

__all__ = [
    "FeedAssembler",
    "FileCatalog",
    "ShareLinkResolver",
    "to_direct_download",
    "format_rfc2822",
    "ChannelMetadata",
    "ContentKind",
    "Enclosure",
    "Episode",
    "FeedChannel",
    "RemoteFile",
    "ShareLink",
]
