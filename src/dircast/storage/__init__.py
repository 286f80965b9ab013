"""Dropbox storage client used by the feed pipeline."""

from dircast.storage.client import DropboxClient, classify_create_link_error
from dircast.storage.http import HttpError
from dircast.storage.models import (
    AlreadyExists,
    Created,
    CreateLinkResult,
    FileEntry,
    FolderEntry,
    ListFolderResult,
    OtherError,
)

__all__ = [
    "DropboxClient",
    "classify_create_link_error",
    "HttpError",
    "FileEntry",
    "FolderEntry",
    "ListFolderResult",
    "Created",
    "AlreadyExists",
    "OtherError",
    "CreateLinkResult",
]
