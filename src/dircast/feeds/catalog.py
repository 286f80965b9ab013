"""Listing remote folders and picking out audio files."""

import logging

import requests
from pydantic import ValidationError

from dircast.feeds.models import ContentKind, RemoteFile
from dircast.storage.client import DropboxClient
from dircast.storage.http import HttpError
from dircast.storage.models import FileEntry
from dircast.utils.errors import CatalogError, CatalogFailure

logger = logging.getLogger(__name__)


def normalize_directory_path(directory_path: str) -> str:
    """Drop trailing slashes; the account root becomes ""."""
    return directory_path.rstrip("/")


class FileCatalog:
    """Lists the audio files directly inside a remote folder."""

    def __init__(self, client: DropboxClient, case_sensitive: bool = True) -> None:
        """Initialize the catalog.

        Args:
            client: Authenticated storage client
            case_sensitive: Match ".mp3" but not ".MP3" when True
        """
        self.client = client
        self.case_sensitive = case_sensitive

    def list_audio_files(self, directory_path: str) -> list[RemoteFile]:
        """List audio files in a folder, in the order the provider returns them.

        Subfolders are skipped and there is no recursion. Only the first page
        of results is read.

        Args:
            directory_path: Remote folder path

        Returns:
            RemoteFile for every entry with a recognized audio suffix

        Raises:
            CatalogError: If the listing call fails
        """
        path = normalize_directory_path(directory_path)
        try:
            result = self.client.list_folder(path)
        except (HttpError, requests.RequestException, ValidationError, ValueError) as e:
            raise CatalogError(
                CatalogFailure.LISTING_FAILED,
                f"Failed to list Dropbox folder '{directory_path}': {e}",
            ) from e

        if result.has_more:
            logger.warning(
                "Folder '%s' has more entries than one listing returns; "
                "only the first %d entries are considered",
                directory_path,
                len(result.entries),
            )

        files: list[RemoteFile] = []
        for entry in result.entries:
            if not isinstance(entry, FileEntry):
                continue
            kind = ContentKind.from_filename(entry.name, case_sensitive=self.case_sensitive)
            if kind is None:
                logger.debug("Skipping non-audio file %s", entry.name)
                continue
            files.append(
                RemoteFile(
                    path=entry.path_lower,
                    display_name=entry.name,
                    size_bytes=entry.size,
                    modified_at=entry.server_modified,
                    content_kind=kind,
                )
            )

        logger.info("Found %d audio file(s) in '%s'", len(files), directory_path)
        return files
