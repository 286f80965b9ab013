"""Resolving a public share link for each remote file."""

import logging

import requests

from dircast.feeds.models import ShareLink
from dircast.storage.client import DropboxClient
from dircast.storage.http import HttpError
from dircast.storage.models import AlreadyExists, Created, OtherError
from dircast.utils.errors import ShareLinkError, ShareLinkFailure

logger = logging.getLogger(__name__)


class ShareLinkResolver:
    """Returns the public link for a file, creating one if needed.

    Safe to call repeatedly for the same path: an existing link is looked
    up instead of treated as an error.
    """

    def __init__(self, client: DropboxClient) -> None:
        self.client = client

    def resolve(self, path: str) -> ShareLink:
        """Get or create the share link for ``path``.

        Raises:
            ShareLinkError: creation_failed, or exists_but_unlistable when the
                provider reports a link but it cannot be listed
        """
        try:
            result = self.client.create_shared_link(path)
        except requests.RequestException as e:
            raise ShareLinkError(
                ShareLinkFailure.CREATION_FAILED, path, "Share link request failed", cause=e
            ) from e

        if isinstance(result, Created):
            logger.debug("Created share link for %s", path)
            return ShareLink(canonical_url=result.url)

        if isinstance(result, AlreadyExists):
            return self._existing_link(path)

        if isinstance(result, OtherError):
            raise ShareLinkError(
                ShareLinkFailure.CREATION_FAILED,
                path,
                f"Could not create share link: {result.description}",
                cause=result.summary,
            )

        raise TypeError(f"Unexpected create-link result: {result!r}")

    def _existing_link(self, path: str) -> ShareLink:
        try:
            urls = self.client.list_shared_links(path)
        except (HttpError, requests.RequestException) as e:
            raise ShareLinkError(
                ShareLinkFailure.EXISTS_BUT_UNLISTABLE,
                path,
                "Share link exists but listing it failed",
                cause=e,
            ) from e

        if not urls:
            raise ShareLinkError(
                ShareLinkFailure.EXISTS_BUT_UNLISTABLE,
                path,
                "Share link exists but none was returned",
            )

        logger.debug("Reusing existing share link for %s", path)
        return ShareLink(canonical_url=urls[0])
