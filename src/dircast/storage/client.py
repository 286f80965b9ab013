"""Minimal Dropbox API v2 client.

Only the three calls the feed pipeline needs are implemented: folder
listing, shared link creation and shared link listing.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

import requests

from dircast.storage.http import HttpError, request_json
from dircast.storage.models import (
    AlreadyExists,
    Created,
    CreateLinkResult,
    ListFolderResult,
    OtherError,
)

logger = logging.getLogger(__name__)

API_BASE = "https://api.dropboxapi.com/2"

# Dropbox error_summary prefixes for sharing/create_shared_link_with_settings.
# Keep this the only place that knows the provider's error vocabulary.
ALREADY_EXISTS_PREFIX = "shared_link_already_exists"
KNOWN_LINK_ERRORS = {
    "path/not_found": "file not found",
    "path/malformed_path": "malformed path",
    "path/not_file": "path is not a file",
    "access_denied": "permission denied",
    "email_not_verified": "account email not verified",
    "settings_error": "invalid link settings",
    "too_many_requests": "rate limited",
    "too_many_write_operations": "rate limited",
}


def classify_create_link_error(status_code: int | None, payload: Any) -> CreateLinkResult:
    """Turn an error response from link creation into a CreateLinkResult.

    Args:
        status_code: HTTP status of the failed call
        payload: Decoded JSON body (or raw text if it was not JSON)

    Returns:
        AlreadyExists if the provider says a link exists, OtherError otherwise
    """
    summary = ""
    if isinstance(payload, dict):
        summary = str(payload.get("error_summary") or "")

    if summary.startswith(ALREADY_EXISTS_PREFIX):
        return AlreadyExists(summary=summary)

    for prefix, description in KNOWN_LINK_ERRORS.items():
        if summary.startswith(prefix):
            return OtherError(summary=summary, status_code=status_code, description=description)

    if status_code == 429:
        return OtherError(summary=summary, status_code=status_code, description="rate limited")

    return OtherError(
        summary=summary or str(payload),
        status_code=status_code,
        description="unexpected error",
    )


class DropboxClient:
    """Bearer-authenticated client for the Dropbox HTTP API.

    Each thread gets its own ``requests.Session``. A session passed in by
    the caller is used by every thread instead and is left open by
    ``close``.
    """

    def __init__(
        self,
        access_token: str,
        session: requests.Session | None = None,
        timeout: float | None = 60.0,
        api_base: str = API_BASE,
    ) -> None:
        self.timeout = timeout
        self.api_base = api_base.rstrip("/")
        self._auth_headers = {"Authorization": f"Bearer {access_token}"}
        self._shared_session = session
        if session is not None:
            session.headers.update(self._auth_headers)

        self._thread_local = threading.local()
        self._owned_sessions: list[requests.Session] = []
        self._owned_sessions_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """Session for the calling thread."""
        if self._shared_session is not None:
            return self._shared_session

        session = getattr(self._thread_local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self._auth_headers)
            self._thread_local.session = session
            with self._owned_sessions_lock:
                self._owned_sessions.append(session)
            logger.debug("Created HTTP session for thread %s", threading.current_thread().name)
        return session

    def close(self) -> None:
        """Close every session this client created."""
        with self._owned_sessions_lock:
            for session in self._owned_sessions:
                session.close()
            self._owned_sessions.clear()
        self._thread_local = threading.local()

    def __enter__(self) -> DropboxClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _rpc(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        return request_json(
            self.session,
            "POST",
            f"{self.api_base}/{endpoint}",
            json=body,
            timeout=self.timeout,
        )

    def list_folder(self, path: str) -> ListFolderResult:
        """List the immediate entries of a folder (single page).

        Raises:
            HttpError: On a non-2xx response
            requests.RequestException: On transport failures
            pydantic.ValidationError: If the listing is malformed
        """
        payload = self._rpc("files/list_folder", {"path": path, "recursive": False})
        return ListFolderResult.model_validate(payload)

    def create_shared_link(self, path: str) -> CreateLinkResult:
        """Create a public link for a file.

        API-level failures are returned as AlreadyExists/OtherError rather
        than raised. Transport failures still raise.
        """
        try:
            payload = self._rpc("sharing/create_shared_link_with_settings", {"path": path})
        except HttpError as e:
            logger.debug("Link creation for %s refused: %s", path, e.error_summary or e.status_code)
            return classify_create_link_error(e.status_code, e.payload)

        url = payload.get("url")
        if not url:
            return OtherError(summary=str(payload), description="response has no url")
        return Created(url=url)

    def list_shared_links(self, path: str) -> list[str]:
        """Return the URLs of existing links for exactly this file.

        Raises:
            HttpError: On a non-2xx response
            requests.RequestException: On transport failures
        """
        payload = self._rpc(
            "sharing/list_shared_links",
            {"path": path, "direct_only": True},
        )
        return [link["url"] for link in payload.get("links", []) if link.get("url")]
