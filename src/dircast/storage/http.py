"""HTTP helpers for the Dropbox API.

Calls are never retried: a failed request is reported to the caller as-is.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from requests import Response, Session

logger = logging.getLogger(__name__)


class HttpError(RuntimeError):
    """Raised when the API response is not successful."""

    def __init__(self, response: Response):
        self.response = response
        self.status_code = response.status_code
        message = f"{response.status_code} {response.reason} for URL {response.url}"
        try:
            self.payload: Any = response.json()
        except ValueError:
            self.payload = response.text
        super().__init__(f"{message}: {self.payload}")

    @property
    def error_summary(self) -> str:
        """Dropbox's machine-readable error summary, or "" if absent."""
        if isinstance(self.payload, dict):
            return str(self.payload.get("error_summary") or "")
        return ""


def request_json(
    session: Session,
    method: str,
    url: str,
    *,
    expected_status: Iterable[int] | None = None,
    timeout: float | None = 60.0,
    **kwargs: Any,
) -> dict[str, Any]:
    """Send a request and decode its JSON body.

    Raises:
        HttpError: If the status is not one of ``expected_status``
        requests.RequestException: On transport failures
        ValueError: If a successful response body is not JSON
    """
    expected = set(expected_status or {200})
    logger.debug("%s %s", method, url)
    response = session.request(method=method, url=url, timeout=timeout, **kwargs)
    if response.status_code not in expected:
        raise HttpError(response)
    if response.content:
        return response.json()
    return {}
