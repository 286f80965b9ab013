"""Shared fixtures for Dircast tests."""

import json
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

import pytest
import requests

from dircast.feeds.models import ChannelMetadata, ContentKind, RemoteFile


@pytest.fixture
def make_response():
    """Factory for real requests.Response objects with a canned body."""

    def _make(
        status_code: int = 200,
        json_body: Any = None,
        text: str | None = None,
        url: str = "https://api.dropboxapi.com/2/test",
    ) -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        try:
            response.reason = HTTPStatus(status_code).phrase
        except ValueError:
            response.reason = ""
        response.url = url
        response.encoding = "utf-8"
        if json_body is not None:
            response._content = json.dumps(json_body).encode("utf-8")
            response.headers["Content-Type"] = "application/json"
        elif text is not None:
            response._content = text.encode("utf-8")
        else:
            response._content = b""
        return response

    return _make


@pytest.fixture
def sample_config_dict() -> dict:
    """Sample configuration file contents."""
    return {
        "version": "1",
        "log_level": "INFO",
        "workers": 2,
        "http_timeout_seconds": 30,
        "extensions_case_sensitive": True,
        "channel": {
            "title": "Test Show",
            "description": "A show for tests",
            "author": "Test Author",
        },
    }


@pytest.fixture
def channel_metadata() -> ChannelMetadata:
    """Channel metadata used across feed tests."""
    return ChannelMetadata(
        title="Test Show",
        link="https://example.com/feed.xml",
        description="A show for tests",
        author="Test Author",
        image_url="https://example.com/cover.jpg",
    )


@pytest.fixture
def remote_files() -> list[RemoteFile]:
    """Two audio files as the catalog would produce them."""
    return [
        RemoteFile(
            path="/podcasts/ep1.mp3",
            display_name="ep1.mp3",
            size_bytes=100,
            modified_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            content_kind=ContentKind.MP3,
        ),
        RemoteFile(
            path="/podcasts/ep2.m4a",
            display_name="ep2.m4a",
            size_bytes=200,
            modified_at=datetime(2024, 1, 2, tzinfo=timezone.utc),
            content_kind=ContentKind.M4A,
        ),
    ]


@pytest.fixture(autouse=True)
def reset_dircast_logger():
    """Drop handlers the CLI installs so tests do not leak logging setup."""
    yield
    logger = logging.getLogger("dircast")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
