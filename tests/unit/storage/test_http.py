"""Tests for the JSON request helper."""

from unittest.mock import MagicMock

import pytest
import requests

from dircast.storage.http import HttpError, request_json


class TestRequestJson:
    """Tests for request_json."""

    def test_returns_decoded_body(self, make_response) -> None:
        """Test a 200 body is decoded."""
        session = MagicMock(spec=requests.Session)
        session.request.return_value = make_response(200, {"ok": True})

        assert request_json(session, "POST", "https://api.test/x", json={"a": 1}) == {"ok": True}
        session.request.assert_called_once_with(
            method="POST", url="https://api.test/x", timeout=60.0, json={"a": 1}
        )

    def test_empty_body(self, make_response) -> None:
        """Test an empty successful body becomes {}."""
        session = MagicMock(spec=requests.Session)
        session.request.return_value = make_response(200)

        assert request_json(session, "POST", "https://api.test/x") == {}

    def test_unexpected_status_raises_once(self, make_response) -> None:
        """Test errors raise HttpError without retrying."""
        session = MagicMock(spec=requests.Session)
        session.request.return_value = make_response(
            503, {"error_summary": "internal_error/..."}
        )

        with pytest.raises(HttpError) as exc_info:
            request_json(session, "POST", "https://api.test/x")

        assert exc_info.value.status_code == 503
        assert session.request.call_count == 1

    def test_expected_status_override(self, make_response) -> None:
        """Test a custom set of accepted statuses."""
        session = MagicMock(spec=requests.Session)
        session.request.return_value = make_response(202, {"queued": True})

        assert request_json(session, "POST", "https://api.test/x", expected_status={202}) == {
            "queued": True
        }


class TestHttpError:
    """Tests for HttpError."""

    def test_error_summary_from_json(self, make_response) -> None:
        """Test Dropbox error_summary is exposed."""
        error = HttpError(
            make_response(409, {"error_summary": "path/not_found/..", "error": {".tag": "path"}})
        )

        assert error.error_summary == "path/not_found/.."
        assert error.payload["error"] == {".tag": "path"}
        assert "409" in str(error)

    def test_text_payload(self, make_response) -> None:
        """Test non-JSON bodies are kept as text."""
        error = HttpError(make_response(400, text="Error in call to API function"))

        assert error.payload == "Error in call to API function"
        assert error.error_summary == ""
