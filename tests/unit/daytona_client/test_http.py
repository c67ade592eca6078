# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Tests for the HTTP transport: URL joining, decoding and error translation."""

from __future__ import annotations

import httpx
import pytest

from daytona_client._http import HttpClient, ensure_trailing_slash, normalize_path
from daytona_client.exceptions import (
    DaytonaAuthenticationError,
    DaytonaConnectionError,
    DaytonaError,
    DaytonaNotFoundError,
    DaytonaRateLimitError,
    DaytonaTimeoutError,
)


def _client(transport: httpx.MockTransport) -> HttpClient:
    return HttpClient("https://api.test/api", transport=transport)


def _reply(response: httpx.Response) -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: response)


class TestPathJoining:
    """Base URL and path normalization."""

    def test_base_url_gets_single_trailing_slash(self) -> None:
        assert HttpClient("https://api.test/api").base_url == "https://api.test/api/"
        assert HttpClient("https://api.test/api///").base_url == "https://api.test/api/"

    def test_normalize_path_strips_all_leading_slashes(self) -> None:
        assert normalize_path("///sandbox/sb-1") == "sandbox/sb-1"
        assert normalize_path("sandbox") == "sandbox"

    def test_ensure_trailing_slash(self) -> None:
        assert ensure_trailing_slash("https://x/a") == "https://x/a/"

    def test_leading_slash_does_not_replace_base_path(self) -> None:
        """A path starting with / still lands under the base path."""
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json={})

        _client(httpx.MockTransport(handler)).get("//sandbox/sb-1")
        assert seen == ["/api/sandbox/sb-1"]

    def test_none_params_are_dropped(self) -> None:
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json=[])

        _client(httpx.MockTransport(handler)).get("sandbox", params={"page": 2, "limit": None})
        assert seen[0].params.get("page") == "2"
        assert "limit" not in seen[0].params

    def test_derive_shares_headers(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = HttpClient(
            "https://api.test/api",
            headers={"Authorization": "Bearer k"},
            transport=httpx.MockTransport(handler),
        )
        derived = client.derive("https://api.test/api/toolbox/sb-1/toolbox")
        derived.get("info/work-dir")

        assert derived.base_url == "https://api.test/api/toolbox/sb-1/toolbox/"
        assert seen[0].headers["Authorization"] == "Bearer k"
        assert seen[0].url.path == "/api/toolbox/sb-1/toolbox/info/work-dir"

    def test_derived_client_shares_the_pool(self) -> None:
        client = HttpClient("https://api.test/api", transport=_reply(httpx.Response(200)))
        derived = client.derive("https://api.test/api/toolbox/sb-1/toolbox")

        derived.close()
        assert not client.is_closed

        client.close()
        assert derived.is_closed


class TestDecoding:
    """Successful response decoding."""

    def test_json_content_type_is_decoded(self) -> None:
        client = _client(_reply(httpx.Response(200, json={"id": "sb-1"})))
        assert client.get("sandbox/sb-1") == {"id": "sb-1"}

    def test_json_looking_text_is_decoded(self) -> None:
        response = httpx.Response(200, text='[{"id": "a"}]', headers={"content-type": "text/plain"})
        assert _client(_reply(response)).get("sandbox") == [{"id": "a"}]

    def test_plain_text_is_returned_as_is(self) -> None:
        response = httpx.Response(200, text="hello", headers={"content-type": "text/plain"})
        assert _client(_reply(response)).get("logs") == "hello"

    def test_invalid_json_falls_back_to_text(self) -> None:
        response = httpx.Response(200, text="{not json", headers={"content-type": "text/plain"})
        assert _client(_reply(response)).get("logs") == "{not json"

    def test_empty_body_is_none(self) -> None:
        assert _client(_reply(httpx.Response(204))).post("sandbox/sb-1/start") is None

    def test_download_returns_raw_bytes(self) -> None:
        response = httpx.Response(200, content=b'{"looks": "json"}')
        assert _client(_reply(response)).download("filesystem/download") == b'{"looks": "json"}'

    def test_upload_sends_multipart(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        _client(httpx.MockTransport(handler)).upload(
            "filesystem/upload",
            files={"file": ("a.txt", b"abc", "application/octet-stream")},
            params={"path": "/tmp/a.txt"},
        )
        assert seen[0].headers["content-type"].startswith("multipart/form-data")
        assert b"abc" in seen[0].read()
        assert seen[0].url.params["path"] == "/tmp/a.txt"


class TestErrorTranslation:
    """Non-2xx statuses and transport failures map to the error taxonomy."""

    @pytest.mark.parametrize(
        ("status", "exc_type"),
        [
            (401, DaytonaAuthenticationError),
            (403, DaytonaAuthenticationError),
            (404, DaytonaNotFoundError),
            (429, DaytonaRateLimitError),
        ],
    )
    def test_status_classes(self, status: int, exc_type: type[DaytonaError]) -> None:
        client = _client(_reply(httpx.Response(status, json={"message": "nope"})))
        with pytest.raises(exc_type, match="nope") as exc_info:
            client.get("sandbox/sb-1")
        assert exc_info.value.status_code == status

    def test_other_status_is_generic_error_with_headers(self) -> None:
        response = httpx.Response(500, json={"message": "boom"}, headers={"x-request-id": "r1"})
        with pytest.raises(DaytonaError) as exc_info:
            _client(_reply(response)).get("sandbox")

        assert type(exc_info.value) is DaytonaError
        assert exc_info.value.status_code == 500
        assert exc_info.value.headers["x-request-id"] == "r1"
        assert str(exc_info.value) == "boom"

    def test_error_field_list_is_joined(self) -> None:
        response = httpx.Response(400, json={"error": ["name is required", "bad limit"]})
        with pytest.raises(DaytonaError, match="name is required; bad limit"):
            _client(_reply(response)).post("sandbox", json={})

    def test_empty_error_body_uses_status_message(self) -> None:
        with pytest.raises(DaytonaError, match="HTTP 502 error"):
            _client(_reply(httpx.Response(502))).get("sandbox")

    def test_text_error_body_is_message(self) -> None:
        response = httpx.Response(503, text="upstream down")
        with pytest.raises(DaytonaError, match="upstream down"):
            _client(_reply(response)).get("sandbox")

    def test_rate_limit_exposes_retry_after(self) -> None:
        response = httpx.Response(429, json={"message": "slow down"}, headers={"Retry-After": "7"})
        with pytest.raises(DaytonaRateLimitError) as exc_info:
            _client(_reply(response)).get("sandbox")
        assert exc_info.value.retry_after == 7.0

    def test_transport_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(DaytonaTimeoutError, match="timed out"):
            _client(httpx.MockTransport(handler)).get("sandbox")

    def test_connection_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(DaytonaConnectionError, match="refused"):
            _client(httpx.MockTransport(handler)).get("sandbox")
