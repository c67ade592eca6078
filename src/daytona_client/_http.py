# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""HTTP transport for the Daytona REST and toolbox APIs."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from daytona_client._defaults import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_TRANSFER_TIMEOUT_SECONDS,
)
from daytona_client.exceptions import (
    DaytonaAuthenticationError,
    DaytonaConnectionError,
    DaytonaError,
    DaytonaNotFoundError,
    DaytonaRateLimitError,
    DaytonaTimeoutError,
)

logger = logging.getLogger(__name__)

# Files are (filename, content, content_type) tuples as accepted by httpx
FileSpec = tuple[str, bytes, str]


def normalize_path(path: str) -> str:
    """Strip leading slashes so the path joins under the base URL."""
    return str(path).lstrip("/")


def ensure_trailing_slash(url: str) -> str:
    """Return url ending in exactly one slash."""
    return url.rstrip("/") + "/"


def _extract_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, list):
                value = "; ".join(str(item) for item in value)
            if value:
                return str(value)

    text = response.text
    if text:
        return text
    return f"HTTP {response.status_code} error"


def _translate_http_error(response: httpx.Response) -> DaytonaError:
    """Translate a non-2xx response to the appropriate Daytona exception."""
    message = _extract_error_message(response)
    status = response.status_code
    headers = dict(response.headers)

    if status in (401, 403):
        return DaytonaAuthenticationError(message, status_code=status, headers=headers)
    elif status == 404:
        return DaytonaNotFoundError(message, status_code=status, headers=headers)
    elif status == 429:
        return DaytonaRateLimitError(message, status_code=status, headers=headers)
    else:
        return DaytonaError(message, status_code=status, headers=headers)


def _decode_response(response: httpx.Response) -> Any:
    """Decode a successful response body.

    JSON is decoded when the content type says so or the body looks like a
    JSON object/array. Anything else is returned as text.
    """
    if not response.content:
        return None

    content_type = response.headers.get("content-type", "")
    text = response.text
    if "json" in content_type or text.startswith(("{", "[")):
        try:
            return response.json()
        except ValueError:
            logger.debug(
                "Response claimed JSON but failed to decode (content-type: %s): %.200s",
                content_type,
                text,
            )
    return text


class HttpClient:
    """Thin wrapper over httpx.Client with Daytona conventions.

    - base_url always ends with a single slash and request paths have their
      leading slashes stripped, so paths never replace the base path
    - every non-2xx response raises a DaytonaError subclass
    - transport failures raise DaytonaTimeoutError or DaytonaConnectionError

    A timeout of None disables the request timeout. Clients created with
    derive() share the connection pool of the client they came from, which
    alone closes it.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: Mapping[str, str] | None = None,
        verify: bool = True,
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = ensure_trailing_slash(base_url)
        self._headers = dict(headers or {})
        self._owns_client = client is None
        self._client = client or httpx.Client(
            headers=self._headers,
            verify=verify,
            transport=transport,
        )

    def __repr__(self) -> str:
        return f"<HttpClient base_url={self._base_url!r}>"

    @property
    def base_url(self) -> str:
        """Base URL, always ending with a slash."""
        return self._base_url

    @property
    def headers(self) -> dict[str, str]:
        """Default headers sent with every request."""
        return dict(self._headers)

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def derive(self, base_url: str) -> HttpClient:
        """Create a client for another base URL on the same connection pool."""
        return HttpClient(base_url, headers=self._headers, client=self._client)

    def close(self) -> None:
        """Close the underlying connection pool, unless it belongs to a parent client."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _send(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        files: Mapping[str, FileSpec] | None = None,
        timeout: float | None,
    ) -> httpx.Response:
        url = self._base_url + normalize_path(path)
        query = {key: value for key, value in (params or {}).items() if value is not None}
        logger.debug("%s %s", method, url)

        try:
            response = self._client.request(
                method,
                url,
                json=json,
                params=query or None,
                files=files,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            raise DaytonaTimeoutError(f"Request timed out: {e}") from e
        except httpx.TransportError as e:
            raise DaytonaConnectionError(f"Connection failed: {e}") from e

        logger.debug(
            "%s %s -> %d (content-type: %s)",
            method,
            url,
            response.status_code,
            response.headers.get("content-type", "unknown"),
        )

        if not response.is_success:
            raise _translate_http_error(response)
        return response

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> Any:
        """Send a request and return the decoded payload."""
        response = self._send(method, path, json=json, params=params, timeout=timeout)
        return _decode_response(response)

    def get(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> Any:
        return self.request("GET", path, params=params, timeout=timeout)

    def post(
        self,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> Any:
        return self.request("POST", path, json=json, params=params, timeout=timeout)

    def put(
        self,
        path: str,
        *,
        json: Any = None,
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> Any:
        return self.request("PUT", path, json=json, timeout=timeout)

    def patch(
        self,
        path: str,
        *,
        json: Any = None,
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> Any:
        return self.request("PATCH", path, json=json, timeout=timeout)

    def delete(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> Any:
        return self.request("DELETE", path, params=params, timeout=timeout)

    def upload(
        self,
        path: str,
        *,
        files: Mapping[str, FileSpec],
        params: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_TRANSFER_TIMEOUT_SECONDS,
    ) -> Any:
        """POST multipart form data and return the decoded payload."""
        response = self._send("POST", path, params=params, files=files, timeout=timeout)
        return _decode_response(response)

    def download(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_TRANSFER_TIMEOUT_SECONDS,
    ) -> bytes:
        """GET a binary body without decoding it."""
        response = self._send("GET", path, params=params, timeout=timeout)
        return response.content
