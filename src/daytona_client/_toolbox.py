# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Per-sandbox toolbox endpoint and the generic request proxy built on it."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from daytona_client._defaults import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_TRANSFER_TIMEOUT_SECONDS,
)
from daytona_client._http import FileSpec, HttpClient, ensure_trailing_slash

logger = logging.getLogger(__name__)


def toolbox_base_url(api_base_url: str, sandbox_id: str) -> str:
    """Toolbox URL for a sandbox: {api_base}/toolbox/{sandbox_id}/toolbox.

    Derived from the API URL alone; no request is needed.
    """
    return f"{ensure_trailing_slash(api_base_url)}toolbox/{sandbox_id}/toolbox"


class ToolboxClient:
    """Sends file, process and interpreter requests to one sandbox's toolbox.

    The toolbox client is derived on first use from resolve_url and shares
    the API client's connection pool, so closing Daytona releases it too.
    """

    def __init__(self, http: HttpClient, resolve_url: Callable[[], str]) -> None:
        self._http = http
        self._resolve_url = resolve_url
        self._client: HttpClient | None = None

    def _ensure_client(self) -> HttpClient:
        if self._client is None:
            self._client = self._http.derive(self._resolve_url())
            logger.debug("Initialized toolbox client for %s", self._client.base_url)
        return self._client

    @property
    def base_url(self) -> str:
        return self._ensure_client().base_url

    def execute(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> Any:
        """Send a request to the toolbox and return the decoded payload.

        Raises:
            DaytonaError: Classified by status, as for any API request
        """
        return self._ensure_client().request(
            method, path, json=body, params=params, timeout=timeout
        )

    def upload(
        self,
        path: str,
        *,
        files: Mapping[str, FileSpec],
        params: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_TRANSFER_TIMEOUT_SECONDS,
    ) -> Any:
        return self._ensure_client().upload(path, files=files, params=params, timeout=timeout)

    def download(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_TRANSFER_TIMEOUT_SECONDS,
    ) -> bytes:
        return self._ensure_client().download(path, params=params, timeout=timeout)
