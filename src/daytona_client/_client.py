# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Daytona client: sandbox creation, lookup and account-level resources."""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any, cast

import httpx

from daytona_client._auth import client_headers, resolve_auth
from daytona_client._config import DaytonaConfig, get_default_config
from daytona_client._defaults import (
    DEFAULT_BUILD_POLL_INTERVAL_SECONDS,
    DEFAULT_LANGUAGE,
    DEFAULT_TIMEOUT_SECONDS,
)
from daytona_client._http import HttpClient
from daytona_client._sandbox import (
    Sandbox,
    remaining_timeout,
    request_timeout,
    validate_timeout,
)
from daytona_client._snapshots import SnapshotService
from daytona_client._types import (
    BUILD_RESOLVED_STATES,
    BUILD_STATES,
    CodeLanguage,
    CreateSandboxFromImageParams,
    CreateSandboxFromSnapshotParams,
    CreateSandboxParams,
    DockerfileBuild,
    PaginatedResult,
    SandboxInfo,
    SandboxState,
    _compact,
)
from daytona_client._volumes import VolumeService
from daytona_client.exceptions import (
    DaytonaInvalidResponseError,
    DaytonaNotFoundError,
    DaytonaValidationError,
)

logger = logging.getLogger(__name__)

LANGUAGE_LABEL = "code-toolbox-language"


class Daytona:
    """Entry point for managing sandboxes.

    Configuration is taken from, in order: the config argument, the default
    installed with daytona_client.configure(), and the environment. Keyword
    arguments that are not None override individual fields.

    Example:
        ```python
        with Daytona(api_key="dtn_...") as daytona:
            sandbox = daytona.create(timeout=120)
            print(sandbox.process.exec("uname -a").result)
            sandbox.delete()
        ```

    Raises:
        DaytonaConfigurationError: If no usable credential is configured
    """

    def __init__(
        self,
        config: DaytonaConfig | None = None,
        *,
        api_key: str | None = None,
        jwt_token: str | None = None,
        organization_id: str | None = None,
        api_url: str | None = None,
        target: str | None = None,
        _transport: httpx.BaseTransport | None = None,
    ) -> None:
        overrides = {
            key: value
            for key, value in {
                "api_key": api_key,
                "jwt_token": jwt_token,
                "organization_id": organization_id,
                "api_url": api_url,
                "target": target,
            }.items()
            if value is not None
        }

        base = config or get_default_config()
        if base is None:
            resolved = DaytonaConfig.from_env(**overrides)
        else:
            resolved = base.with_overrides(**overrides) if overrides else base
        self._config = resolved.validate()

        auth = resolve_auth(self._config)
        self._http = HttpClient(
            self._config.api_url,
            headers={**client_headers(), **auth.headers},
            verify=self._config.verify_ssl,
            transport=_transport,
        )

        self._proxy_toolbox_url: str | None = None
        self._proxy_toolbox_url_lock = threading.Lock()

        self._volume = VolumeService(self._http)
        self._snapshot = SnapshotService(self._http)

    def __repr__(self) -> str:
        return f"<Daytona api_url={self._config.api_url!r}>"

    @property
    def config(self) -> DaytonaConfig:
        return self._config

    @property
    def volume(self) -> VolumeService:
        return self._volume

    @property
    def snapshot(self) -> SnapshotService:
        return self._snapshot

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Daytona:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # Sandboxes

    def create(
        self,
        params: CreateSandboxParams | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        on_snapshot_create_logs: Callable[[str], None] | None = None,
    ) -> Sandbox:
        """Create a sandbox and wait until it is started.

        A single timeout bounds the creation request, the optional build
        phase and the wait for the started state.

        Args:
            params: Snapshot or image parameters; the default snapshot in python
                when None
            timeout: Seconds to wait in total; 0 waits indefinitely
            on_snapshot_create_logs: Called with a progress line while the
                image is being built

        Raises:
            DaytonaValidationError: If timeout or an interval is negative
            SandboxFailedError: If the sandbox lands in error or build_failed
            SandboxTimeoutError: If it is not started within timeout seconds
        """
        validate_timeout(timeout)
        if params is None:
            params = CreateSandboxFromSnapshotParams(language=DEFAULT_LANGUAGE)
        if params.language is None:
            params = replace(params, language=DEFAULT_LANGUAGE)
        params.validate()

        body = self._build_create_body(params)

        start_time = time.monotonic()
        response = self._http.post("sandbox", json=body, timeout=request_timeout(timeout))
        info = SandboxInfo.from_api(response)
        logger.debug("Sandbox %s created in state %s", info.id, info.raw_state)

        if info.state in BUILD_STATES and on_snapshot_create_logs is not None:
            self._wait_for_build(info.id, on_snapshot_create_logs, timeout, start_time)
            info = SandboxInfo.from_api(self._http.get(f"sandbox/{info.id}"))

        sandbox = self._sandbox(info)
        if sandbox.state != SandboxState.STARTED:
            sandbox.wait_for_start(remaining_timeout(timeout, start_time))
        return sandbox

    def _build_create_body(self, params: CreateSandboxParams) -> dict[str, Any]:
        labels = dict(params.labels or {})
        labels.setdefault(LANGUAGE_LABEL, CodeLanguage.normalize(params.language).value)

        body = _compact(
            {
                "name": params.name,
                "user": params.os_user,
                "env": params.env_vars or {},
                "labels": labels,
                "public": params.public,
                "target": self._config.target,
                "autoStopInterval": params.auto_stop_interval,
                "autoArchiveInterval": params.auto_archive_interval,
                "autoDeleteInterval": params.auto_delete_interval,
                "volumes": [v.to_dict() for v in params.volumes] if params.volumes else None,
                "networkBlockAll": params.network_block_all,
                "networkAllowList": params.network_allow_list,
            }
        )

        match params.kind:
            case "snapshot":
                snapshot = cast(CreateSandboxFromSnapshotParams, params).snapshot
                if snapshot:
                    body["snapshot"] = snapshot
            case "image":
                image_params = cast(CreateSandboxFromImageParams, params)
                if isinstance(image_params.image, DockerfileBuild):
                    body["buildInfo"] = image_params.image.to_build_info()
                else:
                    body["buildInfo"] = {"dockerfileContent": f"FROM {image_params.image}\n"}
                if image_params.resources is not None:
                    body.update(image_params.resources.to_dict())
            case other:
                raise DaytonaValidationError(f"Unknown create params kind: {other!r}")

        return body

    def _wait_for_build(
        self,
        sandbox_id: str,
        on_logs: Callable[[str], None],
        timeout: float,
        start_time: float,
    ) -> None:
        # Stops quietly on deadline; wait_for_start reports the failure.
        while True:
            if timeout and time.monotonic() - start_time >= timeout:
                logger.debug("Build polling for sandbox %s reached the deadline", sandbox_id)
                return

            info = SandboxInfo.from_api(self._http.get(f"sandbox/{sandbox_id}"))
            on_logs(f"Sandbox {sandbox_id} build state: {info.raw_state}")
            if info.state in BUILD_RESOLVED_STATES:
                return

            time.sleep(DEFAULT_BUILD_POLL_INTERVAL_SECONDS)

    def get(self, sandbox_id_or_name: str) -> Sandbox:
        """Fetch a sandbox by ID or name.

        Raises:
            DaytonaNotFoundError: If the sandbox does not exist
            DaytonaInvalidResponseError: If the payload is not an object
        """
        if not sandbox_id_or_name:
            raise DaytonaValidationError("sandbox_id_or_name is required")
        response = self._http.get(f"sandbox/{sandbox_id_or_name}")
        return self._sandbox(SandboxInfo.from_api(response))

    def list(
        self,
        labels: Mapping[str, str] | None = None,
        *,
        page: int | None = None,
        limit: int | None = None,
    ) -> PaginatedResult[Sandbox]:
        """List sandboxes, optionally filtered by labels."""
        if page is not None and page < 1:
            raise DaytonaValidationError("page must be a positive integer")
        if limit is not None and limit < 1:
            raise DaytonaValidationError("limit must be a positive integer")

        params = {
            "labels": json.dumps(dict(labels)) if labels else None,
            "page": page,
            "limit": limit,
        }
        response = self._http.get("sandbox", params=params)
        return PaginatedResult.from_response(
            response, lambda item: self._sandbox(SandboxInfo.from_api(item))
        )

    def find_one(
        self,
        sandbox_id_or_name: str | None = None,
        *,
        labels: Mapping[str, str] | None = None,
    ) -> Sandbox:
        """Get a sandbox by ID or name, or the first one matching labels.

        Raises:
            DaytonaNotFoundError: If nothing matches
        """
        if sandbox_id_or_name:
            return self.get(sandbox_id_or_name)

        result = self.list(labels, page=1, limit=1)
        if not result.items:
            raise DaytonaNotFoundError(f"No sandbox found with labels {dict(labels or {})}")
        return result.items[0]

    def start(self, sandbox: Sandbox, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        sandbox.start(timeout)

    def stop(self, sandbox: Sandbox, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        sandbox.stop(timeout)

    def delete(self, sandbox: Sandbox, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        sandbox.delete(timeout)

    # Endpoint resolution

    def get_proxy_toolbox_url(self) -> str:
        """Account-wide toolbox proxy URL, fetched once per client.

        Concurrent first callers share a single request.

        Raises:
            DaytonaError: If the configuration request fails
            DaytonaInvalidResponseError: If the response carries no proxy URL
        """
        if self._proxy_toolbox_url is not None:
            return self._proxy_toolbox_url

        with self._proxy_toolbox_url_lock:
            if self._proxy_toolbox_url is not None:
                return self._proxy_toolbox_url

            response = self._http.get("config")
            url = None
            if isinstance(response, Mapping):
                url = response.get("proxyToolboxUrl") or response.get("proxy_toolbox_url")
            if not url:
                raise DaytonaInvalidResponseError(
                    "Configuration response has no proxy toolbox URL"
                )

            self._proxy_toolbox_url = str(url)
            logger.debug("Resolved proxy toolbox URL %s", self._proxy_toolbox_url)
            return self._proxy_toolbox_url

    def _sandbox(self, info: SandboxInfo) -> Sandbox:
        return Sandbox(info, self._http, self.get_proxy_toolbox_url)
