# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Snapshots: immutable images that sandboxes are created from."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from daytona_client._defaults import DEFAULT_BUILD_POLL_INTERVAL_SECONDS
from daytona_client._http import HttpClient
from daytona_client._types import DockerfileBuild, PaginatedResult, SnapshotInfo
from daytona_client.exceptions import DaytonaValidationError

logger = logging.getLogger(__name__)

_SNAPSHOT_SETTLED_STATES = frozenset({"active", "ready", "error", "build_failed", "failed"})


class SnapshotService:
    """Manage snapshots for the organization."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def list(
        self, *, page: int | None = None, limit: int | None = None
    ) -> PaginatedResult[SnapshotInfo]:
        if page is not None and page < 1:
            raise DaytonaValidationError("page must be a positive integer")
        if limit is not None and limit < 1:
            raise DaytonaValidationError("limit must be a positive integer")

        response = self._http.get("snapshots", params={"page": page, "limit": limit})
        return PaginatedResult.from_response(response, SnapshotInfo.from_dict)

    def get(self, id_or_name: str) -> SnapshotInfo:
        """Fetch a snapshot by ID or name.

        Raises:
            DaytonaNotFoundError: If the snapshot does not exist
        """
        if not id_or_name:
            raise DaytonaValidationError("Snapshot ID or name is required")
        return SnapshotInfo.from_dict(self._http.get(f"snapshots/{id_or_name}"))

    def create(
        self,
        image: str | DockerfileBuild,
        *,
        name: str | None = None,
        entrypoint: list[str] | None = None,
        on_logs: Callable[[str], None] | None = None,
        timeout: float = 0,
    ) -> SnapshotInfo:
        """Register a snapshot built from an image reference or a Dockerfile.

        When on_logs is given and the service starts a build, the snapshot is
        polled until the build settles. Polling stops quietly once timeout
        seconds have passed; 0 means no limit.

        Args:
            image: Image reference such as "python:3.12-slim", or a DockerfileBuild
            name: Snapshot name
            entrypoint: Container entrypoint
            on_logs: Called with a progress line on every poll
            timeout: Build polling budget in seconds
        """
        if timeout < 0:
            raise DaytonaValidationError("Timeout must be a non-negative number")

        body: dict[str, Any] = {}
        if name:
            body["name"] = name
        if entrypoint:
            body["entrypoint"] = entrypoint
        if isinstance(image, DockerfileBuild):
            body["buildInfo"] = image.to_build_info()
        else:
            body["buildInfo"] = {"dockerfileContent": f"FROM {image}\n"}

        snapshot = SnapshotInfo.from_dict(self._http.post("snapshots", json=body))
        logger.debug("Snapshot %s created in state %s", snapshot.id, snapshot.state)

        if on_logs is not None and snapshot.state == "building":
            self._poll_build(snapshot.id, on_logs, timeout)
            snapshot = self.get(snapshot.id)

        return snapshot

    def delete(self, snapshot: SnapshotInfo | str) -> None:
        snapshot_id = snapshot.id if isinstance(snapshot, SnapshotInfo) else snapshot
        self._http.delete(f"snapshots/{snapshot_id}")
        logger.debug("Deleted snapshot %s", snapshot_id)

    def _poll_build(
        self, snapshot_id: str, on_logs: Callable[[str], None], timeout: float
    ) -> None:
        start_time = time.monotonic()
        while True:
            if timeout and time.monotonic() - start_time >= timeout:
                logger.debug("Stopped polling snapshot %s build after %ss", snapshot_id, timeout)
                return

            state = self.get(snapshot_id).state
            on_logs(f"Snapshot {snapshot_id} build state: {state}")
            if state in _SNAPSHOT_SETTLED_STATES:
                return

            time.sleep(DEFAULT_BUILD_POLL_INTERVAL_SECONDS)
