# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Shared volumes that can be mounted into sandboxes."""

from __future__ import annotations

import logging

from daytona_client._http import HttpClient
from daytona_client._types import Volume
from daytona_client.exceptions import DaytonaValidationError

logger = logging.getLogger(__name__)


class VolumeService:
    """Manage volumes for the organization.

    Example:
        ```python
        volume = daytona.volume.get_or_create("datasets")
        params = CreateSandboxFromSnapshotParams(
            volumes=[VolumeMount(volume_id=volume.id, mount_path="/data")],
        )
        ```
    """

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def list(self) -> list[Volume]:
        response = self._http.get("volumes")
        items = response.get("items", []) if isinstance(response, dict) else response or []
        return [Volume.from_dict(item) for item in items]

    def get(self, volume_id: str) -> Volume:
        """Fetch a volume by ID.

        Raises:
            DaytonaNotFoundError: If the volume does not exist
        """
        if not volume_id:
            raise DaytonaValidationError("Volume ID is required")
        return Volume.from_dict(self._http.get(f"volumes/{volume_id}"))

    def create(self, name: str) -> Volume:
        if not name:
            raise DaytonaValidationError("Volume name is required")
        volume = Volume.from_dict(self._http.post("volumes", json={"name": name}))
        logger.info("Created volume %s (%s)", volume.name, volume.id)
        return volume

    def delete(self, volume: Volume | str) -> None:
        volume_id = volume.id if isinstance(volume, Volume) else volume
        self._http.delete(f"volumes/{volume_id}")
        logger.debug("Deleted volume %s", volume_id)

    def get_or_create(self, name: str) -> Volume:
        """Return the volume with this name, creating it if absent."""
        for volume in self.list():
            if volume.name == name:
                return volume
        return self.create(name)
