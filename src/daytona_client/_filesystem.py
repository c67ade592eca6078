# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""File system operations inside a sandbox."""

from __future__ import annotations

import logging
import os
import posixpath
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from daytona_client._defaults import DEFAULT_TRANSFER_TIMEOUT_SECONDS
from daytona_client._toolbox import ToolboxClient
from daytona_client._types import FileInfo

logger = logging.getLogger(__name__)


class FileSystem:
    """File system interface for a sandbox, reached through its toolbox.

    Example:
        ```python
        sandbox.fs.create_folder("/home/daytona/data")
        sandbox.fs.upload_file(b"hello", "/home/daytona/data/hello.txt")
        print(sandbox.fs.download_file("/home/daytona/data/hello.txt"))
        ```
    """

    def __init__(self, toolbox: ToolboxClient) -> None:
        self._toolbox = toolbox

    def create_folder(self, path: str, mode: str = "0755") -> None:
        self._toolbox.execute("POST", "filesystem/folder", body={"path": path, "mode": mode})

    def delete_file(self, path: str, *, recursive: bool = False) -> None:
        params: dict[str, Any] = {"path": path}
        if recursive:
            params["recursive"] = "true"
        self._toolbox.execute("DELETE", "filesystem", params=params)

    def download_file(
        self,
        remote_path: str,
        local_path: str | os.PathLike[str] | None = None,
        *,
        timeout: float | None = DEFAULT_TRANSFER_TIMEOUT_SECONDS,
    ) -> bytes | None:
        """Download a file.

        Returns:
            The file contents, or None when written to local_path
        """
        content = self._toolbox.download(
            "filesystem/download", params={"path": remote_path}, timeout=timeout
        )
        if local_path is None:
            return content

        Path(local_path).write_bytes(content)
        logger.debug("Downloaded %s to %s (%d bytes)", remote_path, local_path, len(content))
        return None

    def download_files(
        self,
        files: Iterable[Mapping[str, str]],
        *,
        timeout: float | None = DEFAULT_TRANSFER_TIMEOUT_SECONDS,
    ) -> None:
        """Download several files; each item has remote_path and local_path keys."""
        for item in files:
            self.download_file(item["remote_path"], item["local_path"], timeout=timeout)

    def find_files(self, path: str, pattern: str) -> list[dict[str, Any]]:
        """Search file contents under path for pattern."""
        response = self._toolbox.execute(
            "GET", "filesystem/find", params={"path": path, "pattern": pattern}
        )
        return _field(response, "matches")

    def get_file_info(self, path: str) -> FileInfo:
        response = self._toolbox.execute("GET", "filesystem/info", params={"path": path})
        return FileInfo.from_dict(response)

    def list_files(self, path: str) -> list[FileInfo]:
        response = self._toolbox.execute("GET", "filesystem", params={"path": path})
        entries = response if isinstance(response, list) else _field(response, "entries")
        return [FileInfo.from_dict(entry) for entry in entries]

    def move_files(self, source: str, destination: str) -> None:
        self._toolbox.execute(
            "POST", "filesystem/move", body={"source": source, "destination": destination}
        )

    def replace_in_files(
        self, files: list[str], pattern: str, new_value: str
    ) -> list[dict[str, Any]]:
        response = self._toolbox.execute(
            "POST",
            "filesystem/replace",
            body={"files": files, "pattern": pattern, "newValue": new_value},
        )
        return response if isinstance(response, list) else []

    def search_files(self, path: str, pattern: str) -> list[str]:
        """Find files whose names match a glob pattern."""
        response = self._toolbox.execute(
            "GET", "filesystem/search", params={"path": path, "pattern": pattern}
        )
        return _field(response, "files")

    def set_file_permissions(
        self,
        path: str,
        *,
        mode: str | None = None,
        owner: str | None = None,
        group: str | None = None,
    ) -> None:
        body: dict[str, Any] = {"path": path}
        if mode:
            body["mode"] = mode
        if owner:
            body["owner"] = owner
        if group:
            body["group"] = group
        self._toolbox.execute("POST", "filesystem/permissions", body=body)

    def upload_file(
        self,
        source: bytes | str | os.PathLike[str],
        destination: str,
        *,
        timeout: float | None = DEFAULT_TRANSFER_TIMEOUT_SECONDS,
    ) -> None:
        """Upload bytes or a local file to destination in the sandbox.

        A str source is treated as a local path when such a file exists,
        otherwise as text content.
        """
        if isinstance(source, bytes):
            content = source
        elif os.path.isfile(source):
            content = Path(source).read_bytes()
        else:
            content = str(source).encode("utf-8")

        filename = posixpath.basename(destination) or "file"
        self._toolbox.upload(
            "filesystem/upload",
            files={"file": (filename, content, "application/octet-stream")},
            params={"path": destination},
            timeout=timeout,
        )
        logger.debug("Uploaded %d bytes to %s", len(content), destination)

    def upload_files(
        self,
        files: Iterable[Mapping[str, Any]],
        *,
        timeout: float | None = DEFAULT_TRANSFER_TIMEOUT_SECONDS,
    ) -> None:
        """Upload several files; each item has source and destination keys."""
        for item in files:
            self.upload_file(item["source"], item["destination"], timeout=timeout)

    def read_file_as_text(self, path: str, encoding: str = "utf-8") -> str:
        content = self._toolbox.download("filesystem/download", params={"path": path})
        return content.decode(encoding, errors="replace")

    def write_file(
        self,
        path: str,
        content: str | bytes,
        *,
        timeout: float | None = DEFAULT_TRANSFER_TIMEOUT_SECONDS,
    ) -> None:
        data = content.encode("utf-8") if isinstance(content, str) else content
        self.upload_file(data, path, timeout=timeout)


def _field(response: Any, key: str) -> list[Any]:
    if isinstance(response, Mapping):
        return list(response.get(key) or [])
    return []
