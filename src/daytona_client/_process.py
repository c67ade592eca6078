# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Command execution inside a sandbox."""

from __future__ import annotations

import logging
from typing import Any

from daytona_client._defaults import DEFAULT_REQUEST_TIMEOUT_SECONDS
from daytona_client._toolbox import ToolboxClient
from daytona_client._types import CodeLanguage, ExecuteResponse, SessionExecuteResponse

logger = logging.getLogger(__name__)


class Process:
    """Process execution interface for a sandbox.

    Example:
        ```python
        response = sandbox.process.exec("echo hello", cwd="/tmp")
        print(response.exit_code, response.result)
        ```
    """

    def __init__(self, toolbox: ToolboxClient) -> None:
        self._toolbox = toolbox

    def exec(
        self,
        command: str,
        *,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: int | None = None,
    ) -> ExecuteResponse:
        """Run a shell command and wait for it to finish.

        Args:
            command: Shell command line
            cwd: Working directory inside the sandbox
            env: Extra environment variables
            timeout: Command timeout in seconds, also used as request timeout
        """
        if not command:
            raise ValueError("Command cannot be empty")

        body: dict[str, Any] = {"command": command}
        if cwd:
            body["cwd"] = cwd
        if env:
            body["env"] = env
        if timeout:
            body["timeout"] = timeout

        logger.debug("Executing command: %s", command)
        response = self._toolbox.execute(
            "POST",
            "process/exec",
            body=body,
            timeout=timeout or DEFAULT_REQUEST_TIMEOUT_SECONDS,
        )
        return ExecuteResponse.from_dict(response)

    def code_run(
        self,
        code: str,
        *,
        language: str = CodeLanguage.PYTHON,
        params: dict[str, Any] | None = None,
        timeout: int | None = None,
    ) -> ExecuteResponse:
        """Run a code snippet with the language's interpreter."""
        body: dict[str, Any] = {"code": code, "language": CodeLanguage.normalize(language).value}
        if params:
            body["params"] = params

        response = self._toolbox.execute(
            "POST",
            "process/code-run",
            body=body,
            timeout=timeout or DEFAULT_REQUEST_TIMEOUT_SECONDS,
        )
        return ExecuteResponse.from_dict(response)

    def create_session(self, session_id: str) -> None:
        """Create a background shell session."""
        self._toolbox.execute("POST", "sessions", body={"sessionId": session_id})

    def get_session(self, session_id: str) -> dict[str, Any]:
        return self._toolbox.execute("GET", f"sessions/{session_id}")

    def execute_session_command(
        self,
        session_id: str,
        command: str,
        *,
        run_async: bool | None = None,
        cwd: str | None = None,
        timeout: int | None = None,
    ) -> SessionExecuteResponse:
        """Run a command inside a session.

        With run_async=True the call returns immediately with the command ID;
        fetch output later with get_session_command_logs().
        """
        body: dict[str, Any] = {"command": command}
        if run_async is not None:
            body["runAsync"] = run_async
        if cwd:
            body["cwd"] = cwd

        response = self._toolbox.execute(
            "POST",
            f"sessions/{session_id}/exec",
            body=body,
            timeout=timeout or DEFAULT_REQUEST_TIMEOUT_SECONDS,
        )
        return SessionExecuteResponse.from_dict(response or {})

    def get_session_command(self, session_id: str, command_id: str) -> dict[str, Any]:
        return self._toolbox.execute("GET", f"sessions/{session_id}/commands/{command_id}")

    def get_session_command_logs(self, session_id: str, command_id: str) -> str:
        response = self._toolbox.execute(
            "GET", f"sessions/{session_id}/commands/{command_id}/logs"
        )
        return "" if response is None else str(response)

    def list_sessions(self) -> list[dict[str, Any]]:
        response = self._toolbox.execute("GET", "sessions")
        if isinstance(response, list):
            return response
        return list((response or {}).get("sessions") or [])

    def delete_session(self, session_id: str) -> None:
        self._toolbox.execute("DELETE", f"sessions/{session_id}")
