# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Stateful code interpreter inside a sandbox."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from daytona_client._defaults import DEFAULT_INTERPRETER_TIMEOUT_SECONDS
from daytona_client._toolbox import ToolboxClient


class CodeInterpreter:
    """Runs Python code in persistent interpreter contexts.

    Variables defined in one run_code() call are visible to later calls that
    use the same context.
    """

    def __init__(self, toolbox: ToolboxClient) -> None:
        self._toolbox = toolbox

    def run_code(
        self,
        code: str,
        *,
        context: str | None = None,
        envs: dict[str, str] | None = None,
        timeout: int | None = None,
        on_stdout: Callable[[str], None] | None = None,
    ) -> dict[str, Any]:
        """Execute code and return the raw result.

        Args:
            code: Source to execute
            context: Context ID from create_context(); the default context if None
            envs: Environment variables for this run
            timeout: Execution timeout in seconds
            on_stdout: Called once per line of output
        """
        body: dict[str, Any] = {"code": code}
        if context:
            body["contextId"] = context
        if envs:
            body["envs"] = envs
        if timeout:
            body["timeout"] = timeout

        response = self._toolbox.execute(
            "POST",
            "interpreter/execute",
            body=body,
            timeout=timeout or DEFAULT_INTERPRETER_TIMEOUT_SECONDS,
        )

        if on_stdout is not None and isinstance(response, dict) and response.get("output"):
            for line in str(response["output"]).split("\n"):
                on_stdout(line)

        return response if isinstance(response, dict) else {"output": response}

    def create_context(self, *, cwd: str | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if cwd:
            body["cwd"] = cwd
        return self._toolbox.execute("POST", "interpreter/contexts", body=body)

    def list_contexts(self) -> list[dict[str, Any]]:
        response = self._toolbox.execute("GET", "interpreter/contexts")
        if isinstance(response, list):
            return response
        return list((response or {}).get("contexts") or [])

    def get_context(self, context: str) -> dict[str, Any]:
        return self._toolbox.execute("GET", f"interpreter/contexts/{context}")

    def delete_context(self, context: str) -> None:
        self._toolbox.execute("DELETE", f"interpreter/contexts/{context}")
