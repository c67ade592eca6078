# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Sandbox handle and lifecycle state machine."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from daytona_client._defaults import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    MIN_REMAINING_TIMEOUT_SECONDS,
)
from daytona_client._filesystem import FileSystem
from daytona_client._http import HttpClient
from daytona_client._interpreter import CodeInterpreter
from daytona_client._process import Process
from daytona_client._toolbox import ToolboxClient, toolbox_base_url
from daytona_client._types import STOPPED_STATES, SandboxInfo, SandboxState
from daytona_client.exceptions import (
    DaytonaNotFoundError,
    DaytonaValidationError,
    SandboxDestroyedError,
    SandboxError,
    SandboxFailedError,
    SandboxTimeoutError,
)

logger = logging.getLogger(__name__)


def validate_timeout(timeout: float | None) -> None:
    """Reject negative timeouts before any request is sent.

    Raises:
        DaytonaValidationError: If timeout is negative
    """
    if timeout is not None and timeout < 0:
        raise DaytonaValidationError("Timeout must be a non-negative number")


def request_timeout(timeout: float | None) -> float | None:
    """Map the 0 sentinel to no request timeout."""
    return timeout or None


def remaining_timeout(timeout: float | None, start_time: float) -> float | None:
    """Budget left from timeout after the time spent since start_time.

    Returns None when timeout is 0 or None (no deadline). A spent budget is
    floored at MIN_REMAINING_TIMEOUT_SECONDS so the next wait still checks
    the state once.
    """
    if not timeout:
        return None
    return max(MIN_REMAINING_TIMEOUT_SECONDS, timeout - (time.monotonic() - start_time))


def _coerce_label(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _validate_interval(name: str, interval: Any) -> None:
    if isinstance(interval, bool) or not isinstance(interval, int) or interval < 0:
        raise DaytonaValidationError(f"{name} must be a non-negative integer")


class Sandbox:
    """Handle to a remote sandbox.

    The handle holds the last SandboxInfo reported by the service. Lifecycle
    methods send one action request and then poll until the sandbox settles,
    with a single timeout bounding the whole operation. A timeout of 0 (or
    None for the wait methods) disables the deadline.

    Handles are not synchronized: concurrent lifecycle calls on the same
    handle from several threads may interleave their refreshes.

    Example:
        ```python
        sandbox = daytona.create()
        result = sandbox.process.exec("python --version")
        sandbox.stop()
        sandbox.start(timeout=120)
        sandbox.delete()
        ```
    """

    def __init__(
        self,
        info: SandboxInfo,
        http: HttpClient,
        resolve_proxy_toolbox_url: Callable[[], str],
    ) -> None:
        self._info = info
        self._http = http
        self._resolve_proxy_toolbox_url = resolve_proxy_toolbox_url
        self._toolbox_url: str | None = None
        self._toolbox = ToolboxClient(http, lambda: self.toolbox_url)
        self._fs = FileSystem(self._toolbox)
        self._process = Process(self._toolbox)
        self._code_interpreter = CodeInterpreter(self._toolbox)

    def __repr__(self) -> str:
        return f"<Sandbox id={self.id!r} state={self.state.value}>"

    # Properties

    @property
    def info(self) -> SandboxInfo:
        """The sandbox attributes as of the last refresh."""
        return self._info

    @property
    def id(self) -> str:
        return self._info.id

    @property
    def name(self) -> str | None:
        return self._info.name

    @property
    def state(self) -> SandboxState:
        return self._info.state

    @property
    def error_reason(self) -> str | None:
        return self._info.error_reason

    @property
    def recoverable(self) -> bool:
        return self._info.recoverable

    @property
    def labels(self) -> dict[str, str]:
        return dict(self._info.labels)

    @property
    def auto_stop_interval(self) -> int | None:
        return self._info.auto_stop_interval

    @property
    def auto_archive_interval(self) -> int | None:
        return self._info.auto_archive_interval

    @property
    def auto_delete_interval(self) -> int | None:
        return self._info.auto_delete_interval

    @property
    def toolbox_url(self) -> str:
        """Base URL of this sandbox's toolbox, derived from the API URL."""
        if self._toolbox_url is None:
            self._toolbox_url = toolbox_base_url(self._http.base_url, self.id)
        return self._toolbox_url

    @property
    def proxy_toolbox_url(self) -> str:
        """Account-wide toolbox proxy URL, fetched once per client.

        Raises:
            DaytonaError: If the configuration request fails
        """
        return self._resolve_proxy_toolbox_url()

    @property
    def fs(self) -> FileSystem:
        return self._fs

    @property
    def process(self) -> Process:
        return self._process

    @property
    def code_interpreter(self) -> CodeInterpreter:
        return self._code_interpreter

    # State refresh

    def refresh(self) -> SandboxInfo:
        """Fetch the sandbox and replace the local attributes.

        Raises:
            DaytonaNotFoundError: If the sandbox no longer exists
            DaytonaInvalidResponseError: If the payload is not an object
        """
        self._info = SandboxInfo.from_api(self._http.get(f"sandbox/{self.id}"))
        return self._info

    def _refresh_tolerating_not_found(self) -> SandboxInfo:
        try:
            return self.refresh()
        except DaytonaNotFoundError:
            logger.debug("Sandbox %s not found on refresh, marking destroyed", self.id)
            self._info = self._info.with_state(SandboxState.DESTROYED)
            return self._info

    def _ensure_not_destroyed(self) -> None:
        if self.state == SandboxState.DESTROYED:
            raise SandboxDestroyedError(
                f"Sandbox {self.id} has been destroyed", sandbox_id=self.id
            )

    def _failed(self, action: str) -> SandboxFailedError:
        return SandboxFailedError(
            f"Sandbox {self.id} failed to {action} with state: {self._info.raw_state}, "
            f"error: {self.error_reason}",
            sandbox_id=self.id,
            state=self.state.value,
            error_reason=self.error_reason,
            recoverable=self.recoverable,
        )

    # Lifecycle

    def start(self, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Start the sandbox and wait until it is started.

        Raises:
            DaytonaValidationError: If timeout is negative
            SandboxDestroyedError: If the sandbox was destroyed
            SandboxFailedError: If the sandbox lands in error or build_failed
            SandboxTimeoutError: If it is not started within timeout seconds
        """
        validate_timeout(timeout)
        self._ensure_not_destroyed()

        start_time = time.monotonic()
        self._http.post(f"sandbox/{self.id}/start", timeout=request_timeout(timeout))
        self.refresh()
        self.wait_for_start(remaining_timeout(timeout, start_time))

    def stop(self, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Stop the sandbox and wait until it is stopped.

        A sandbox that disappears while stopping counts as stopped.

        Raises:
            DaytonaValidationError: If timeout is negative
            SandboxDestroyedError: If the sandbox was destroyed before the call
            SandboxFailedError: If the sandbox lands in error or build_failed
            SandboxTimeoutError: If it is not stopped within timeout seconds
        """
        validate_timeout(timeout)
        self._ensure_not_destroyed()

        start_time = time.monotonic()
        self._http.post(f"sandbox/{self.id}/stop", timeout=request_timeout(timeout))
        self._refresh_tolerating_not_found()
        self.wait_for_stop(remaining_timeout(timeout, start_time))

    def delete(self, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Delete the sandbox.

        Does not wait for destruction to finish. Deleting a sandbox already
        known to be destroyed does nothing.
        """
        validate_timeout(timeout)
        if self.state == SandboxState.DESTROYED:
            logger.debug("delete() called on already-destroyed sandbox %s", self.id)
            return

        self._http.delete(f"sandbox/{self.id}", timeout=request_timeout(timeout))
        self._refresh_tolerating_not_found()
        logger.info("Sandbox %s deleted (state: %s)", self.id, self.state.value)

    def archive(self) -> None:
        """Archive a stopped sandbox, moving its filesystem to cold storage."""
        self._ensure_not_destroyed()
        self._http.post(f"sandbox/{self.id}/archive")
        self.refresh()
        logger.info("Sandbox %s archive requested (state: %s)", self.id, self.state.value)

    def recover(self, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Recover a sandbox from a recoverable error and wait until it is started.

        Raises:
            DaytonaValidationError: If timeout is negative
            SandboxError: If the sandbox is not in a recoverable error state
            SandboxFailedError: If recovery lands in error or build_failed
            SandboxTimeoutError: If it is not started within timeout seconds
        """
        validate_timeout(timeout)
        self._ensure_not_destroyed()
        if self.state != SandboxState.ERROR or not self.recoverable:
            raise SandboxError(
                f"Sandbox {self.id} is not recoverable (state: {self.state.value}, "
                f"recoverable: {self.recoverable})",
                sandbox_id=self.id,
            )

        start_time = time.monotonic()
        self._http.post(f"sandbox/{self.id}/recover", timeout=request_timeout(timeout))
        self.refresh()
        self.wait_for_start(remaining_timeout(timeout, start_time))

    def wait_for_start(self, timeout: float | None = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Poll until the sandbox is started.

        Every iteration checks the deadline, then refreshes exactly once.

        Args:
            timeout: Seconds to wait; 0 or None waits indefinitely

        Raises:
            SandboxFailedError: On error or build_failed
            SandboxDestroyedError: If the sandbox is destroyed while waiting
            SandboxTimeoutError: If the deadline passes first
        """
        validate_timeout(timeout)
        start_time = time.monotonic()

        while self.state != SandboxState.STARTED:
            if timeout and time.monotonic() - start_time >= timeout:
                raise SandboxTimeoutError(
                    f"Sandbox {self.id} failed to start within {timeout} seconds",
                    sandbox_id=self.id,
                )

            self.refresh()
            logger.debug("Sandbox %s state: %s", self.id, self._info.raw_state)

            if self.state == SandboxState.STARTED:
                break
            if self.state.is_failure:
                raise self._failed("start")
            if self.state == SandboxState.DESTROYED:
                raise SandboxDestroyedError(
                    f"Sandbox {self.id} was destroyed while starting", sandbox_id=self.id
                )

            time.sleep(DEFAULT_POLL_INTERVAL_SECONDS)

        logger.info("Sandbox %s is started", self.id)

    def wait_for_stop(self, timeout: float | None = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Poll until the sandbox is stopped or destroyed.

        A sandbox that is no longer found counts as destroyed.

        Args:
            timeout: Seconds to wait; 0 or None waits indefinitely

        Raises:
            SandboxFailedError: On error or build_failed
            SandboxTimeoutError: If the deadline passes first
        """
        validate_timeout(timeout)
        start_time = time.monotonic()

        while self.state not in STOPPED_STATES:
            if timeout and time.monotonic() - start_time >= timeout:
                raise SandboxTimeoutError(
                    f"Sandbox {self.id} failed to stop within {timeout} seconds",
                    sandbox_id=self.id,
                )

            self._refresh_tolerating_not_found()
            logger.debug("Sandbox %s state: %s", self.id, self._info.raw_state)

            if self.state in STOPPED_STATES:
                break
            if self.state.is_failure:
                raise self._failed("stop")

            time.sleep(DEFAULT_POLL_INTERVAL_SECONDS)

        logger.info("Sandbox %s is %s", self.id, self.state.value)

    # Settings

    def set_labels(self, labels: Mapping[str, Any]) -> dict[str, str]:
        """Replace the sandbox labels.

        Values are sent as strings; booleans become "true" or "false".

        Returns:
            The labels now set on the sandbox
        """
        string_labels = {str(key): _coerce_label(value) for key, value in labels.items()}
        response = self._http.put(f"sandbox/{self.id}/labels", json={"labels": string_labels})

        echoed = response.get("labels") if isinstance(response, Mapping) else None
        new_labels = dict(echoed) if echoed else string_labels
        self._info = replace(self._info, labels=new_labels)
        return dict(new_labels)

    def set_autostop_interval(self, interval: int) -> None:
        """Set minutes of inactivity before auto-stop; 0 disables auto-stop."""
        _validate_interval("Auto-stop interval", interval)
        self._http.put(f"sandbox/{self.id}/autostop-interval", json={"interval": interval})
        self._info = replace(self._info, auto_stop_interval=interval)

    def set_auto_archive_interval(self, interval: int) -> None:
        """Set minutes after stop before auto-archive; 0 uses the maximum."""
        _validate_interval("Auto-archive interval", interval)
        self._http.put(f"sandbox/{self.id}/auto-archive-interval", json={"interval": interval})
        self._info = replace(self._info, auto_archive_interval=interval)

    def set_auto_delete_interval(self, interval: int) -> None:
        """Set minutes after stop before auto-delete.

        A negative interval disables auto-delete and 0 deletes on stop.
        """
        self._http.put(f"sandbox/{self.id}/auto-delete-interval", json={"interval": interval})
        self._info = replace(self._info, auto_delete_interval=interval)

    # Access

    def get_preview_link(self, port: int) -> dict[str, Any]:
        """Preview URL and access token for a port exposed by the sandbox."""
        return self._http.get(f"sandbox/{self.id}/ports/{port}/preview-url")

    def create_ssh_access(self, expires_in_minutes: int | None = None) -> dict[str, Any]:
        body = {"expiresInMinutes": expires_in_minutes} if expires_in_minutes else {}
        return self._http.post(f"sandbox/{self.id}/ssh-access", json=body)

    def revoke_ssh_access(self, token: str) -> None:
        self._http.delete(f"sandbox/{self.id}/ssh-access/{token}")

    def validate_ssh_access(self, token: str) -> dict[str, Any]:
        return self._http.post("sandbox/ssh-access/validate", json={"token": token})

    def refresh_activity(self) -> None:
        """Reset the sandbox inactivity timer."""
        self._http.post(f"sandbox/{self.id}/activity")

    def get_user_home_dir(self) -> str | None:
        response = self._toolbox.execute("GET", "info/user-home-dir")
        return response.get("dir") if isinstance(response, Mapping) else response

    def get_work_dir(self) -> str | None:
        response = self._toolbox.execute("GET", "info/work-dir")
        return response.get("dir") if isinstance(response, Mapping) else response
