# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Exception hierarchy for Daytona client operations."""

from __future__ import annotations

from collections.abc import Mapping


class DaytonaError(Exception):
    """Base exception for all Daytona client errors.

    Attributes:
        status_code: HTTP status code when the error came from a response
        headers: Response headers when the error came from a response
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.headers: dict[str, str] = dict(headers or {})


class DaytonaAuthenticationError(DaytonaError):
    """Raised when the service rejects the credentials (HTTP 401/403)."""


class DaytonaNotFoundError(DaytonaError):
    """Raised when a requested resource does not exist (HTTP 404)."""


class DaytonaRateLimitError(DaytonaError):
    """Raised when the service rate-limits the client (HTTP 429).

    The client never retries on its own; use retry_after to back off.
    """

    @property
    def retry_after(self) -> float | None:
        """Seconds to wait according to the Retry-After header, if numeric."""
        for key, value in self.headers.items():
            if key.lower() == "retry-after":
                try:
                    return float(value)
                except ValueError:
                    return None
        return None


class DaytonaTimeoutError(DaytonaError):
    """Raised when a request or a wait operation times out."""


class DaytonaConnectionError(DaytonaError):
    """Raised when the service cannot be reached."""


class DaytonaConfigurationError(DaytonaError):
    """Raised when credentials are missing or contradictory."""


class DaytonaValidationError(DaytonaError, ValueError):
    """Raised when an argument is rejected before any request is sent."""


class DaytonaInvalidResponseError(DaytonaError):
    """Raised when a response payload does not have the expected shape."""


class SandboxError(DaytonaError):
    """Base exception for sandbox lifecycle errors."""

    def __init__(self, message: str, *, sandbox_id: str | None = None) -> None:
        super().__init__(message)
        self.sandbox_id = sandbox_id


class SandboxTimeoutError(DaytonaTimeoutError):
    """Raised when a sandbox does not reach the awaited state in time."""

    def __init__(self, message: str, *, sandbox_id: str | None = None) -> None:
        super().__init__(message)
        self.sandbox_id = sandbox_id


class SandboxFailedError(SandboxError):
    """Raised when a sandbox lands in the error or build_failed state.

    Check recoverable before calling Sandbox.recover().
    """

    def __init__(
        self,
        message: str,
        *,
        sandbox_id: str | None = None,
        state: str | None = None,
        error_reason: str | None = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, sandbox_id=sandbox_id)
        self.state = state
        self.error_reason = error_reason
        self.recoverable = recoverable


class SandboxDestroyedError(SandboxError):
    """Raised when an operation targets a sandbox already observed as destroyed."""
