# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from daytona_client.exceptions import (
    DaytonaAuthenticationError,
    DaytonaConfigurationError,
    DaytonaConnectionError,
    DaytonaError,
    DaytonaInvalidResponseError,
    DaytonaNotFoundError,
    DaytonaRateLimitError,
    DaytonaTimeoutError,
    DaytonaValidationError,
    SandboxDestroyedError,
    SandboxError,
    SandboxFailedError,
    SandboxTimeoutError,
)


class TestHierarchy:
    """Every error is catchable as DaytonaError."""

    @pytest.mark.parametrize(
        "exc_type",
        [
            DaytonaAuthenticationError,
            DaytonaConfigurationError,
            DaytonaConnectionError,
            DaytonaInvalidResponseError,
            DaytonaNotFoundError,
            DaytonaRateLimitError,
            DaytonaTimeoutError,
            DaytonaValidationError,
            SandboxError,
            SandboxDestroyedError,
            SandboxFailedError,
            SandboxTimeoutError,
        ],
    )
    def test_subclass_of_base(self, exc_type: type[DaytonaError]) -> None:
        assert issubclass(exc_type, DaytonaError)

    def test_validation_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            raise DaytonaValidationError("bad page")

    def test_sandbox_timeout_is_a_timeout(self) -> None:
        assert issubclass(SandboxTimeoutError, DaytonaTimeoutError)

    def test_failed_and_destroyed_are_sandbox_errors(self) -> None:
        assert issubclass(SandboxFailedError, SandboxError)
        assert issubclass(SandboxDestroyedError, SandboxError)


class TestAttributes:
    def test_http_fields(self) -> None:
        error = DaytonaError("boom", status_code=500, headers={"X-Request-Id": "r-1"})
        assert str(error) == "boom"
        assert error.status_code == 500
        assert error.headers == {"X-Request-Id": "r-1"}

    def test_defaults(self) -> None:
        error = DaytonaError("boom")
        assert error.status_code is None
        assert error.headers == {}

    def test_failed_carries_state(self) -> None:
        error = SandboxFailedError(
            "Sandbox sb-1 failed to start",
            sandbox_id="sb-1",
            state="error",
            error_reason="disk full",
            recoverable=True,
        )
        assert error.sandbox_id == "sb-1"
        assert error.state == "error"
        assert error.error_reason == "disk full"
        assert error.recoverable is True

    def test_timeout_carries_sandbox_id(self) -> None:
        assert SandboxTimeoutError("late", sandbox_id="sb-1").sandbox_id == "sb-1"


class TestRetryAfter:
    def test_numeric(self) -> None:
        error = DaytonaRateLimitError("slow down", status_code=429, headers={"retry-after": "2.5"})
        assert error.retry_after == 2.5

    def test_case_insensitive(self) -> None:
        error = DaytonaRateLimitError("slow down", headers={"Retry-After": "3"})
        assert error.retry_after == 3.0

    def test_http_date_is_none(self) -> None:
        error = DaytonaRateLimitError(
            "slow down", headers={"retry-after": "Wed, 21 Oct 2026 07:28:00 GMT"}
        )
        assert error.retry_after is None

    def test_missing(self) -> None:
        assert DaytonaRateLimitError("slow down").retry_after is None
