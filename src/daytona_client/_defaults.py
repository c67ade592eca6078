# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    SDK_VERSION: str = version("daytona-client")
except PackageNotFoundError:
    SDK_VERSION = "0.0.0"

SDK_SOURCE: str = "python-sdk"

DEFAULT_API_URL: str = "https://app.daytona.io/api"

# Default budget for lifecycle operations (create/start/stop/delete/recover).
# 0 disables the deadline entirely.
DEFAULT_TIMEOUT_SECONDS: float = 60.0

# Default timeout for a single HTTP request (seconds)
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 120.0

# File transfers get a larger request budget
DEFAULT_TRANSFER_TIMEOUT_SECONDS: float = 1800.0

DEFAULT_INTERPRETER_TIMEOUT_SECONDS: float = 300.0

# Sleep between refreshes in wait_for_start/wait_for_stop
DEFAULT_POLL_INTERVAL_SECONDS: float = 0.1

# Sleep between refreshes while a sandbox or snapshot image is building
DEFAULT_BUILD_POLL_INTERVAL_SECONDS: float = 1.0

# Floor for a remaining budget, so a just-expired budget still performs one check
MIN_REMAINING_TIMEOUT_SECONDS: float = 0.001

DEFAULT_LANGUAGE: str = "python"
