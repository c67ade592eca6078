# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Daytona CLI — terminal interface for Daytona sandboxes.

The functions in this package are intended to be called via the CLI,
not from Python code. No backwards compatibility guarantees are made
for Python calling patterns.
"""

from __future__ import annotations

from typing import Any

try:
    import click
except ModuleNotFoundError as e:
    if getattr(e, "name", None) == "click":
        raise ImportError(
            "daytona-client CLI requires the 'cli' extra. "
            "Install it with: pip install daytona-client[cli]",
            name="click",
        ) from e
    raise

from daytona_client.cli.lifecycle import create, info, remove, start, stop
from daytona_client.cli.list import list_sandboxes
from daytona_client.exceptions import DaytonaError


class _DaytonaCLI(click.Group):
    """Click group with top-level DaytonaError handling.

    SDK errors (not found, auth failures, timeouts, etc.) are caught and
    printed as clean "Error: <message>" output instead of raw tracebacks.
    """

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except DaytonaError as exc:
            raise click.ClickException(str(exc)) from None


@click.group(cls=_DaytonaCLI)
@click.version_option(package_name="daytona-client")
def cli() -> None:
    """Daytona sandbox CLI."""


cli.add_command(list_sandboxes, "ls")
cli.add_command(info, "info")
cli.add_command(create, "create")
cli.add_command(start, "start")
cli.add_command(stop, "stop")
cli.add_command(remove, "rm")
