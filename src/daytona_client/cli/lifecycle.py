# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""daytona-client info/create/start/stop/rm — single-sandbox commands."""

from __future__ import annotations

import json

import click

from daytona_client import (
    CreateSandboxFromImageParams,
    CreateSandboxFromSnapshotParams,
    CreateSandboxParams,
    Daytona,
)
from daytona_client._defaults import DEFAULT_TIMEOUT_SECONDS
from daytona_client.cli.formatters import format_sandbox_detail, sandbox_to_dict
from daytona_client.cli.list import parse_labels

_timeout_option = click.option(
    "--timeout",
    type=click.FloatRange(min=0),
    default=DEFAULT_TIMEOUT_SECONDS,
    show_default=True,
    help="Seconds to wait; 0 waits indefinitely.",
)


@click.command("info")
@click.argument("sandbox_id")
@click.option("--json", "as_json", is_flag=True, help="Print JSON.")
def info(sandbox_id: str, as_json: bool) -> None:
    """Show details of a sandbox by ID or name."""
    with Daytona() as daytona:
        sandbox = daytona.get(sandbox_id)

    if as_json:
        click.echo(json.dumps(sandbox_to_dict(sandbox), indent=2))
    else:
        click.echo(format_sandbox_detail(sandbox))


@click.command("create")
@click.option("--name", default=None, help="Sandbox name.")
@click.option("--snapshot", default=None, help="Snapshot to create the sandbox from.")
@click.option("--image", default=None, help="Image to build the sandbox from.")
@click.option("--language", default=None, help="Code toolbox language.")
@click.option("--label", "-l", "labels", multiple=True, help="Label KEY=VALUE (repeatable).")
@click.option("--env", "-e", "env", multiple=True, help="Environment KEY=VALUE (repeatable).")
@click.option("--auto-stop", type=int, default=None, help="Minutes of inactivity before stop.")
@click.option("--ephemeral", is_flag=True, help="Delete the sandbox as soon as it stops.")
@_timeout_option
def create(
    name: str | None,
    snapshot: str | None,
    image: str | None,
    language: str | None,
    labels: tuple[str, ...],
    env: tuple[str, ...],
    auto_stop: int | None,
    ephemeral: bool,
    timeout: float,
) -> None:
    """Create a sandbox and wait until it is started."""
    if snapshot and image:
        raise click.UsageError("--snapshot and --image are mutually exclusive")

    common = {
        "name": name,
        "language": language,
        "labels": parse_labels(labels) or None,
        "env_vars": parse_labels(env) or None,
        "auto_stop_interval": auto_stop,
        "ephemeral": ephemeral,
    }
    params: CreateSandboxParams
    if image:
        params = CreateSandboxFromImageParams(image=image, **common)
    else:
        params = CreateSandboxFromSnapshotParams(snapshot=snapshot, **common)

    def on_logs(line: str) -> None:
        click.echo(line, err=True)

    with Daytona() as daytona:
        sandbox = daytona.create(params, timeout=timeout, on_snapshot_create_logs=on_logs)

    click.echo(sandbox.id)


@click.command("start")
@click.argument("sandbox_id")
@_timeout_option
def start(sandbox_id: str, timeout: float) -> None:
    """Start a stopped sandbox."""
    with Daytona() as daytona:
        sandbox = daytona.get(sandbox_id)
        sandbox.start(timeout)
    click.echo(f"Sandbox {sandbox.id} is {sandbox.state.value}")


@click.command("stop")
@click.argument("sandbox_id")
@_timeout_option
def stop(sandbox_id: str, timeout: float) -> None:
    """Stop a running sandbox."""
    with Daytona() as daytona:
        sandbox = daytona.get(sandbox_id)
        sandbox.stop(timeout)
    click.echo(f"Sandbox {sandbox.id} is {sandbox.state.value}")


@click.command("rm")
@click.argument("sandbox_ids", nargs=-1, required=True)
def remove(sandbox_ids: tuple[str, ...]) -> None:
    """Delete one or more sandboxes."""
    with Daytona() as daytona:
        for sandbox_id in sandbox_ids:
            daytona.get(sandbox_id).delete()
            click.echo(f"Deleted {sandbox_id}")
