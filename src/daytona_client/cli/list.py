# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""daytona-client ls — list sandboxes."""

from __future__ import annotations

import click

from daytona_client import Daytona
from daytona_client.cli.formatters import format_sandbox_json, format_sandbox_table


def parse_labels(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated KEY=VALUE options into a dict."""
    labels: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--label")
        labels[key] = value
    return labels


@click.command("ls")
@click.option(
    "--label", "-l", "labels", multiple=True, help="Filter by label KEY=VALUE (repeatable)."
)
@click.option("--page", type=click.IntRange(min=1), default=None, help="Page number.")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Sandboxes per page.")
@click.option(
    "--output",
    "-o",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"], case_sensitive=False),
    help="Output format.",
)
def list_sandboxes(
    labels: tuple[str, ...],
    page: int | None,
    limit: int | None,
    output_format: str,
) -> None:
    """List sandboxes.

    Displays sandbox ID, name, state, target and age for matching sandboxes.
    """
    label_filter = parse_labels(labels)
    with Daytona() as daytona:
        result = daytona.list(label_filter or None, page=page, limit=limit)

    if output_format == "json":
        click.echo(format_sandbox_json(result.items))
        return

    click.echo(format_sandbox_table(result.items))
    if result.total_pages > 1:
        click.echo(f"\nPage {result.page} of {result.total_pages} ({result.total} sandboxes)")
