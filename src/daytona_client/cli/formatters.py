"""Output formatters for CLI commands."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from daytona_client import Sandbox


def sandbox_to_dict(sandbox: Sandbox) -> dict[str, Any]:
    info = sandbox.info
    return {
        "id": info.id,
        "name": info.name,
        "state": info.raw_state or info.state.value,
        "snapshot": info.snapshot,
        "target": info.target,
        "cpu": info.cpu,
        "memory": info.memory,
        "disk": info.disk,
        "gpu": info.gpu,
        "labels": info.labels,
        "error_reason": info.error_reason,
        "recoverable": info.recoverable,
        "auto_stop_interval": info.auto_stop_interval,
        "auto_archive_interval": info.auto_archive_interval,
        "auto_delete_interval": info.auto_delete_interval,
        "created_at": info.created_at.isoformat() if info.created_at else None,
    }


def format_sandbox_table(sandboxes: Sequence[Sandbox]) -> str:
    """Format sandboxes as a human-readable table.

    Args:
        sandboxes: Sandboxes to format.

    Returns:
        Formatted table string.
    """
    if not sandboxes:
        return "No sandboxes found."

    headers = ["ID", "NAME", "STATE", "TARGET", "AGE"]

    rows: list[list[str]] = []
    for sb in sandboxes:
        info = sb.info
        rows.append(
            [
                info.id or "-",
                info.name or "-",
                info.raw_state or info.state.value,
                info.target or "-",
                _format_age(info.created_at) if info.created_at else "-",
            ]
        )

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    lines = ["  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))]
    for row in rows:
        lines.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)))

    return "\n".join(line.rstrip() for line in lines)


def format_sandbox_json(sandboxes: Sequence[Sandbox]) -> str:
    return json.dumps([sandbox_to_dict(sb) for sb in sandboxes], indent=2)


def format_sandbox_detail(sandbox: Sandbox) -> str:
    """Format one sandbox as aligned key/value lines."""
    data = sandbox_to_dict(sandbox)
    labels = data.pop("labels")
    width = max(len(key) for key in data)
    lines = [f"{key:<{width}}  {'-' if value is None else value}" for key, value in data.items()]
    for key, value in sorted(labels.items()):
        lines.append(f"{'label':<{width}}  {key}={value}")
    return "\n".join(lines)


def _format_age(created_at: datetime) -> str:
    """Format a datetime as a human-readable age string (e.g. "2h", "5m", "3d")."""
    now = datetime.now(UTC)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)

    total_seconds = int((now - created_at).total_seconds())

    if total_seconds < 0:
        return "0s"

    if total_seconds < 60:
        return f"{total_seconds}s"
    elif total_seconds < 3600:
        return f"{total_seconds // 60}m"
    elif total_seconds < 86400:
        return f"{total_seconds // 3600}h"
    else:
        return f"{total_seconds // 86400}d"
