# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Entry point for `python -m daytona_client` and the `daytona-client` console script."""

from __future__ import annotations

import sys


def main() -> None:
    """Run the Daytona CLI."""
    try:
        from daytona_client.cli import cli
    except ImportError as e:
        if getattr(e, "name", None) in ("daytona_client.cli", "click"):
            print(
                "daytona-client CLI requires the 'cli' extra.\n"
                "Install it with:  pip install daytona-client[cli]",
                file=sys.stderr,
            )
            sys.exit(1)
        raise
    cli()


if __name__ == "__main__":
    main()
