# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Environment variable utilities."""

from __future__ import annotations

import os

DOTENV_FILES: tuple[str, ...] = (".env", ".env.local")


def load_dotenv(filepath: str = ".env") -> dict[str, str]:
    """Load environment variables from a .env file.

    Args:
        filepath: Path to .env file (default: ".env")

    Returns:
        Dictionary of environment variables from the file. Keys declared
        without a value are dropped.

    Example:
        env_vars = {
            **load_dotenv(".env"),
            **load_dotenv(".env.local"),
        }
    """
    from dotenv import dotenv_values

    return {key: value for key, value in dotenv_values(filepath).items() if value is not None}


def layered_environment(files: tuple[str, ...] = DOTENV_FILES) -> dict[str, str]:
    """Merge .env files with the process environment.

    Later files override earlier ones and the process environment overrides
    every file. Missing files are skipped.
    """
    merged: dict[str, str] = {}
    for filepath in files:
        if os.path.isfile(filepath):
            merged.update(load_dotenv(filepath))
    merged.update(os.environ)
    return merged
