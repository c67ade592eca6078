# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Authentication header resolution for the Daytona client.

Supports two auth strategies:
1. API key: Authorization: Bearer <api_key>
2. JWT: Authorization: Bearer <jwt_token> plus X-Daytona-Organization-ID

Resolution order: the API key takes priority if present. The organization
header is only sent with JWT auth.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from daytona_client._config import DaytonaConfig
from daytona_client._defaults import SDK_SOURCE, SDK_VERSION
from daytona_client.exceptions import DaytonaConfigurationError

logger = logging.getLogger(__name__)

ORGANIZATION_HEADER = "X-Daytona-Organization-ID"
SOURCE_HEADER = "X-Daytona-Source"
VERSION_HEADER = "X-Daytona-SDK-Version"


@dataclass(frozen=True)
class AuthHeaders:
    """Resolved authentication headers and strategy used."""

    headers: dict[str, str]
    strategy: Literal["api_key", "jwt", "none"]

    def __bool__(self) -> bool:
        """Return True if any auth headers are present."""
        return bool(self.headers)


class _AuthMode:
    """Configuration for an authentication mode."""

    def __init__(self, try_auth: Callable[[DaytonaConfig], AuthHeaders | None]) -> None:
        self.try_auth = try_auth


def client_headers() -> dict[str, str]:
    """Client identification headers attached to every request."""
    return {
        "Accept": "application/json",
        SOURCE_HEADER: SDK_SOURCE,
        VERSION_HEADER: SDK_VERSION,
    }


def resolve_auth(config: DaytonaConfig) -> AuthHeaders:
    """Resolve authentication headers from a configuration.

    Tries each auth mode in priority order (defined in _AUTH_MODES) and
    returns the first one that succeeds.

    Returns:
        AuthHeaders with resolved headers and strategy name

    Raises:
        DaytonaConfigurationError: If a JWT token is set without an organization ID
    """
    for mode in _AUTH_MODES:
        auth = mode.try_auth(config)
        if auth is not None:
            logger.debug("Using %s authentication", auth.strategy)
            return auth

    logger.debug("No authentication credentials found")
    return AuthHeaders(headers={}, strategy="none")


def _try_api_key_auth(config: DaytonaConfig) -> AuthHeaders | None:
    if not config.api_key:
        return None

    return AuthHeaders(
        headers={"Authorization": f"Bearer {config.api_key}"},
        strategy="api_key",
    )


def _try_jwt_auth(config: DaytonaConfig) -> AuthHeaders | None:
    if not config.jwt_token:
        return None

    # JWT found - organization is now required
    if not config.organization_id:
        raise DaytonaConfigurationError(
            "JWT token configured, but no organization ID is set. "
            "Set DAYTONA_ORGANIZATION_ID or pass organization_id= to DaytonaConfig."
        )

    return AuthHeaders(
        headers={
            "Authorization": f"Bearer {config.jwt_token}",
            ORGANIZATION_HEADER: config.organization_id,
        },
        strategy="jwt",
    )


# Auth modes in priority order - first successful returns
_AUTH_MODES = [
    _AuthMode(try_auth=_try_api_key_auth),
    _AuthMode(try_auth=_try_jwt_auth),
]
