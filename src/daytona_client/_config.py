# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Client configuration.

Configuration is an explicit, immutable object handed to the Daytona client.
Values resolve in this order (first wins):

1. Arguments passed to DaytonaConfig / DaytonaConfig.from_env()
2. Process environment (DAYTONA_API_KEY, DAYTONA_JWT_TOKEN, ...)
3. .env.local, then .env in the working directory

A process-wide default can be installed once by the hosting application via
configure(). The client only reads it when no configuration is passed.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any

from daytona_client._defaults import DEFAULT_API_URL
from daytona_client._env import layered_environment
from daytona_client.exceptions import DaytonaConfigurationError

logger = logging.getLogger(__name__)

ENV_API_KEY = "DAYTONA_API_KEY"
ENV_JWT_TOKEN = "DAYTONA_JWT_TOKEN"
ENV_ORGANIZATION_ID = "DAYTONA_ORGANIZATION_ID"
ENV_API_URL = "DAYTONA_API_URL"
ENV_TARGET = "DAYTONA_TARGET"
ENV_SSL_VERIFY = "DAYTONA_SSL_VERIFY"


@dataclass(frozen=True)
class DaytonaConfig:
    """Immutable client configuration.

    Authenticate with either an API key, or a JWT token plus organization ID.
    When both an API key and a JWT token are set the API key wins.

    Example:
        ```python
        config = DaytonaConfig(api_key="dtn_...", target="us")
        daytona = Daytona(config)
        ```
    """

    api_key: str | None = None
    jwt_token: str | None = None
    organization_id: str | None = None
    api_url: str = DEFAULT_API_URL
    target: str | None = None
    verify_ssl: bool = True

    @classmethod
    def from_env(cls, **overrides: Any) -> DaytonaConfig:
        """Build a configuration from the environment and .env files.

        Keyword arguments that are not None take precedence over the
        environment.
        """
        env = layered_environment()
        values: dict[str, Any] = {
            "api_key": env.get(ENV_API_KEY) or None,
            "jwt_token": env.get(ENV_JWT_TOKEN) or None,
            "organization_id": env.get(ENV_ORGANIZATION_ID) or None,
            "api_url": env.get(ENV_API_URL) or DEFAULT_API_URL,
            "target": env.get(ENV_TARGET) or None,
            "verify_ssl": env.get(ENV_SSL_VERIFY, "true").lower() != "false",
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    @property
    def is_authenticated(self) -> bool:
        """True if an API key or JWT token is present."""
        return bool(self.api_key or self.jwt_token)

    @property
    def uses_jwt(self) -> bool:
        """True if requests authenticate with the JWT token."""
        return not self.api_key and bool(self.jwt_token)

    @property
    def auth_token(self) -> str | None:
        """The bearer token sent with every request."""
        return self.api_key or self.jwt_token

    def validate(self) -> DaytonaConfig:
        """Check credentials before any request is made.

        Returns:
            self, to allow chaining

        Raises:
            DaytonaConfigurationError: If no credential is set, or a JWT token
                is used without an organization ID
        """
        if not self.is_authenticated:
            raise DaytonaConfigurationError(
                "API key or JWT token is required. "
                f"Set {ENV_API_KEY} or {ENV_JWT_TOKEN}, "
                "or pass api_key= or jwt_token= to DaytonaConfig"
            )
        if self.uses_jwt and not self.organization_id:
            raise DaytonaConfigurationError(
                "Organization ID is required when using JWT authentication. "
                f"Set {ENV_ORGANIZATION_ID} or pass organization_id= to DaytonaConfig"
            )
        if self.api_key and self.jwt_token:
            logger.debug("Both API key and JWT token configured, using API key")
        return self

    def with_overrides(self, **kwargs: Any) -> DaytonaConfig:
        """Create a new configuration with some values overridden."""
        return replace(self, **kwargs)


_default_config: DaytonaConfig | None = None
_default_config_lock = threading.Lock()


def configure(config: DaytonaConfig | None = None, **kwargs: Any) -> DaytonaConfig:
    """Install the process-wide default configuration.

    Intended to be called once by the hosting application. Passing keyword
    arguments builds the configuration with DaytonaConfig.from_env().

    Example:
        ```python
        import daytona_client

        daytona_client.configure(api_key="dtn_...")
        daytona = daytona_client.Daytona()
        ```
    """
    global _default_config
    resolved = config if config is not None else DaytonaConfig.from_env(**kwargs)
    with _default_config_lock:
        _default_config = resolved
    return resolved


def get_default_config() -> DaytonaConfig | None:
    """Return the process-wide default configuration, if one was installed."""
    return _default_config


def reset_default_config() -> None:
    """Forget the process-wide default configuration."""
    global _default_config
    with _default_config_lock:
        _default_config = None
