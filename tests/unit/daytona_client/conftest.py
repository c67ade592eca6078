# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Shared fixtures for daytona_client unit tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from daytona_client import Daytona, DaytonaConfig
from daytona_client._config import reset_default_config

API_URL = "https://api.test/api"

MakeClient = Callable[..., Daytona]

# Environment variables that affect configuration.
# These are cleared before each test to ensure isolation.
CONFIG_ENV_VARS = (
    "DAYTONA_API_KEY",
    "DAYTONA_JWT_TOKEN",
    "DAYTONA_ORGANIZATION_ID",
    "DAYTONA_API_URL",
    "DAYTONA_TARGET",
    "DAYTONA_SSL_VERIFY",
)


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Clear config env vars and .env files before each test.

    The working directory moves to an empty temp dir so a developer's .env
    never leaks in, and the process-wide default config is reset.
    """
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_default_config()
    yield
    reset_default_config()


@pytest.fixture(autouse=True)
def _fast_polling(monkeypatch: pytest.MonkeyPatch) -> None:
    """Eliminate poll-interval sleeps so tests run on mock timing alone."""
    monkeypatch.setattr("daytona_client._sandbox.DEFAULT_POLL_INTERVAL_SECONDS", 0.0)
    monkeypatch.setattr("daytona_client._client.DEFAULT_BUILD_POLL_INTERVAL_SECONDS", 0.0)
    monkeypatch.setattr("daytona_client._snapshots.DEFAULT_BUILD_POLL_INTERVAL_SECONDS", 0.0)


Reply = Any  # httpx.Response, a JSON-able payload, or a callable taking the request


class FakeApi:
    """Scripted Daytona service behind httpx.MockTransport.

    Routes are keyed by method and path relative to the API base. Each route
    holds a queue of replies; the last reply repeats once the queue drains.
    Unrouted requests get a 404.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Reply]] = {}
        self.transport = httpx.MockTransport(self._handle)

    def add(self, method: str, path: str, *replies: Reply) -> FakeApi:
        self._routes.setdefault((method.upper(), path), []).extend(replies)
        return self

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests if r.method == method.upper() and _relative(r) == path
        ]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, _relative(request)))
        if not queue:
            return httpx.Response(404, json={"message": f"Not found: {_relative(request)}"})

        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(reply):
            reply = reply(request)
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)


def _relative(request: httpx.Request) -> str:
    return request.url.path.removeprefix("/api/")


def sandbox_payload(sandbox_id: str = "sb-1", state: str = "started", **extra: Any) -> dict:
    """Sandbox JSON as returned by the service."""
    return {
        "id": sandbox_id,
        "name": f"name-{sandbox_id}",
        "state": state,
        "organizationId": "org-1",
        "target": "us",
        "cpu": 1,
        "memory": 2,
        "disk": 10,
        "labels": {},
        "env": {},
        **extra,
    }


def not_found() -> httpx.Response:
    return httpx.Response(404, json={"message": "Sandbox not found"})


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def make_client(api: FakeApi) -> MakeClient:
    """Build a Daytona client talking to the fake service."""

    def _make(**config: Any) -> Daytona:
        values = {"api_key": "test-key", "api_url": API_URL, **config}
        return Daytona(DaytonaConfig(**values), _transport=api.transport)

    return _make


@pytest.fixture
def daytona(make_client: MakeClient) -> Iterator[Daytona]:
    client = make_client()
    yield client
    client.close()
