# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

"""Tests for data model types."""

from __future__ import annotations

import warnings
from datetime import datetime

import pytest

from daytona_client import (
    CodeLanguage,
    CreateSandboxFromImageParams,
    CreateSandboxFromSnapshotParams,
    DockerfileBuild,
    ExecuteResponse,
    PaginatedResult,
    Resources,
    SandboxInfo,
    SandboxState,
    SnapshotInfo,
    VolumeMount,
)
from daytona_client.exceptions import DaytonaInvalidResponseError, DaytonaValidationError


class TestSandboxState:
    """Open-ended state parsing."""

    def test_known_states(self) -> None:
        assert SandboxState.parse("started") is SandboxState.STARTED
        assert SandboxState.parse("BUILD_FAILED") is SandboxState.BUILD_FAILED

    def test_unknown_state_is_non_terminal(self, caplog: pytest.LogCaptureFixture) -> None:
        state = SandboxState.parse("resizing")
        assert state is SandboxState.UNKNOWN
        assert not state.is_failure
        assert "resizing" in caplog.text

    def test_none_is_unknown(self) -> None:
        assert SandboxState.parse(None) is SandboxState.UNKNOWN

    def test_failure_states(self) -> None:
        assert SandboxState.ERROR.is_failure
        assert SandboxState.BUILD_FAILED.is_failure
        assert not SandboxState.STOPPED.is_failure

    def test_str_value(self) -> None:
        assert SandboxState.STARTED == "started"


class TestSandboxInfo:
    """Entity snapshot hydration."""

    def test_from_api_camel_case(self) -> None:
        info = SandboxInfo.from_api(
            {
                "id": "sb-1",
                "state": "error",
                "errorReason": "boom",
                "recoverable": True,
                "organizationId": "org-1",
                "autoStopInterval": 15,
                "autoDeleteInterval": -1,
                "labels": {"team": "ml"},
                "volumes": [{"volumeId": "v-1", "mountPath": "/data"}],
                "createdAt": "2026-01-15T10:30:00+00:00",
            }
        )

        assert info.id == "sb-1"
        assert info.state is SandboxState.ERROR
        assert info.raw_state == "error"
        assert info.error_reason == "boom"
        assert info.recoverable is True
        assert info.organization_id == "org-1"
        assert info.auto_stop_interval == 15
        assert info.auto_delete_interval == -1
        assert info.labels == {"team": "ml"}
        assert info.volumes == (VolumeMount(volume_id="v-1", mount_path="/data"),)
        assert info.created_at == datetime.fromisoformat("2026-01-15T10:30:00+00:00")

    def test_from_api_snake_case(self) -> None:
        info = SandboxInfo.from_api({"id": "sb-1", "error_reason": "x", "auto_stop_interval": 0})
        assert info.error_reason == "x"
        assert info.auto_stop_interval == 0

    def test_unknown_state_keeps_raw_value(self) -> None:
        info = SandboxInfo.from_api({"id": "sb-1", "state": "resizing"})
        assert info.state is SandboxState.UNKNOWN
        assert info.raw_state == "resizing"

    @pytest.mark.parametrize("payload", ["<html>oops</html>", ["sb-1"], None])
    def test_non_object_payload_rejected(self, payload: object) -> None:
        with pytest.raises(DaytonaInvalidResponseError, match="expected object"):
            SandboxInfo.from_api(payload)

    def test_bad_timestamp_is_none(self) -> None:
        assert SandboxInfo.from_api({"id": "sb-1", "createdAt": "yesterday"}).created_at is None

    def test_with_state(self) -> None:
        info = SandboxInfo.from_api({"id": "sb-1", "state": "stopping"})
        destroyed = info.with_state(SandboxState.DESTROYED)
        assert destroyed.state is SandboxState.DESTROYED
        assert destroyed.raw_state == "destroyed"
        assert info.state is SandboxState.STOPPING


class TestCreateParams:
    """Tagged create-params variants."""

    def test_kinds(self) -> None:
        assert CreateSandboxFromSnapshotParams().kind == "snapshot"
        assert CreateSandboxFromImageParams(image="python:3.12").kind == "image"

    def test_ephemeral_forces_auto_delete_zero(self) -> None:
        with pytest.warns(UserWarning, match="ephemeral"):
            params = CreateSandboxFromSnapshotParams(ephemeral=True, auto_delete_interval=5)
        assert params.auto_delete_interval == 0

    def test_ephemeral_without_interval_does_not_warn(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            params = CreateSandboxFromImageParams(image="debian", ephemeral=True)
        assert params.auto_delete_interval == 0

    def test_non_ephemeral_keeps_interval(self) -> None:
        assert CreateSandboxFromSnapshotParams(auto_delete_interval=5).auto_delete_interval == 5

    @pytest.mark.parametrize("field", ["auto_stop_interval", "auto_archive_interval"])
    def test_negative_intervals_rejected(self, field: str) -> None:
        params = CreateSandboxFromSnapshotParams(**{field: -1})
        with pytest.raises(DaytonaValidationError, match=field):
            params.validate()

    def test_negative_auto_delete_allowed(self) -> None:
        CreateSandboxFromSnapshotParams(auto_delete_interval=-1).validate()


class TestSmallModels:
    def test_resources_drop_unset(self) -> None:
        assert Resources(cpu=2, memory=4).to_dict() == {"cpu": 2, "memory": 4}

    def test_volume_mount_to_dict(self) -> None:
        mount = VolumeMount(volume_id="v-1", mount_path="/data", subpath="a")
        assert mount.to_dict() == {"volumeId": "v-1", "mountPath": "/data", "subpath": "a"}

    def test_dockerfile_build_info(self) -> None:
        build = DockerfileBuild("FROM debian\nRUN true\n", context_hashes=("h1",))
        assert build.to_build_info() == {
            "dockerfileContent": "FROM debian\nRUN true\n",
            "contextHashes": ["h1"],
        }

    def test_code_language_normalize(self) -> None:
        assert CodeLanguage.normalize("TypeScript") is CodeLanguage.TYPESCRIPT
        assert CodeLanguage.normalize("cobol") is CodeLanguage.PYTHON
        assert CodeLanguage.normalize(None) is CodeLanguage.PYTHON

    def test_snapshot_info_mem_alias(self) -> None:
        info = SnapshotInfo.from_dict({"id": "s-1", "name": "py", "mem": 4, "state": "active"})
        assert info.memory == 4
        assert info.state == "active"

    def test_execute_response(self) -> None:
        response = ExecuteResponse.from_dict({"exitCode": 0, "result": "hi\n"})
        assert response.success
        assert response.artifacts.stdout == "hi\n"

    def test_execute_response_rejects_text(self) -> None:
        with pytest.raises(DaytonaInvalidResponseError):
            ExecuteResponse.from_dict("oops")


class TestPaginatedResult:
    """Normalization of flat and paginated listings."""

    def test_flat_array(self) -> None:
        result = PaginatedResult.from_response([{"n": 1}, {"n": 2}, {"n": 3}], dict)
        assert (result.total, result.page, result.total_pages) == (3, 1, 1)
        assert len(result) == 3
        assert not result.has_next_page

    def test_paginated_object_verbatim(self) -> None:
        response = {"items": [{"n": 1}], "total": 50, "page": 2, "totalPages": 5}
        result = PaginatedResult.from_response(response, dict)
        assert (result.total, result.page, result.total_pages) == (50, 2, 5)
        assert result.has_next_page
        assert not result.is_first_page
        assert list(result) == [{"n": 1}]

    def test_snake_case_total_pages(self) -> None:
        result = PaginatedResult.from_response({"items": [], "total_pages": 3}, dict)
        assert result.total_pages == 3
        assert result.total == 0

    def test_text_rejected(self) -> None:
        with pytest.raises(DaytonaInvalidResponseError):
            PaginatedResult.from_response("nope", dict)
