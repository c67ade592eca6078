# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-client

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum
from typing import Any, ClassVar, Generic, Literal, TypeVar

from daytona_client.exceptions import DaytonaInvalidResponseError, DaytonaValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first non-None value among keys (camelCase and snake_case)."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return None


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class SandboxState(StrEnum):
    """Sandbox states reported by the service.

    The service may add states at any time. Unrecognized values parse to
    UNKNOWN, which is never terminal, so wait loops keep polling.
    """

    PENDING_BUILD = "pending_build"
    BUILDING = "building"
    STARTING = "starting"
    STARTED = "started"
    STOPPING = "stopping"
    STOPPED = "stopped"
    ARCHIVING = "archiving"
    ARCHIVED = "archived"
    DESTROYING = "destroying"
    DESTROYED = "destroyed"
    ERROR = "error"
    BUILD_FAILED = "build_failed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> SandboxState:
        """Convert a service state string to SandboxState."""
        if value is None:
            return cls.UNKNOWN
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.warning("Unknown sandbox state %r, treating as unknown", value)
            return cls.UNKNOWN

    @property
    def is_failure(self) -> bool:
        """True for error and build_failed."""
        return self in _FAILURE_STATES


_FAILURE_STATES = frozenset({SandboxState.ERROR, SandboxState.BUILD_FAILED})
BUILD_STATES = frozenset({SandboxState.PENDING_BUILD, SandboxState.BUILDING})
BUILD_RESOLVED_STATES = frozenset(
    {
        SandboxState.STARTED,
        SandboxState.STARTING,
        SandboxState.ERROR,
        SandboxState.BUILD_FAILED,
    }
)
STOPPED_STATES = frozenset({SandboxState.STOPPED, SandboxState.DESTROYED})


class CodeLanguage(StrEnum):
    """Languages supported by the sandbox code toolbox."""

    PYTHON = "python"
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"

    @classmethod
    def normalize(cls, language: str | None) -> CodeLanguage:
        """Lower-case a language name, falling back to python."""
        try:
            return cls(str(language).lower())
        except ValueError:
            return cls.PYTHON


@dataclass(frozen=True)
class Resources:
    """Resource limits for a sandbox built from an image.

    Attributes:
        cpu: Number of CPU cores
        memory: Memory in GiB
        disk: Disk in GiB
        gpu: Number of GPUs
    """

    cpu: int | None = None
    memory: int | None = None
    disk: int | None = None
    gpu: int | None = None

    def to_dict(self) -> dict[str, int]:
        return _compact(
            {"cpu": self.cpu, "memory": self.memory, "disk": self.disk, "gpu": self.gpu}
        )


@dataclass(frozen=True)
class VolumeMount:
    """A volume mounted into a sandbox."""

    volume_id: str
    mount_path: str
    subpath: str | None = None

    def to_dict(self) -> dict[str, str]:
        return _compact(
            {"volumeId": self.volume_id, "mountPath": self.mount_path, "subpath": self.subpath}
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VolumeMount:
        return cls(
            volume_id=_pick(data, "volumeId", "volume_id", default=""),
            mount_path=_pick(data, "mountPath", "mount_path", default=""),
            subpath=_pick(data, "subpath"),
        )


@dataclass(frozen=True)
class DockerfileBuild:
    """A prebuilt Dockerfile to build the sandbox image from.

    Dockerfile generation is up to the caller; the content is sent verbatim.
    """

    dockerfile_content: str
    context_hashes: tuple[str, ...] = ()

    def to_build_info(self) -> dict[str, Any]:
        info: dict[str, Any] = {"dockerfileContent": self.dockerfile_content}
        if self.context_hashes:
            info["contextHashes"] = list(self.context_hashes)
        return info


@dataclass(kw_only=True)
class CreateSandboxBaseParams:
    """Fields shared by every way of creating a sandbox.

    Interval fields are minutes. auto_stop_interval=0 disables auto-stop,
    auto_delete_interval<0 disables auto-delete and 0 deletes on stop.
    ephemeral=True forces auto_delete_interval=0.
    """

    kind: ClassVar[str]

    name: str | None = None
    language: str | None = None
    os_user: str | None = None
    env_vars: dict[str, str] | None = None
    labels: dict[str, str] | None = None
    public: bool | None = None
    auto_stop_interval: int | None = None
    auto_archive_interval: int | None = None
    auto_delete_interval: int | None = None
    volumes: list[VolumeMount] | None = None
    network_block_all: bool | None = None
    network_allow_list: str | None = None
    ephemeral: bool = False

    def __post_init__(self) -> None:
        if not self.ephemeral:
            return
        if self.auto_delete_interval not in (None, 0):
            warnings.warn(
                "'ephemeral' and 'auto_delete_interval' cannot be used together. "
                "auto_delete_interval will be set to 0.",
                UserWarning,
                stacklevel=3,
            )
        self.auto_delete_interval = 0

    def validate(self) -> None:
        """Reject negative auto-stop and auto-archive intervals.

        Raises:
            DaytonaValidationError: If an interval is negative
        """
        if self.auto_stop_interval is not None and self.auto_stop_interval < 0:
            raise DaytonaValidationError("auto_stop_interval must be a non-negative integer")
        if self.auto_archive_interval is not None and self.auto_archive_interval < 0:
            raise DaytonaValidationError("auto_archive_interval must be a non-negative integer")


@dataclass(kw_only=True)
class CreateSandboxFromSnapshotParams(CreateSandboxBaseParams):
    """Create a sandbox from a snapshot (the service default when snapshot is None)."""

    kind: ClassVar[Literal["snapshot"]] = "snapshot"

    snapshot: str | None = None


@dataclass(kw_only=True)
class CreateSandboxFromImageParams(CreateSandboxBaseParams):
    """Create a sandbox from an image reference or a Dockerfile build."""

    kind: ClassVar[Literal["image"]] = "image"

    image: str | DockerfileBuild
    resources: Resources | None = None


CreateSandboxParams = CreateSandboxFromSnapshotParams | CreateSandboxFromImageParams


@dataclass(frozen=True)
class SandboxInfo:
    """Attributes of a sandbox as last reported by the service.

    Instances are replaced wholesale on refresh, never merged.
    """

    id: str
    state: SandboxState = SandboxState.UNKNOWN
    raw_state: str | None = None
    name: str | None = None
    organization_id: str | None = None
    snapshot: str | None = None
    user: str | None = None
    target: str | None = None
    public: bool = False
    error_reason: str | None = None
    recoverable: bool = False
    cpu: int | None = None
    memory: int | None = None
    disk: int | None = None
    gpu: int | None = None
    labels: dict[str, str] = field(default_factory=dict)
    env: dict[str, str] = field(default_factory=dict)
    auto_stop_interval: int | None = None
    auto_archive_interval: int | None = None
    auto_delete_interval: int | None = None
    volumes: tuple[VolumeMount, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_api(cls, data: Any) -> SandboxInfo:
        """Build from a sandbox payload.

        Raises:
            DaytonaInvalidResponseError: If data is not a JSON object
        """
        if not isinstance(data, Mapping):
            raise DaytonaInvalidResponseError(
                f"Invalid sandbox data: expected object, got {type(data).__name__}: "
                f"{str(data)[:200]}"
            )

        raw_state = _pick(data, "state")
        return cls(
            id=str(_pick(data, "id", default="")),
            state=SandboxState.parse(raw_state),
            raw_state=raw_state,
            name=_pick(data, "name"),
            organization_id=_pick(data, "organizationId", "organization_id"),
            snapshot=_pick(data, "snapshot"),
            user=_pick(data, "user"),
            target=_pick(data, "target"),
            public=bool(_pick(data, "public", default=False)),
            error_reason=_pick(data, "errorReason", "error_reason"),
            recoverable=bool(_pick(data, "recoverable", default=False)),
            cpu=_pick(data, "cpu"),
            memory=_pick(data, "memory"),
            disk=_pick(data, "disk"),
            gpu=_pick(data, "gpu"),
            labels=dict(_pick(data, "labels", default={})),
            env=dict(_pick(data, "env", default={})),
            auto_stop_interval=_pick(data, "autoStopInterval", "auto_stop_interval"),
            auto_archive_interval=_pick(data, "autoArchiveInterval", "auto_archive_interval"),
            auto_delete_interval=_pick(data, "autoDeleteInterval", "auto_delete_interval"),
            volumes=tuple(
                VolumeMount.from_dict(v) for v in _pick(data, "volumes", default=[]) if v
            ),
            created_at=_parse_timestamp(_pick(data, "createdAt", "created_at")),
            updated_at=_parse_timestamp(_pick(data, "updatedAt", "updated_at")),
        )

    def with_state(self, state: SandboxState) -> SandboxInfo:
        """Copy with a locally determined state."""
        return replace(self, state=state, raw_state=state.value)


@dataclass
class PaginatedResult(Generic[T]):
    """One page of a listing."""

    items: list[T]
    total: int
    page: int
    total_pages: int

    @classmethod
    def from_response(cls, response: Any, parse: Callable[[Any], T]) -> PaginatedResult[T]:
        """Normalize a listing response.

        The service answers either with a bare array, treated as a single
        complete page, or with an object carrying items, total, page and
        totalPages.

        Raises:
            DaytonaInvalidResponseError: If the response is neither shape
        """
        if isinstance(response, list):
            items = [parse(item) for item in response]
            return cls(items=items, total=len(items), page=1, total_pages=1)

        if not isinstance(response, Mapping):
            raise DaytonaInvalidResponseError(
                f"Invalid list response: expected array or object, got {type(response).__name__}"
            )

        items = [parse(item) for item in _pick(response, "items", default=[])]
        return cls(
            items=items,
            total=int(_pick(response, "total", default=len(items))),
            page=int(_pick(response, "page", default=1)),
            total_pages=int(_pick(response, "totalPages", "total_pages", default=1)),
        )

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def is_first_page(self) -> bool:
        return self.page == 1

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class Volume:
    """Shared storage that can be mounted into sandboxes."""

    id: str
    name: str
    organization_id: str | None = None
    state: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_used_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Volume:
        return cls(
            id=str(_pick(data, "id", default="")),
            name=str(_pick(data, "name", default="")),
            organization_id=_pick(data, "organizationId", "organization_id"),
            state=_pick(data, "state"),
            created_at=_parse_timestamp(_pick(data, "createdAt", "created_at")),
            updated_at=_parse_timestamp(_pick(data, "updatedAt", "updated_at")),
            last_used_at=_parse_timestamp(_pick(data, "lastUsedAt", "last_used_at")),
        )


@dataclass(frozen=True)
class SnapshotInfo:
    """An image registered with the service that sandboxes can start from."""

    id: str
    name: str | None = None
    image_name: str | None = None
    state: str | None = None
    error_reason: str | None = None
    entrypoint: tuple[str, ...] = ()
    cpu: int | None = None
    memory: int | None = None
    disk: int | None = None
    gpu: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SnapshotInfo:
        return cls(
            id=str(_pick(data, "id", default="")),
            name=_pick(data, "name"),
            image_name=_pick(data, "imageName", "image_name"),
            state=_pick(data, "state"),
            error_reason=_pick(data, "errorReason", "error_reason"),
            entrypoint=tuple(_pick(data, "entrypoint", default=())),
            cpu=_pick(data, "cpu"),
            memory=_pick(data, "mem", "memory"),
            disk=_pick(data, "disk"),
            gpu=_pick(data, "gpu"),
            created_at=_parse_timestamp(_pick(data, "createdAt", "created_at")),
            updated_at=_parse_timestamp(_pick(data, "updatedAt", "updated_at")),
        )


@dataclass(frozen=True)
class FileInfo:
    """A file or directory entry inside a sandbox."""

    name: str
    is_dir: bool = False
    size: int = 0
    mode: str | None = None
    permissions: str | None = None
    owner: str | None = None
    group: str | None = None
    mod_time: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FileInfo:
        return cls(
            name=str(_pick(data, "name", default="")),
            is_dir=bool(_pick(data, "isDir", "is_dir", default=False)),
            size=int(_pick(data, "size", default=0)),
            mode=_pick(data, "mode"),
            permissions=_pick(data, "permissions"),
            owner=_pick(data, "owner"),
            group=_pick(data, "group"),
            mod_time=_pick(data, "modTime", "mod_time"),
        )


@dataclass(frozen=True)
class ExecutionArtifacts:
    """Structured output captured from a code run."""

    stdout: str = ""
    charts: tuple[dict[str, Any], ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ExecutionArtifacts:
        if not data:
            return cls()
        return cls(
            stdout=_pick(data, "stdout", default=""),
            charts=tuple(_pick(data, "charts", default=())),
        )


@dataclass(frozen=True)
class ExecuteResponse:
    """Result of a command or code run inside a sandbox.

    Attributes:
        exit_code: Exit code of the command
        result: Combined output
        artifacts: Parsed stdout and chart data
    """

    exit_code: int
    result: str
    artifacts: ExecutionArtifacts = field(default_factory=ExecutionArtifacts)

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @classmethod
    def from_dict(cls, data: Any) -> ExecuteResponse:
        if not isinstance(data, Mapping):
            raise DaytonaInvalidResponseError(
                f"Invalid execute response: expected object, got {type(data).__name__}"
            )
        result = _pick(data, "result", default="")
        artifacts = _pick(data, "artifacts")
        return cls(
            exit_code=int(_pick(data, "exitCode", "exit_code", default=0)),
            result=result,
            artifacts=(
                ExecutionArtifacts.from_dict(artifacts)
                if artifacts
                else ExecutionArtifacts(stdout=result)
            ),
        )


@dataclass(frozen=True)
class SessionExecuteResponse:
    """Result of a command run in a background session."""

    cmd_id: str | None
    output: str | None = None
    exit_code: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SessionExecuteResponse:
        return cls(
            cmd_id=_pick(data, "cmdId", "cmd_id"),
            output=_pick(data, "output"),
            exit_code=_pick(data, "exitCode", "exit_code"),
        )
