"""A Python client library for Daytona sandboxes."""

from daytona_client._client import Daytona
from daytona_client._config import DaytonaConfig, configure, reset_default_config
from daytona_client._env import load_dotenv
from daytona_client._filesystem import FileSystem
from daytona_client._interpreter import CodeInterpreter
from daytona_client._process import Process
from daytona_client._sandbox import Sandbox
from daytona_client._snapshots import SnapshotService
from daytona_client._types import (
    CodeLanguage,
    CreateSandboxFromImageParams,
    CreateSandboxFromSnapshotParams,
    CreateSandboxParams,
    DockerfileBuild,
    ExecuteResponse,
    FileInfo,
    PaginatedResult,
    Resources,
    SandboxInfo,
    SandboxState,
    SessionExecuteResponse,
    SnapshotInfo,
    Volume,
    VolumeMount,
)
from daytona_client._volumes import VolumeService
from daytona_client.exceptions import (
    DaytonaAuthenticationError,
    DaytonaConfigurationError,
    DaytonaConnectionError,
    DaytonaError,
    DaytonaInvalidResponseError,
    DaytonaNotFoundError,
    DaytonaRateLimitError,
    DaytonaTimeoutError,
    DaytonaValidationError,
    SandboxDestroyedError,
    SandboxError,
    SandboxFailedError,
    SandboxTimeoutError,
)

__all__ = [
    "CodeInterpreter",
    "CodeLanguage",
    "CreateSandboxFromImageParams",
    "CreateSandboxFromSnapshotParams",
    "CreateSandboxParams",
    "Daytona",
    "DaytonaAuthenticationError",
    "DaytonaConfig",
    "DaytonaConfigurationError",
    "DaytonaConnectionError",
    "DaytonaError",
    "DaytonaInvalidResponseError",
    "DaytonaNotFoundError",
    "DaytonaRateLimitError",
    "DaytonaTimeoutError",
    "DaytonaValidationError",
    "DockerfileBuild",
    "ExecuteResponse",
    "FileInfo",
    "FileSystem",
    "PaginatedResult",
    "Process",
    "Resources",
    "Sandbox",
    "SandboxDestroyedError",
    "SandboxError",
    "SandboxFailedError",
    "SandboxInfo",
    "SandboxState",
    "SandboxTimeoutError",
    "SessionExecuteResponse",
    "SnapshotInfo",
    "SnapshotService",
    "Volume",
    "VolumeMount",
    "VolumeService",
    "configure",
    "load_dotenv",
    "reset_default_config",
]
