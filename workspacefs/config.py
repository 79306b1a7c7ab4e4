"""Configuration models for workspacefs.

Configuration is read once from the process environment at startup and is
immutable afterwards (all models are frozen).
"""

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    DEFAULT_CONTAINER_RUNTIME,
    DEFAULT_REMOTE_HOST,
    DEFAULT_REMOTE_PORT,
    DEFAULT_REMOTE_PROTOCOL,
    DEFAULT_REMOTE_USER,
    DEFAULT_SERVER_PORT,
    DEFAULT_TARGET_CONTAINER,
    DEFAULT_WORKSPACE_ROOT,
    ENV_CONTAINER_COMMAND_TIMEOUT,
    ENV_CONTAINER_MOCK_FALLBACK,
    ENV_CONTAINER_RUNTIME,
    ENV_LOG_FILE,
    ENV_LOG_LEVEL,
    ENV_REMOTE_HOST,
    ENV_REMOTE_PORT,
    ENV_REMOTE_PROTOCOL,
    ENV_REMOTE_USER,
    ENV_SERVER_PORT,
    ENV_TARGET_CONTAINER,
    ENV_WORKSPACE_ROOT,
    REMOTE_CONNECT_DELAY,
    REMOTE_CREATE_DELAY,
    REMOTE_DELETE_DELAY,
    REMOTE_DISCONNECT_DELAY,
    REMOTE_LIST_DELAY,
    REMOTE_PROTOCOLS,
    REMOTE_READ_DELAY,
)
from .core.exceptions import ConfigurationError

_TRUE_VALUES = ("true", "1", "yes", "on")


class LocalConfig(BaseModel):
    """Local disk backend configuration."""

    model_config = ConfigDict(frozen=True)

    root: Path = Field(
        default=Path(DEFAULT_WORKSPACE_ROOT),
        description="Directory all local paths are resolved under",
    )


class ContainerConfig(BaseModel):
    """Container backend configuration."""

    model_config = ConfigDict(frozen=True)

    container_name: str = Field(
        default=DEFAULT_TARGET_CONTAINER, description="Name of the target container"
    )
    runtime: str = Field(
        default=DEFAULT_CONTAINER_RUNTIME, description="Container runtime executable"
    )
    mock_fallback: bool = Field(
        default=True,
        description="Answer reads from mock data when the container is not running",
    )
    command_timeout: float | None = Field(
        default=None, description="Timeout for runtime commands in seconds (None: no timeout)"
    )

    @field_validator("container_name", "runtime")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        if value.startswith("-"):
            raise ValueError("must not start with '-'")
        return value


class RemoteLatency(BaseModel):
    """Artificial per-operation delays of the remote backend, in seconds."""

    model_config = ConfigDict(frozen=True)

    listing: float = REMOTE_LIST_DELAY
    read: float = REMOTE_READ_DELAY
    create: float = REMOTE_CREATE_DELAY
    delete: float = REMOTE_DELETE_DELAY
    connect: float = REMOTE_CONNECT_DELAY
    disconnect: float = REMOTE_DISCONNECT_DELAY


class RemoteConfig(BaseModel):
    """Remote backend connection parameters (display only)."""

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_REMOTE_HOST
    port: int = Field(default=DEFAULT_REMOTE_PORT, ge=1, le=65535)
    username: str = DEFAULT_REMOTE_USER
    protocol: str = DEFAULT_REMOTE_PROTOCOL
    latency: RemoteLatency = Field(default_factory=RemoteLatency)

    @field_validator("protocol")
    @classmethod
    def _known_protocol(cls, value: str) -> str:
        value = value.lower()
        if value not in REMOTE_PROTOCOLS:
            raise ValueError(f"protocol must be one of {', '.join(REMOTE_PROTOCOLS)}")
        return value


class ServerConfig(BaseModel):
    """Dispatch server and logging settings."""

    model_config = ConfigDict(frozen=True)

    port: int = Field(default=DEFAULT_SERVER_PORT, ge=1, le=65535)
    log_level: str = "INFO"
    log_file: str | None = None


class WorkspaceConfig(BaseModel):
    """Complete configuration of all backends."""

    model_config = ConfigDict(frozen=True)

    local: LocalConfig = Field(default_factory=LocalConfig)
    container: ContainerConfig = Field(default_factory=ContainerConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "WorkspaceConfig":
        """Build the configuration from environment variables.

        Args:
            environ: Mapping to read from (default: ``os.environ``)

        Raises:
            ConfigurationError: If a value is malformed
        """
        env = os.environ if environ is None else environ

        timeout = env.get(ENV_CONTAINER_COMMAND_TIMEOUT)
        try:
            return cls(
                local=LocalConfig(root=Path(env.get(ENV_WORKSPACE_ROOT, DEFAULT_WORKSPACE_ROOT))),
                container=ContainerConfig(
                    container_name=env.get(ENV_TARGET_CONTAINER, DEFAULT_TARGET_CONTAINER),
                    runtime=env.get(ENV_CONTAINER_RUNTIME, DEFAULT_CONTAINER_RUNTIME),
                    mock_fallback=env.get(ENV_CONTAINER_MOCK_FALLBACK, "true").lower() in _TRUE_VALUES,
                    command_timeout=float(timeout) if timeout else None,
                ),
                remote=RemoteConfig(
                    host=env.get(ENV_REMOTE_HOST, DEFAULT_REMOTE_HOST),
                    port=int(env.get(ENV_REMOTE_PORT, DEFAULT_REMOTE_PORT)),
                    username=env.get(ENV_REMOTE_USER, DEFAULT_REMOTE_USER),
                    protocol=env.get(ENV_REMOTE_PROTOCOL, DEFAULT_REMOTE_PROTOCOL),
                ),
                server=ServerConfig(
                    port=int(env.get(ENV_SERVER_PORT, DEFAULT_SERVER_PORT)),
                    log_level=env.get(ENV_LOG_LEVEL, "INFO"),
                    log_file=env.get(ENV_LOG_FILE) or None,
                ),
            )
        except (ValidationError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
