"""workspacefs - one file browsing contract over local, container and remote backends."""

__version__ = "0.1.0"

from .config import WorkspaceConfig
from .core.exceptions import (
    AccessDeniedError,
    AlreadyExistsError,
    BackendUnavailableError,
    ExternalCommandFailedError,
    NotAFileError,
    NotFoundError,
    PathTraversalError,
    ProviderError,
    TooLargeError,
    WorkspaceFSError,
)
from .providers import (
    ContainerProvider,
    DirectoryEntry,
    EntryType,
    FileSystemProvider,
    LocalProvider,
    ProviderRegistry,
    RemoteProvider,
    build_registry,
)

__all__ = [
    "AccessDeniedError",
    "AlreadyExistsError",
    "BackendUnavailableError",
    "ContainerProvider",
    "DirectoryEntry",
    "EntryType",
    "ExternalCommandFailedError",
    "FileSystemProvider",
    "LocalProvider",
    "NotAFileError",
    "NotFoundError",
    "PathTraversalError",
    "ProviderError",
    "ProviderRegistry",
    "RemoteProvider",
    "TooLargeError",
    "WorkspaceConfig",
    "WorkspaceFSError",
    "build_registry",
]
