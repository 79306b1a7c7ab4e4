"""
File system providers for workspacefs.

This package provides the FileSystemProvider contract and its local,
container and remote implementations, plus the registry that maps backend
names to provider instances.
"""

from .base import (
    DirectoryEntry,
    EntryType,
    FileSystemProvider,
    OperationResult,
    Permissions,
    ProviderDescriptor,
    sort_entries,
)
from .container import ContainerProvider
from .local import LocalProvider
from .mock_data import MockContainerData
from .registry import ProviderRegistry, build_registry
from .remote import ConnectionState, RemoteProvider

__all__ = [
    "ConnectionState",
    "ContainerProvider",
    "DirectoryEntry",
    "EntryType",
    "FileSystemProvider",
    "LocalProvider",
    "MockContainerData",
    "OperationResult",
    "Permissions",
    "ProviderDescriptor",
    "ProviderRegistry",
    "RemoteProvider",
    "build_registry",
    "sort_entries",
]
