"""
Base file system provider interface and data models.

This module defines the FileSystemProvider contract shared by the local,
container and remote backends, together with the entry and result models
every backend returns.
"""

import functools
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime
from enum import Enum
from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..constants import ALL_CAPABILITIES, MAX_FILE_SIZE
from ..core.exceptions import InvalidRequestError, ProviderError, TooLargeError
from ..logging_config import get_operation_logger

logger = logging.getLogger(__name__)


class EntryType(str, Enum):
    """Kinds of entries a listing can contain."""
    FILE = "file"
    FOLDER = "folder"


class Permissions(BaseModel):
    """Best-effort capability triple; not a security boundary."""

    model_config = ConfigDict(frozen=True)

    readable: bool = True
    writable: bool = True
    executable: bool = False


class DirectoryEntry(BaseModel):
    """One file system object as seen by a caller."""

    name: str
    type: EntryType
    path: str
    size: int | None = None
    modified: datetime | None = None
    permissions: Permissions | None = None
    mode: str | None = None

    @property
    def is_folder(self) -> bool:
        return self.type is EntryType.FOLDER

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class ProviderDescriptor(BaseModel):
    """Static metadata describing one backend."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    capabilities: frozenset[str] = Field(default_factory=lambda: ALL_CAPABILITIES)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "capabilities": sorted(self.capabilities),
        }


class OperationResult(BaseModel):
    """Outcome of a create or delete call."""

    path: str
    action: Literal["created", "deleted"]
    type: EntryType | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


_T = TypeVar("_T")


def logged_operation(operation: str) -> Callable[[Callable[..., Awaitable[_T]]], Callable[..., Awaitable[_T]]]:
    """Log every call of a provider operation on the operations logger.

    The first positional argument (or the ``path`` keyword) is recorded as
    the path. Errors are logged and re-raised unchanged.
    """

    def decorator(func: Callable[..., Awaitable[_T]]) -> Callable[..., Awaitable[_T]]:
        @functools.wraps(func)
        async def wrapper(self: "FileSystemProvider", *args: Any, **kwargs: Any) -> _T:
            path = args[0] if args else kwargs.get("path", "/")
            started = time.monotonic()
            try:
                result = await func(self, *args, **kwargs)
            except Exception as e:
                self._log_operation(operation, str(path), started, e)
                raise
            self._log_operation(operation, str(path), started)
            return result

        return wrapper

    return decorator


def sort_entries(entries: Iterable[DirectoryEntry]) -> list[DirectoryEntry]:
    """Order entries: folders first, then files, each case-insensitively by name."""
    return sorted(
        entries,
        key=lambda entry: (not entry.is_folder, entry.name.casefold(), entry.name),
    )


class FileSystemProvider(ABC):
    """
    Abstract interface for a file browsing/editing backend.

    Every backend exposes the same four operations with the same failure
    kinds, whatever its transport. Backend specifics (mock data, latency,
    command construction) stay inside the implementation.

    Paths are caller-visible, backend-relative posix strings that start
    with ``/``.
    """

    MAX_FILE_SIZE = MAX_FILE_SIZE

    # Overridden by implementations
    default_name: str = "provider"
    description: str = "File system provider"
    capabilities: frozenset[str] = ALL_CAPABILITIES

    # Set for backends whose results should be tagged with their origin
    source_tag: str | None = None

    def __init__(self, name: str | None = None):
        self._descriptor = ProviderDescriptor(
            name=name or self.default_name,
            description=self.description,
            capabilities=frozenset(self.capabilities),
        )

    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def descriptor(self) -> ProviderDescriptor:
        return self._descriptor

    @abstractmethod
    async def list_files(self, path: str = "/") -> list[DirectoryEntry]:
        """
        List the entries at ``path``.

        Args:
            path: Folder (or file) to list, default ``/``

        Returns:
            Sorted entries; a single entry if ``path`` is a file

        Raises:
            NotFoundError: If nothing exists at ``path``
            AccessDeniedError: If ``path`` escapes the backend root
        """

    @abstractmethod
    async def get_file_content(self, path: str) -> str:
        """
        Read a whole file as text.

        Raises:
            NotFoundError: If the file doesn't exist
            NotAFileError: If ``path`` is a folder
            TooLargeError: If the content exceeds MAX_FILE_SIZE
            AccessDeniedError: If ``path`` escapes the backend root
        """

    @abstractmethod
    async def create_item(
        self,
        path: str,
        kind: str = "file",
        content: str = "",
    ) -> OperationResult:
        """
        Create a file or folder, creating missing parents.

        Args:
            path: Target path
            kind: "file" or "folder"
            content: Initial file content (ignored for folders)

        Raises:
            AlreadyExistsError: If something already occupies ``path``
            AccessDeniedError: If ``path`` escapes the backend root
        """

    @abstractmethod
    async def delete_item(self, path: str) -> OperationResult:
        """
        Delete a file or a folder with all of its descendants.

        Raises:
            NotFoundError: If nothing exists at ``path``
            AccessDeniedError: If ``path`` escapes the backend root
        """

    def _parse_kind(self, kind: str) -> EntryType:
        try:
            return EntryType(kind)
        except ValueError:
            raise InvalidRequestError(
                f"Unknown item type '{kind}' (expected 'file' or 'folder')"
            ) from None

    def _check_file_size(self, size: int, path: str | None = None, max_size: int | None = None) -> None:
        """
        Check if file size is within limits.

        Raises:
            TooLargeError: If file is too large
        """
        limit = max_size or self.MAX_FILE_SIZE
        if size > limit:
            raise TooLargeError(
                f"File too large to read ({size} bytes, max {limit} bytes)",
                path=path,
                size=size,
                limit=limit,
            )

    def _operation_result(
        self,
        path: str,
        action: Literal["created", "deleted"],
        entry_type: EntryType | None = None,
    ) -> OperationResult:
        return OperationResult(
            path=path,
            action=action,
            type=entry_type,
            source=self.source_tag,
        )

    def _log_operation(
        self,
        operation: str,
        path: str,
        started: float,
        error: Exception | None = None,
    ) -> None:
        """Emit one structured record on the operations logger."""
        extra: dict[str, Any] = {
            "event": "provider_operation",
            "backend": self.name,
            "operation": operation,
            "path": path,
            "duration_ms": round((time.monotonic() - started) * 1000, 1),
        }
        if error is None:
            get_operation_logger().info(f"{self.name}.{operation} {path}", extra=extra)
            return

        extra["kind"] = getattr(error, "kind", type(error).__name__)
        extra["error"] = str(error)
        level = logging.WARNING if isinstance(error, ProviderError) else logging.ERROR
        get_operation_logger().log(level, f"{self.name}.{operation} {path} failed", extra=extra)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name})"
