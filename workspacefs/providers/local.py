"""
Local file provider implementation.

This module serves a sandboxed directory on the local disk. Every caller
path is resolved under the configured root; anything that would land
outside it is refused before any I/O happens.
"""

import asyncio
import logging
import os
import shutil
import stat
from datetime import datetime
from pathlib import Path

from ..core.exceptions import (
    AccessDeniedError,
    AlreadyExistsError,
    InvalidRequestError,
    NotAFileError,
    NotFoundError,
    ProviderError,
)
from ..core.path_safety import join_posix, normalize_path, resolve_under_root
from .base import (
    DirectoryEntry,
    EntryType,
    FileSystemProvider,
    OperationResult,
    Permissions,
    logged_operation,
    sort_entries,
)

logger = logging.getLogger(__name__)


class LocalProvider(FileSystemProvider):
    """
    Local file system implementation of FileSystemProvider.

    Security features:
    - Lexical rejection of '..' segments
    - Resolved-path prefix check against the root (catches symlinks)
    - File size limit checked from stat before reading
    """

    default_name = "local"
    description = "Local file system adapter"

    def __init__(self, root: str | Path, name: str | None = None):
        """
        Initialize local file provider.

        Args:
            root: Directory all caller paths are resolved under
            name: Registry name (default: "local")
        """
        super().__init__(name)
        self.root = Path(root).expanduser().resolve()

    def get_safe_path(self, path: str | None) -> tuple[str, Path]:
        """
        Map a caller path onto the host file system.

        Returns:
            Tuple of (normalized caller path, absolute host path)

        Raises:
            PathTraversalError: If the path contains '..'
            AccessDeniedError: If the path resolves outside the root
        """
        display = normalize_path(path)
        return display, resolve_under_root(self.root, display)

    async def _stat(self, target: Path, display: str) -> os.stat_result:
        try:
            return await asyncio.to_thread(target.stat)
        except (FileNotFoundError, NotADirectoryError):
            raise NotFoundError(f"Path does not exist: {display}", path=display) from None
        except OSError as e:
            raise ProviderError(f"Cannot access {display}: {e}", path=display) from e

    @staticmethod
    def _permissions(target: Path, stat_result: os.stat_result) -> Permissions:
        is_dir = stat.S_ISDIR(stat_result.st_mode)
        return Permissions(
            readable=os.access(target, os.R_OK),
            writable=os.access(target, os.W_OK),
            executable=True if is_dir else bool(stat_result.st_mode & 0o111),
        )

    def _entry(self, name: str, display: str, target: Path, stat_result: os.stat_result) -> DirectoryEntry:
        is_dir = stat.S_ISDIR(stat_result.st_mode)
        return DirectoryEntry(
            name=name,
            type=EntryType.FOLDER if is_dir else EntryType.FILE,
            path=display,
            size=None if is_dir else stat_result.st_size,
            modified=datetime.fromtimestamp(stat_result.st_mtime),
            permissions=self._permissions(target, stat_result),
        )

    async def _child_entry(self, directory: Path, display_dir: str, name: str) -> DirectoryEntry | None:
        """Build the entry for one child, or None if it vanished or can't be read."""
        target = directory / name

        def _load() -> DirectoryEntry:
            return self._entry(name, join_posix(display_dir, name), target, target.stat())

        try:
            return await asyncio.to_thread(_load)
        except OSError as e:
            logger.warning(f"Error reading item {name} in {display_dir}: {e}")
            return None

    @logged_operation("list_files")
    async def list_files(self, path: str = "/") -> list[DirectoryEntry]:
        """List a directory under the root, or describe a single file."""
        display, target = self.get_safe_path(path)
        stat_result = await self._stat(target, display)

        if not stat.S_ISDIR(stat_result.st_mode):
            name = target.name or display.rsplit("/", 1)[-1]
            entry = await asyncio.to_thread(self._entry, name, display, target, stat_result)
            return [entry]

        try:
            names = await asyncio.to_thread(os.listdir, target)
        except OSError as e:
            raise ProviderError(f"Cannot list directory {display}: {e}", path=display) from e

        results = await asyncio.gather(
            *(self._child_entry(target, display, name) for name in names)
        )
        return sort_entries(entry for entry in results if entry is not None)

    @logged_operation("get_file_content")
    async def get_file_content(self, path: str) -> str:
        """Read a text file under the root."""
        display, target = self.get_safe_path(path)
        stat_result = await self._stat(target, display)

        if not stat.S_ISREG(stat_result.st_mode):
            raise NotAFileError(f"Path is not a file: {display}", path=display)

        self._check_file_size(stat_result.st_size, display)

        def _read() -> bytes:
            # Bounded read so a file growing after stat still can't exceed the cap.
            with open(target, "rb") as f:
                return f.read(self.MAX_FILE_SIZE + 1)

        try:
            data = await asyncio.to_thread(_read)
        except FileNotFoundError:
            raise NotFoundError(f"File does not exist: {display}", path=display) from None
        except OSError as e:
            raise ProviderError(f"Cannot read file {display}: {e}", path=display) from e

        self._check_file_size(len(data), display)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProviderError(f"Failed to decode file {display} as UTF-8: {e}", path=display) from e

    @logged_operation("create_item")
    async def create_item(self, path: str, kind: str = "file", content: str = "") -> OperationResult:
        """Create a file or folder, making missing parent folders."""
        entry_type = self._parse_kind(kind)
        display, target = self.get_safe_path(path)
        if display == "/":
            raise AlreadyExistsError("Item already exists: /", path=display)

        def _create() -> None:
            if target.exists() or target.is_symlink():
                raise AlreadyExistsError(f"Item already exists: {display}", path=display)

            try:
                target.parent.mkdir(parents=True, exist_ok=True)
            except (FileExistsError, NotADirectoryError):
                raise InvalidRequestError(
                    f"Parent of {display} is not a folder", path=display
                ) from None

            try:
                if entry_type is EntryType.FOLDER:
                    target.mkdir()
                else:
                    # "x" refuses to clobber a file created concurrently.
                    with open(target, "x", encoding="utf-8", newline="") as f:
                        f.write(content)
            except FileExistsError:
                raise AlreadyExistsError(f"Item already exists: {display}", path=display) from None

        try:
            await asyncio.to_thread(_create)
        except OSError as e:
            raise ProviderError(f"Failed to create {entry_type.value} {display}: {e}", path=display) from e

        return self._operation_result(display, "created", entry_type)

    @logged_operation("delete_item")
    async def delete_item(self, path: str) -> OperationResult:
        """Delete a file, or a folder and everything below it."""
        display, target = self.get_safe_path(path)
        if display == "/":
            raise AccessDeniedError("Access denied: cannot delete the workspace root", path=display)

        def _delete() -> None:
            if not target.exists() and not target.is_symlink():
                raise NotFoundError(f"Item does not exist: {display}", path=display)
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()

        try:
            await asyncio.to_thread(_delete)
        except FileNotFoundError:
            raise NotFoundError(f"Item does not exist: {display}", path=display) from None
        except OSError as e:
            raise ProviderError(f"Failed to delete {display}: {e}", path=display) from e

        return self._operation_result(display, "deleted")

    def __repr__(self) -> str:
        return f"LocalProvider(root={self.root})"
