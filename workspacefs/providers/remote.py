"""
Remote file provider implementation.

A synthetic stand-in for a networked file system (SSH/FTP/WebDAV). It
answers from a fixed directory tree and generates file content from
per-extension templates. Every operation waits for an artificial delay
first, modeling network latency.
"""

import asyncio
import json
import logging
import posixpath
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from ..config import RemoteConfig
from ..core.exceptions import AccessDeniedError, AlreadyExistsError, NotAFileError, NotFoundError
from ..core.path_safety import normalize_path
from .base import (
    DirectoryEntry,
    EntryType,
    FileSystemProvider,
    OperationResult,
    logged_operation,
    sort_entries,
)

logger = logging.getLogger(__name__)

# path -> [(name, type, size)]
REMOTE_TREE: dict[str, list[tuple[str, EntryType, int | None]]] = {
    "/": [
        ("remote-config.yml", EntryType.FILE, 1024),
        ("data", EntryType.FOLDER, None),
        ("scripts", EntryType.FOLDER, None),
        ("logs", EntryType.FOLDER, None),
        ("README-remote.md", EntryType.FILE, 2048),
    ],
    "/data": [
        ("database.json", EntryType.FILE, 5120),
        ("exports", EntryType.FOLDER, None),
        ("cache", EntryType.FOLDER, None),
    ],
    "/scripts": [
        ("deploy.sh", EntryType.FILE, 1536),
        ("backup.js", EntryType.FILE, 2048),
        ("utils", EntryType.FOLDER, None),
    ],
    "/logs": [
        ("app.log", EntryType.FILE, 10240),
        ("error.log", EntryType.FILE, 2048),
        ("access.log", EntryType.FILE, 15360),
    ],
}


class ConnectionState(BaseModel):
    """Result of connect()/disconnect()."""

    connected: bool
    host: str
    port: int
    protocol: str
    timestamp: datetime = Field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def _markdown(name: str, path: str, now: datetime) -> str:
    return f"# Remote File: {name}\n\nThis is content from a remote file system.\n\nPath: {path}"


def _javascript(name: str, path: str, now: datetime) -> str:
    return (
        f"// Remote JavaScript file: {name}\n"
        f"// Path: {path}\n"
        "console.log('Hello from remote file system!');"
    )


def _shell(name: str, path: str, now: datetime) -> str:
    return (
        "#!/bin/sh\n"
        f"# Remote shell script: {name}\n"
        f"# Path: {path}\n"
        'echo "Hello from remote file system!"'
    )


def _python(name: str, path: str, now: datetime) -> str:
    return (
        f'"""Remote Python file: {name}\n\nPath: {path}\n"""\n\n'
        'print("Hello from remote file system!")'
    )


def _json(name: str, path: str, now: datetime) -> str:
    return json.dumps(
        {
            "name": name,
            "source": "remote",
            "path": path,
            "timestamp": now.isoformat(),
        },
        indent=2,
    )


def _yaml(name: str, path: str, now: datetime) -> str:
    return (
        f"# Remote YAML file: {name}\n"
        f"# Path: {path}\n"
        "version: '3.8'\n"
        "services:\n"
        "  app:\n"
        "    image: nginx:alpine\n"
        "    ports:\n"
        '      - "80:80"'
    )


def _generic(name: str, path: str, now: datetime) -> str:
    return f"Remote file content for: {name}\nPath: {path}\nSource: Remote File System"


CONTENT_TEMPLATES: dict[str, Callable[[str, str, datetime], str]] = {
    ".md": _markdown,
    ".js": _javascript,
    ".sh": _shell,
    ".py": _python,
    ".json": _json,
    ".yml": _yaml,
    ".yaml": _yaml,
}


def render_remote_content(path: str, now: datetime | None = None) -> str:
    """Generate file content for ``path`` from its extension's template."""
    name = posixpath.basename(path)
    ext = posixpath.splitext(name)[1].lower()
    template = CONTENT_TEMPLATES.get(ext, _generic)
    return template(name, path, now or datetime.now())


class RemoteProvider(FileSystemProvider):
    """
    Simulated remote implementation of FileSystemProvider.

    The tree is fixed: create and delete are validated against it and
    reported as successful, but never change it. connect()/disconnect()
    are available to callers but do not gate the other operations.
    """

    default_name = "remote"
    description = "Remote file system adapter (WebDAV/SSH/FTP)"
    source_tag = "remote"

    def __init__(
        self,
        config: RemoteConfig | None = None,
        tree: dict[str, list[tuple[str, EntryType, int | None]]] | None = None,
        name: str | None = None,
    ):
        super().__init__(name)
        self.config = config or RemoteConfig()
        self.tree = tree if tree is not None else REMOTE_TREE

    async def _delay(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)

    def _lookup(self, path: str) -> EntryType | None:
        """Type of the object at ``path`` in the fixed tree, or None."""
        if path in self.tree:
            return EntryType.FOLDER
        parent, name = posixpath.split(path)
        for child_name, child_type, _ in self.tree.get(parent, []):
            if child_name == name:
                return child_type
        return None

    def _entry(self, path: str, name: str, entry_type: EntryType, size: int | None, now: datetime) -> DirectoryEntry:
        return DirectoryEntry(
            name=name,
            type=entry_type,
            path=path,
            size=size if entry_type is EntryType.FILE else None,
            modified=now,
        )

    @logged_operation("list_files")
    async def list_files(self, path: str = "/") -> list[DirectoryEntry]:
        """List a folder of the simulated tree."""
        display = normalize_path(path)
        await self._delay(self.config.latency.listing)

        now = datetime.now()
        if display in self.tree:
            return sort_entries(
                self._entry(posixpath.join(display, name), name, entry_type, size, now)
                for name, entry_type, size in self.tree[display]
            )

        parent, name = posixpath.split(display)
        for child_name, child_type, size in self.tree.get(parent, []):
            if child_name == name:
                if child_type is EntryType.FOLDER:
                    # Leaf folders of the simulated tree are empty
                    return []
                return [self._entry(display, name, child_type, size, now)]

        raise NotFoundError(f"Path does not exist: {display}", path=display)

    @logged_operation("get_file_content")
    async def get_file_content(self, path: str) -> str:
        """Generate content for a remote file."""
        display = normalize_path(path)
        await self._delay(self.config.latency.read)

        if self._lookup(display) is EntryType.FOLDER:
            raise NotAFileError(f"Path is not a file: {display}", path=display)

        content = render_remote_content(display)
        self._check_file_size(len(content.encode("utf-8")), display)
        return content

    @logged_operation("create_item")
    async def create_item(self, path: str, kind: str = "file", content: str = "") -> OperationResult:
        """Pretend to create an item on the remote host."""
        entry_type = self._parse_kind(kind)
        display = normalize_path(path)
        await self._delay(self.config.latency.create)

        if self._lookup(display) is not None:
            raise AlreadyExistsError(f"Item already exists: {display}", path=display)

        return self._operation_result(display, "created", entry_type)

    @logged_operation("delete_item")
    async def delete_item(self, path: str) -> OperationResult:
        """Pretend to delete an item on the remote host."""
        display = normalize_path(path)
        await self._delay(self.config.latency.delete)

        if display == "/":
            raise AccessDeniedError("Access denied: cannot delete the remote root", path=display)
        if self._lookup(display) is None:
            raise NotFoundError(f"Item does not exist: {display}", path=display)

        return self._operation_result(display, "deleted")

    async def connect(self) -> ConnectionState:
        """Simulate establishing a session with the remote host."""
        logger.info(
            f"Connecting to remote system: {self.config.protocol}://{self.config.host}:{self.config.port}"
        )
        await self._delay(self.config.latency.connect)
        return ConnectionState(
            connected=True,
            host=self.config.host,
            port=self.config.port,
            protocol=self.config.protocol,
        )

    async def disconnect(self) -> ConnectionState:
        """Simulate closing the session."""
        logger.info(f"Disconnecting from remote system {self.config.host}")
        await self._delay(self.config.latency.disconnect)
        return ConnectionState(
            connected=False,
            host=self.config.host,
            port=self.config.port,
            protocol=self.config.protocol,
        )

    def __repr__(self) -> str:
        return f"RemoteProvider({self.config.protocol}://{self.config.username}@{self.config.host}:{self.config.port})"
