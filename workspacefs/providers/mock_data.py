"""Deterministic fallback data for the container backend.

Used when the target container does not exist or is not running, so the
file browser stays demoable without a live container.
"""

import posixpath
from datetime import datetime

from .base import DirectoryEntry, EntryType, sort_entries

# path -> [(name, type, size)]
MOCK_CONTAINER_TREE: dict[str, list[tuple[str, EntryType, int | None]]] = {
    "/": [
        ("home", EntryType.FOLDER, None),
        ("app", EntryType.FOLDER, None),
        ("var", EntryType.FOLDER, None),
        ("tmp", EntryType.FOLDER, None),
        ("etc", EntryType.FOLDER, None),
    ],
    "/home": [
        ("coder", EntryType.FOLDER, None),
    ],
    "/home/coder": [
        ("project", EntryType.FOLDER, None),
        (".bashrc", EntryType.FILE, 1024),
    ],
    "/app": [
        ("docker-compose.yml", EntryType.FILE, 2048),
        ("Dockerfile", EntryType.FILE, 512),
        ("src", EntryType.FOLDER, None),
    ],
}


class MockContainerData:
    """Fallback strategy answering container reads from a fixed table."""

    def __init__(
        self,
        container_name: str,
        tree: dict[str, list[tuple[str, EntryType, int | None]]] | None = None,
    ):
        self.container_name = container_name
        self.tree = tree if tree is not None else MOCK_CONTAINER_TREE

    def list_files(self, path: str) -> list[DirectoryEntry]:
        """Entries for ``path``; unknown paths give an empty listing."""
        now = datetime.now()
        entries = [
            DirectoryEntry(
                name=name,
                type=entry_type,
                path=posixpath.join(path, name),
                size=size,
                modified=now,
            )
            for name, entry_type, size in self.tree.get(path, [])
        ]
        return sort_entries(entries)

    def get_file_content(self, path: str) -> str:
        file_name = posixpath.basename(path)
        return (
            f"# Container File: {file_name}\n\n"
            "This is mock content from container file system.\n\n"
            f"Container: {self.container_name}\n"
            f"Path: {path}\n"
            f"Timestamp: {datetime.now().isoformat()}"
        )
