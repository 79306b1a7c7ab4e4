"""
Test cases for LocalProvider.

All tests run against a temporary directory used as the workspace root.
"""

import logging
from pathlib import Path

import pytest

from workspacefs.core.exceptions import (
    AccessDeniedError,
    AlreadyExistsError,
    InvalidRequestError,
    NotAFileError,
    NotFoundError,
    PathTraversalError,
    ProviderError,
    TooLargeError,
)
from workspacefs.providers import EntryType, LocalProvider


@pytest.fixture
def root(tmp_path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def provider(root) -> LocalProvider:
    return LocalProvider(root=root)


class TestLocalProviderListing:
    """Test list_files."""

    @pytest.mark.asyncio
    async def test_sort_order(self, provider, root):
        """Folders come first, each group sorted case-insensitively."""
        (root / "b.txt").write_text("b")
        (root / "A").mkdir()
        (root / "a.txt").write_text("a")
        (root / "B").mkdir()

        entries = await provider.list_files("/")

        assert [(e.name, e.type) for e in entries] == [
            ("A", EntryType.FOLDER),
            ("B", EntryType.FOLDER),
            ("a.txt", EntryType.FILE),
            ("b.txt", EntryType.FILE),
        ]

    @pytest.mark.asyncio
    async def test_default_path_is_root(self, provider, root):
        (root / "readme.md").write_text("hi")

        entries = await provider.list_files()
        assert [e.path for e in entries] == ["/readme.md"]

    @pytest.mark.asyncio
    async def test_entry_fields(self, provider, root):
        (root / "docs").mkdir()
        (root / "docs" / "notes.md").write_text("12345")

        entries = await provider.list_files("/docs")

        assert len(entries) == 1
        entry = entries[0]
        assert entry.name == "notes.md"
        assert entry.path == "/docs/notes.md"
        assert entry.size == 5
        assert entry.modified is not None
        assert entry.permissions is not None
        assert entry.permissions.readable is True

    @pytest.mark.asyncio
    async def test_folder_has_no_size(self, provider, root):
        (root / "sub").mkdir()

        entries = await provider.list_files("/")
        assert entries[0].size is None
        assert entries[0].permissions.executable is True

    @pytest.mark.asyncio
    async def test_list_single_file(self, provider, root):
        (root / "one.txt").write_text("x")

        entries = await provider.list_files("/one.txt")

        assert len(entries) == 1
        assert entries[0].name == "one.txt"
        assert entries[0].type == EntryType.FILE

    @pytest.mark.asyncio
    async def test_list_missing(self, provider):
        with pytest.raises(NotFoundError):
            await provider.list_files("/nope")

    @pytest.mark.asyncio
    async def test_list_traversal(self, provider):
        with pytest.raises(PathTraversalError):
            await provider.list_files("/../")

    @pytest.mark.asyncio
    async def test_list_through_escaping_symlink(self, provider, root, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (root / "link").symlink_to(outside, target_is_directory=True)

        with pytest.raises(AccessDeniedError):
            await provider.list_files("/link")

    @pytest.mark.asyncio
    async def test_unreadable_entry_skipped(self, provider, root, caplog):
        """An entry that cannot be stat'ed is dropped with a warning."""
        (root / "ok.txt").write_text("x")
        (root / "dangling").symlink_to(root / "gone")

        with caplog.at_level(logging.WARNING, logger="workspacefs.providers.local"):
            entries = await provider.list_files("/")

        assert [e.name for e in entries] == ["ok.txt"]
        assert any("dangling" in r.getMessage() for r in caplog.records)


class TestLocalProviderRead:
    """Test get_file_content."""

    @pytest.mark.asyncio
    async def test_read(self, provider, root):
        (root / "a.md").write_text("# Title\n", encoding="utf-8")
        assert await provider.get_file_content("/a.md") == "# Title\n"

    @pytest.mark.asyncio
    async def test_read_missing(self, provider):
        with pytest.raises(NotFoundError):
            await provider.get_file_content("/missing.txt")

    @pytest.mark.asyncio
    async def test_read_folder(self, provider, root):
        (root / "dir").mkdir()
        with pytest.raises(NotAFileError):
            await provider.get_file_content("/dir")

    @pytest.mark.asyncio
    async def test_read_too_large(self, provider, root):
        provider.MAX_FILE_SIZE = 8
        (root / "big.txt").write_text("0123456789")

        with pytest.raises(TooLargeError) as exc_info:
            await provider.get_file_content("/big.txt")
        assert exc_info.value.size == 10
        assert exc_info.value.limit == 8

    @pytest.mark.asyncio
    async def test_read_at_limit(self, provider, root):
        provider.MAX_FILE_SIZE = 10
        (root / "edge.txt").write_text("0123456789")

        assert await provider.get_file_content("/edge.txt") == "0123456789"

    @pytest.mark.asyncio
    async def test_read_binary(self, provider, root):
        (root / "blob.bin").write_bytes(b"\xff\xfe\x00\x80")

        with pytest.raises(ProviderError):
            await provider.get_file_content("/blob.bin")


class TestLocalProviderCreate:
    """Test create_item."""

    @pytest.mark.asyncio
    async def test_round_trip(self, provider):
        result = await provider.create_item("/hello.txt", "file", "hello")

        assert result.action == "created"
        assert result.type == EntryType.FILE
        assert result.path == "/hello.txt"
        assert await provider.get_file_content("/hello.txt") == "hello"

    @pytest.mark.asyncio
    async def test_creates_missing_parents(self, provider, root):
        await provider.create_item("/a/b/c.txt", "file", "deep")
        assert (root / "a" / "b" / "c.txt").read_text() == "deep"

    @pytest.mark.asyncio
    async def test_create_folder(self, provider, root):
        result = await provider.create_item("/new/folder", "folder")

        assert result.type == EntryType.FOLDER
        assert (root / "new" / "folder").is_dir()

    @pytest.mark.asyncio
    async def test_create_existing_does_not_modify(self, provider, root):
        (root / "keep.txt").write_text("original")

        with pytest.raises(AlreadyExistsError):
            await provider.create_item("/keep.txt", "file", "replacement")

        assert await provider.get_file_content("/keep.txt") == "original"

    @pytest.mark.asyncio
    async def test_create_folder_over_file(self, provider, root):
        (root / "taken").write_text("x")

        with pytest.raises(AlreadyExistsError):
            await provider.create_item("/taken", "folder")
        assert (root / "taken").is_file()

    @pytest.mark.asyncio
    async def test_create_root(self, provider):
        with pytest.raises(AlreadyExistsError):
            await provider.create_item("/", "folder")

    @pytest.mark.asyncio
    async def test_create_under_file(self, provider, root):
        (root / "f.txt").write_text("x")

        with pytest.raises(InvalidRequestError):
            await provider.create_item("/f.txt/child.txt", "file", "y")

    @pytest.mark.asyncio
    async def test_create_unknown_kind(self, provider, root):
        with pytest.raises(InvalidRequestError):
            await provider.create_item("/x", "symlink")
        assert not (root / "x").exists()

    @pytest.mark.asyncio
    async def test_create_traversal(self, provider, tmp_path):
        with pytest.raises(PathTraversalError):
            await provider.create_item("/../escaped.txt", "file", "nope")
        assert not (tmp_path / "escaped.txt").exists()


class TestLocalProviderDelete:
    """Test delete_item."""

    @pytest.mark.asyncio
    async def test_delete_file(self, provider, root):
        (root / "gone.txt").write_text("x")

        result = await provider.delete_item("/gone.txt")

        assert result.action == "deleted"
        assert not (root / "gone.txt").exists()

    @pytest.mark.asyncio
    async def test_delete_folder_recursive(self, provider, root):
        (root / "tree" / "sub").mkdir(parents=True)
        (root / "tree" / "sub" / "leaf.txt").write_text("x")

        await provider.delete_item("/tree")
        assert not (root / "tree").exists()

    @pytest.mark.asyncio
    async def test_delete_missing_repeatedly(self, provider):
        """Deleting a missing path fails the same way every time."""
        for _ in range(2):
            with pytest.raises(NotFoundError):
                await provider.delete_item("/never-there")

    @pytest.mark.asyncio
    async def test_delete_twice(self, provider, root):
        (root / "once.txt").write_text("x")

        await provider.delete_item("/once.txt")
        with pytest.raises(NotFoundError):
            await provider.delete_item("/once.txt")

    @pytest.mark.asyncio
    async def test_delete_root_refused(self, provider, root):
        (root / "stays.txt").write_text("x")

        with pytest.raises(AccessDeniedError):
            await provider.delete_item("/")
        assert (root / "stays.txt").exists()

    @pytest.mark.asyncio
    async def test_delete_symlink_removes_link_only(self, provider, root, tmp_path):
        (root / "target").mkdir()
        (root / "target" / "data.txt").write_text("x")
        (root / "alias").symlink_to(root / "target", target_is_directory=True)

        await provider.delete_item("/alias")

        assert not (root / "alias").exists()
        assert (root / "target" / "data.txt").exists()


class TestLocalProviderSafePath:
    """Test get_safe_path."""

    def test_returns_display_and_host_path(self, provider, root):
        display, target = provider.get_safe_path("docs//a.md")

        assert display == "/docs/a.md"
        assert target == root.resolve() / "docs" / "a.md"

    def test_repr(self, provider, root):
        assert repr(provider) == f"LocalProvider(root={root.resolve()})"
        assert provider.name == "local"
