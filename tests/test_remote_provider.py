"""
Test cases for the simulated RemoteProvider.
"""

import json
import time

import pytest

from workspacefs.config import RemoteConfig, RemoteLatency
from workspacefs.core.exceptions import (
    AccessDeniedError,
    AlreadyExistsError,
    InvalidRequestError,
    NotAFileError,
    NotFoundError,
    PathTraversalError,
)
from workspacefs.providers import EntryType, RemoteProvider
from workspacefs.providers.remote import REMOTE_TREE, render_remote_content


@pytest.fixture
def provider(no_latency) -> RemoteProvider:
    return RemoteProvider(config=no_latency)


class TestRemoteListing:
    """Test list_files against the fixed tree."""

    @pytest.mark.asyncio
    async def test_root_sorted(self, provider):
        entries = await provider.list_files("/")

        assert [e.name for e in entries] == [
            "data",
            "logs",
            "scripts",
            "README-remote.md",
            "remote-config.yml",
        ]
        assert all(e.type == EntryType.FOLDER for e in entries[:3])
        assert entries[3].size == 2048

    @pytest.mark.asyncio
    async def test_entry_paths(self, provider):
        entries = await provider.list_files("/scripts")
        assert {e.path for e in entries} == {
            "/scripts/utils",
            "/scripts/deploy.sh",
            "/scripts/backup.js",
        }

    @pytest.mark.asyncio
    async def test_leaf_folder_is_empty(self, provider):
        assert await provider.list_files("/data/exports") == []

    @pytest.mark.asyncio
    async def test_list_file(self, provider):
        entries = await provider.list_files("/logs/app.log")

        assert len(entries) == 1
        assert entries[0].name == "app.log"
        assert entries[0].size == 10240

    @pytest.mark.asyncio
    async def test_list_unknown(self, provider):
        with pytest.raises(NotFoundError):
            await provider.list_files("/does/not/exist")

    @pytest.mark.asyncio
    async def test_list_traversal(self, provider):
        with pytest.raises(PathTraversalError):
            await provider.list_files("/data/../../etc")

    @pytest.mark.asyncio
    async def test_list_waits_for_latency(self):
        """Listing is delayed by at least the configured latency."""
        provider = RemoteProvider()

        started = time.monotonic()
        await provider.list_files("/")
        elapsed = time.monotonic() - started

        assert elapsed >= provider.config.latency.listing * 0.9


class TestRemoteRead:
    """Test get_file_content."""

    @pytest.mark.asyncio
    async def test_markdown(self, provider):
        content = await provider.get_file_content("/x.md")

        assert "/x.md" in content
        assert content.startswith("# Remote File: x.md")

    @pytest.mark.asyncio
    async def test_json_is_valid(self, provider):
        content = await provider.get_file_content("/data/database.json")
        data = json.loads(content)

        assert data["name"] == "database.json"
        assert data["path"] == "/data/database.json"
        assert data["source"] == "remote"

    @pytest.mark.asyncio
    async def test_shell_script(self, provider):
        content = await provider.get_file_content("/scripts/deploy.sh")
        assert content.startswith("#!/bin/sh")

    @pytest.mark.asyncio
    async def test_generic(self, provider):
        content = await provider.get_file_content("/logs/app.log")
        assert "Remote file content for: app.log" in content

    @pytest.mark.asyncio
    async def test_read_folder(self, provider):
        with pytest.raises(NotAFileError):
            await provider.get_file_content("/data")

    @pytest.mark.asyncio
    async def test_read_leaf_folder(self, provider):
        with pytest.raises(NotAFileError):
            await provider.get_file_content("/data/cache")

    def test_extension_case_insensitive(self):
        assert render_remote_content("/README.MD").startswith("# Remote File: README.MD")


class TestRemoteWrite:
    """Test create_item and delete_item."""

    @pytest.mark.asyncio
    async def test_create(self, provider):
        result = await provider.create_item("/new.txt", "file", "content")

        assert result.action == "created"
        assert result.source == "remote"
        assert result.type == EntryType.FILE

    @pytest.mark.asyncio
    async def test_create_does_not_change_tree(self, provider):
        before = [e.name for e in await provider.list_files("/")]
        await provider.create_item("/extra", "folder")
        after = [e.name for e in await provider.list_files("/")]

        assert before == after

    @pytest.mark.asyncio
    async def test_create_existing(self, provider):
        with pytest.raises(AlreadyExistsError):
            await provider.create_item("/logs/error.log", "file")
        with pytest.raises(AlreadyExistsError):
            await provider.create_item("/", "folder")

    @pytest.mark.asyncio
    async def test_create_unknown_kind(self, provider):
        with pytest.raises(InvalidRequestError):
            await provider.create_item("/x", "device")

    @pytest.mark.asyncio
    async def test_delete(self, provider):
        result = await provider.delete_item("/logs/access.log")

        assert result.action == "deleted"
        assert result.source == "remote"

    @pytest.mark.asyncio
    async def test_delete_unknown(self, provider):
        for _ in range(2):
            with pytest.raises(NotFoundError):
                await provider.delete_item("/ghost.txt")

    @pytest.mark.asyncio
    async def test_delete_root(self, provider):
        with pytest.raises(AccessDeniedError):
            await provider.delete_item("/")


class TestRemoteConnection:
    """Test connect and disconnect."""

    @pytest.mark.asyncio
    async def test_connect_disconnect(self, no_latency):
        provider = RemoteProvider(
            config=RemoteConfig(
                host="files.example.org",
                port=2222,
                protocol="webdav",
                latency=no_latency.latency,
            )
        )

        state = await provider.connect()
        assert state.connected is True
        assert state.host == "files.example.org"
        assert state.port == 2222
        assert state.protocol == "webdav"

        state = await provider.disconnect()
        assert state.connected is False

    @pytest.mark.asyncio
    async def test_connect_waits(self):
        provider = RemoteProvider(config=RemoteConfig(latency=RemoteLatency(connect=0.05)))

        started = time.monotonic()
        await provider.connect()
        assert time.monotonic() - started >= 0.045

    def test_custom_tree(self, no_latency):
        provider = RemoteProvider(config=no_latency, tree={"/": []})
        assert provider.tree is not REMOTE_TREE
        assert "RemoteProvider(ssh://user@localhost:22)" == repr(provider)
