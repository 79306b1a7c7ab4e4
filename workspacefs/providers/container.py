"""
Container file provider implementation.

This module serves the file system of one named, already running container
through the container runtime CLI (``docker exec``). Every command is built
as an argument vector; paths are passed as separate arguments and file
content travels over stdin, so nothing is ever interpreted by a host shell.
"""

import json
import logging
import posixpath
from typing import Any

from ..config import ContainerConfig
from ..constants import DEFAULT_CONTAINER_RUNTIME, DEFAULT_TARGET_CONTAINER
from ..core.exceptions import (
    AccessDeniedError,
    AlreadyExistsError,
    BackendUnavailableError,
    ExternalCommandFailedError,
    InvalidRequestError,
    NotAFileError,
    NotFoundError,
    ProcessInvocationError,
    ProviderError,
)
from ..core.listing_parser import DirectoryListingParser, ListingRecord
from ..core.path_safety import join_posix, normalize_path
from ..core.process import ProcessInvoker, ProcessResult
from .base import (
    DirectoryEntry,
    EntryType,
    FileSystemProvider,
    OperationResult,
    Permissions,
    logged_operation,
    sort_entries,
)
from .mock_data import MockContainerData

logger = logging.getLogger(__name__)

# Writes through a positional parameter; "set -C" makes the redirect fail
# instead of overwriting a file that appeared after the existence check.
_WRITE_SCRIPT = 'set -C && cat > "$1"'


class ContainerProvider(FileSystemProvider):
    """
    Container implementation of FileSystemProvider.

    All operations start with a liveness precheck. When the container does
    not exist or is not running, list/read answer from the fallback
    strategy (if one is configured) while create/delete raise
    BackendUnavailableError.
    """

    default_name = "container"
    description = "Container file system adapter (Docker exec)"
    source_tag = "container"

    def __init__(
        self,
        container_name: str = DEFAULT_TARGET_CONTAINER,
        runtime: str = DEFAULT_CONTAINER_RUNTIME,
        invoker: ProcessInvoker | None = None,
        fallback: MockContainerData | None = None,
        parser: DirectoryListingParser | None = None,
        name: str | None = None,
    ):
        """
        Initialize container file provider.

        Args:
            container_name: Name or id of the target container
            runtime: Container runtime executable
            invoker: Process invoker (default: no timeout)
            fallback: Mock data strategy for reads while the container is down;
                None disables the fallback
            parser: Listing parser (default policy if omitted)
            name: Registry name (default: "container")
        """
        super().__init__(name)
        self.container_name = container_name
        self.runtime = runtime
        self.invoker = invoker or ProcessInvoker()
        self.fallback = fallback
        self.parser = parser or DirectoryListingParser()

    @classmethod
    def from_config(cls, config: ContainerConfig, name: str | None = None) -> "ContainerProvider":
        """Build a provider from a ContainerConfig."""
        return cls(
            container_name=config.container_name,
            runtime=config.runtime,
            invoker=ProcessInvoker(timeout=config.command_timeout),
            fallback=MockContainerData(config.container_name) if config.mock_fallback else None,
            name=name,
        )

    # --- Command helpers ---

    def _exec(self, *args: str, interactive: bool = False, env: dict[str, str] | None = None) -> list[str]:
        command = [self.runtime, "exec"]
        if interactive:
            command.append("-i")
        for key, value in (env or {}).items():
            command.extend(["-e", f"{key}={value}"])
        command.append(self.container_name)
        command.extend(args)
        return command

    async def _run(self, command: list[str], path: str | None = None, input_data: bytes | None = None) -> ProcessResult:
        try:
            return await self.invoker.run(command, input_data=input_data)
        except ProcessInvocationError as e:
            raise BackendUnavailableError(
                f"Container runtime unavailable: {e}",
                path=path,
                backend=self.name,
                fallback_allowed=False,
            ) from e

    def _command_error(self, result: ProcessResult, path: str, action: str) -> ProviderError:
        """Classify a failed runtime command into a typed error."""
        stderr = result.stderr_text
        lowered = stderr.lower()

        if "no such container" in lowered or "is not running" in lowered:
            return BackendUnavailableError(
                f"Container {self.container_name} is not running or does not exist",
                path=path,
                backend=self.name,
            )
        if "no such file or directory" in lowered or "not a directory" in lowered:
            return NotFoundError(f"Path does not exist: {path}", path=path)
        if "is a directory" in lowered:
            return NotAFileError(f"Path is not a file: {path}", path=path)
        if "file exists" in lowered:
            return AlreadyExistsError(f"Item already exists: {path}", path=path)

        detail = stderr or f"exit status {result.returncode}"
        return ExternalCommandFailedError(
            f"Failed to {action} {path} in container {self.container_name}: {detail}",
            path=path,
            command=list(result.command),
            returncode=result.returncode,
            stderr=stderr,
        )

    def _container_path(self, path: str | None) -> str:
        return normalize_path(path)

    def _can_fall_back(self, error: BackendUnavailableError) -> bool:
        return self.fallback is not None and error.fallback_allowed

    # --- Liveness ---

    async def check_container(self) -> None:
        """
        Verify that the target container exists and is running.

        Raises:
            BackendUnavailableError: ``fallback_allowed`` is True when the
                container is missing or stopped, False when the runtime
                itself could not be queried
        """
        result = await self._run(
            [self.runtime, "inspect", "--format", "{{.State.Running}}", self.container_name]
        )

        if not result.ok:
            lowered = result.stderr_text.lower()
            missing = "no such object" in lowered or "no such container" in lowered
            raise BackendUnavailableError(
                f"Container check failed for {self.container_name}: "
                f"{result.stderr_text or f'exit status {result.returncode}'}",
                backend=self.name,
                fallback_allowed=missing,
            )

        if result.stdout_text.strip() != "true":
            raise BackendUnavailableError(
                f"Container {self.container_name} is not running",
                backend=self.name,
            )

    async def _exists(self, path: str) -> bool:
        result = await self._run(self._exec("test", "-e", path), path)
        if result.returncode == 0:
            return True
        if result.returncode == 1 and not result.stderr_text:
            return False
        raise self._command_error(result, path, "check")

    # --- Listing ---

    @staticmethod
    def _permissions_from_mode(mode: str) -> Permissions | None:
        if len(mode) < 4:
            return None
        return Permissions(
            readable=mode[1] == "r",
            writable=mode[2] == "w",
            executable=mode[3] in ("x", "s", "t"),
        )

    def _record_to_entry(self, record: ListingRecord, base_path: str) -> DirectoryEntry:
        if record.name.startswith("/"):
            # ls echoes a file operand as given, so this is a single-file listing
            entry_path = normalize_path(record.name)
            name = posixpath.basename(entry_path) or entry_path
        else:
            entry_path = join_posix(base_path, record.name)
            name = record.name

        return DirectoryEntry(
            name=name,
            type=EntryType.FOLDER if record.is_directory else EntryType.FILE,
            path=entry_path,
            size=None if record.is_directory else record.size,
            modified=record.modified,
            permissions=self._permissions_from_mode(record.mode),
            mode=record.mode,
        )

    def parse_listing(self, output: str, base_path: str = "/") -> list[DirectoryEntry]:
        """
        Turn ``ls -la`` output into sorted entries below ``base_path``.

        Malformed lines and the ``.``/``..`` entries are dropped.
        """
        return sort_entries(
            self._record_to_entry(record, base_path) for record in self.parser.parse(output)
        )

    async def _list_live(self, path: str) -> list[DirectoryEntry]:
        await self.check_container()
        result = await self._run(
            self._exec("ls", "-la", "--", path, env={"LC_ALL": "C"}), path
        )
        if not result.ok:
            raise self._command_error(result, path, "list")
        if result.stderr_text:
            logger.warning(f"{self.runtime} exec stderr while listing {path}: {result.stderr_text}")
        return self.parse_listing(result.stdout_text, path)

    @logged_operation("list_files")
    async def list_files(self, path: str = "/") -> list[DirectoryEntry]:
        """List a folder inside the container."""
        display = self._container_path(path)
        try:
            return await self._list_live(display)
        except BackendUnavailableError as e:
            if not self._can_fall_back(e):
                raise
            logger.info(f"Container {self.container_name} not available, using mock data for {display}")
            return self.fallback.list_files(display)

    # --- Reading ---

    async def _read_live(self, path: str) -> str:
        await self.check_container()
        # One byte past the limit is enough to detect an oversized file.
        limit = str(self.MAX_FILE_SIZE + 1)
        result = await self._run(self._exec("head", "-c", limit, "--", path), path)

        # Any diagnostic output counts as failure.
        if not result.ok or result.stderr_text:
            raise self._command_error(result, path, "read")

        self._check_file_size(len(result.stdout), path)
        return result.stdout.decode("utf-8", errors="replace")

    @logged_operation("get_file_content")
    async def get_file_content(self, path: str) -> str:
        """Read a file inside the container."""
        display = self._container_path(path)
        try:
            return await self._read_live(display)
        except BackendUnavailableError as e:
            if not self._can_fall_back(e):
                raise
            logger.info(f"Container {self.container_name} not available, using mock content for {display}")
            return self.fallback.get_file_content(display)

    # --- Writing ---

    def _check_result(self, result: ProcessResult, path: str, action: str) -> None:
        if not result.ok or result.stderr_text:
            raise self._command_error(result, path, action)

    def _check_parent(self, result: ProcessResult, path: str) -> None:
        """Check the ``mkdir -p`` of a parent folder.

        A file somewhere along the parent chain makes ``mkdir`` report
        "File exists" or "Not a directory"; that is about the parent, not
        about ``path`` itself.
        """
        if result.ok and not result.stderr_text:
            return
        lowered = result.stderr_text.lower()
        if "file exists" in lowered or "not a directory" in lowered:
            raise InvalidRequestError(f"Parent of {path} is not a folder", path=path)
        raise self._command_error(result, path, "create parent folder of")

    @logged_operation("create_item")
    async def create_item(self, path: str, kind: str = "file", content: str = "") -> OperationResult:
        """Create a file or folder inside the container."""
        entry_type = self._parse_kind(kind)
        display = self._container_path(path)
        if display == "/":
            raise AlreadyExistsError("Item already exists: /", path=display)

        await self.check_container()
        if await self._exists(display):
            raise AlreadyExistsError(f"Item already exists: {display}", path=display)

        parent = posixpath.dirname(display)
        if parent != "/":
            result = await self._run(self._exec("mkdir", "-p", "--", parent), display)
            self._check_parent(result, display)

        if entry_type is EntryType.FOLDER:
            result = await self._run(self._exec("mkdir", "--", display), display)
            self._check_result(result, display, "create folder")
        else:
            result = await self._run(
                self._exec("sh", "-c", _WRITE_SCRIPT, "sh", display, interactive=True),
                display,
                input_data=content.encode("utf-8"),
            )
            self._check_result(result, display, "write file")

        return self._operation_result(display, "created", entry_type)

    @logged_operation("delete_item")
    async def delete_item(self, path: str) -> OperationResult:
        """Recursively delete a path inside the container."""
        display = self._container_path(path)
        if display == "/":
            raise AccessDeniedError("Access denied: cannot delete the container root", path=display)

        await self.check_container()
        if not await self._exists(display):
            raise NotFoundError(f"Item does not exist: {display}", path=display)

        result = await self._run(self._exec("rm", "-rf", "--", display), display)
        self._check_result(result, display, "delete")

        return self._operation_result(display, "deleted")

    # --- Runtime information ---

    async def get_container_info(self) -> dict[str, Any]:
        """Return the runtime's full inspect document for the container."""
        result = await self._run(
            [self.runtime, "inspect", "--format", "{{json .}}", self.container_name]
        )
        if not result.ok:
            raise self._command_error(result, self.container_name, "inspect")
        try:
            return json.loads(result.stdout_text)
        except json.JSONDecodeError as e:
            raise ExternalCommandFailedError(
                f"Invalid inspect output for container {self.container_name}: {e}",
                command=list(result.command),
                returncode=result.returncode,
            ) from e

    async def list_running_containers(self) -> list[str]:
        """Names of all running containers known to the runtime."""
        result = await self._run([self.runtime, "ps", "--format", "{{.Names}}"])
        if not result.ok:
            raise self._command_error(result, "", "list containers")
        return [name.strip() for name in result.stdout_text.splitlines() if name.strip()]

    def __repr__(self) -> str:
        return f"ContainerProvider(container={self.container_name}, runtime={self.runtime})"
