import asyncio
import logging
import sys
from datetime import datetime
from typing import Annotated, Any

from fastmcp import FastMCP
from pydantic import Field

from .config import WorkspaceConfig
from .core.exceptions import ConfigurationError, WorkspaceFSError
from .logging_config import configure_logging
from .providers.registry import ProviderRegistry, build_registry

logger = logging.getLogger("workspacefs")

SERVER_NAME = "workspacefs-mcp"


def _timestamp() -> str:
    return datetime.now().isoformat()


def _error_payload(summary: str, error: WorkspaceFSError, backend: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "error": summary,
        "kind": error.kind,
        "message": str(error),
        "timestamp": _timestamp(),
    }
    path = getattr(error, "path", None)
    if path is not None:
        payload["path"] = path
    available = getattr(error, "available", None)
    if available is not None:
        payload["availableBackends"] = available
    if backend is not None:
        payload["backend"] = backend
    return payload


class WorkspaceTools:
    """Request handlers over a ProviderRegistry.

    Each handler returns a JSON-able dict. Provider failures become error
    payloads carrying the failure ``kind``; nothing is retried.
    """

    def __init__(self, registry: ProviderRegistry):
        self.registry = registry

    async def health(self) -> dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": _timestamp(),
            "backends": self.registry.names(),
        }

    async def list_backends(self) -> dict[str, Any]:
        return {
            "backends": [descriptor.to_dict() for descriptor in self.registry.descriptors()],
            "timestamp": _timestamp(),
        }

    async def switch_backend(self, backend: str) -> dict[str, Any]:
        try:
            self.registry.get(backend)
        except WorkspaceFSError as e:
            return _error_payload("Invalid backend type", e)
        return {
            "success": True,
            "backend": backend,
            "message": f"Switched to {backend} backend",
            "timestamp": _timestamp(),
        }

    async def list_files(self, path: str = "/", backend: str = "local") -> dict[str, Any]:
        try:
            entries = await self.registry.get(backend).list_files(path)
        except WorkspaceFSError as e:
            return _error_payload("Failed to list files", e, backend)
        return {
            "files": [entry.to_dict() for entry in entries],
            "path": path,
            "backend": backend,
            "timestamp": _timestamp(),
        }

    async def get_file_content(self, path: str, backend: str = "local") -> dict[str, Any]:
        try:
            content = await self.registry.get(backend).get_file_content(path)
        except WorkspaceFSError as e:
            return _error_payload("Failed to get file content", e, backend)
        return {
            "content": content,
            "path": path,
            "backend": backend,
            "timestamp": _timestamp(),
        }

    async def create_item(
        self, path: str, type: str = "file", content: str = "", backend: str = "local"
    ) -> dict[str, Any]:
        try:
            result = await self.registry.get(backend).create_item(path, type, content)
        except WorkspaceFSError as e:
            return _error_payload("Failed to create file/folder", e, backend)
        return {
            "success": True,
            "result": result.to_dict(),
            "backend": backend,
            "timestamp": _timestamp(),
        }

    async def delete_item(self, path: str, backend: str = "local") -> dict[str, Any]:
        try:
            result = await self.registry.get(backend).delete_item(path)
        except WorkspaceFSError as e:
            return _error_payload("Failed to delete file/folder", e, backend)
        return {
            "success": True,
            "result": result.to_dict(),
            "backend": backend,
            "timestamp": _timestamp(),
        }


BackendName = Annotated[str, Field(description="Backend to use (see list_backends)")]


def create_server(registry: ProviderRegistry) -> FastMCP:
    """Create the MCP server exposing ``registry`` as tools."""
    mcp: FastMCP = FastMCP(SERVER_NAME)
    tools = WorkspaceTools(registry)

    @mcp.tool
    async def health() -> dict[str, Any]:
        """Report server status and the registered backends."""
        return await tools.health()

    @mcp.tool
    async def list_backends() -> dict[str, Any]:
        """List backends with their description and capabilities."""
        return await tools.list_backends()

    @mcp.tool
    async def switch_backend(backend: BackendName) -> dict[str, Any]:
        """Validate a backend name so a client can switch to it."""
        return await tools.switch_backend(backend)

    @mcp.tool
    async def list_files(
        path: Annotated[str, Field(description="Folder to list, '/' is the backend root")] = "/",
        backend: BackendName = "local",
    ) -> dict[str, Any]:
        """List a folder (folders first, then files, alphabetically)."""
        return await tools.list_files(path, backend)

    @mcp.tool
    async def get_file_content(
        path: Annotated[str, Field(description="File to read")],
        backend: BackendName = "local",
    ) -> dict[str, Any]:
        """Read a text file (max 10MB)."""
        return await tools.get_file_content(path, backend)

    @mcp.tool
    async def create_item(
        path: Annotated[str, Field(description="Path of the new item")],
        type: Annotated[str, Field(description="'file' or 'folder'")] = "file",
        content: Annotated[str, Field(description="Initial file content")] = "",
        backend: BackendName = "local",
    ) -> dict[str, Any]:
        """Create a file or folder; missing parent folders are created."""
        return await tools.create_item(path, type, content, backend)

    @mcp.tool
    async def delete_item(
        path: Annotated[str, Field(description="Path to delete (recursive)")],
        backend: BackendName = "local",
    ) -> dict[str, Any]:
        """Delete a file or a folder with everything below it."""
        return await tools.delete_item(path, backend)

    return mcp


def main() -> None:
    """Run the MCP server with HTTP streaming transport."""
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(name)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        config = WorkspaceConfig.from_env()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    configure_logging(
        log_file=config.server.log_file,
        log_level=config.server.log_level,
    )
    registry = build_registry(config)
    mcp = create_server(registry)

    print(f"workspacefs MCP server on port {config.server.port}", file=sys.stderr)
    print(f"Available backends: {', '.join(registry.names())}", file=sys.stderr)
    print(f"Local root: {config.local.root}", file=sys.stderr)
    print(f"Target container: {config.container.container_name}", file=sys.stderr)

    try:
        asyncio.run(mcp.run_http_async(transport="streamable-http", host="0.0.0.0", port=config.server.port))
    except KeyboardInterrupt:
        print("\nShutting down...", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    main()
