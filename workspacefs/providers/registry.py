"""
Provider registry and factory.

The registry maps backend names to provider instances. It is built once at
process start from the configuration and passed by reference to whatever
dispatches requests; there is no module-level instance.
"""

import logging
from collections.abc import Iterator

from ..config import WorkspaceConfig
from ..core.exceptions import UnknownBackendError
from .base import FileSystemProvider, ProviderDescriptor
from .container import ContainerProvider
from .local import LocalProvider
from .remote import RemoteProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Name -> provider mapping used by the dispatch layer."""

    def __init__(self, providers: list[FileSystemProvider] | None = None) -> None:
        self._providers: dict[str, FileSystemProvider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: FileSystemProvider) -> None:
        """
        Add a provider under its descriptor name.

        Raises:
            ValueError: If the name is already taken
        """
        if provider.name in self._providers:
            raise ValueError(f"Backend '{provider.name}' is already registered")
        self._providers[provider.name] = provider
        logger.debug(f"Registered backend {provider.name}: {provider!r}")

    def get(self, name: str) -> FileSystemProvider:
        """
        Look up a provider.

        Raises:
            UnknownBackendError: If no provider has that name
        """
        try:
            return self._providers[name]
        except KeyError:
            raise UnknownBackendError(name, self.names()) from None

    def names(self) -> list[str]:
        return list(self._providers)

    def descriptors(self) -> list[ProviderDescriptor]:
        return [provider.descriptor for provider in self._providers.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __iter__(self) -> Iterator[FileSystemProvider]:
        return iter(self._providers.values())

    def __len__(self) -> int:
        return len(self._providers)

    def __repr__(self) -> str:
        return f"ProviderRegistry({', '.join(self._providers)})"


def create_local_provider(config: WorkspaceConfig) -> LocalProvider:
    return LocalProvider(root=config.local.root)


def create_container_provider(config: WorkspaceConfig) -> ContainerProvider:
    return ContainerProvider.from_config(config.container)


def create_remote_provider(config: WorkspaceConfig) -> RemoteProvider:
    return RemoteProvider(config=config.remote)


def build_registry(config: WorkspaceConfig | None = None) -> ProviderRegistry:
    """
    Build the registry with the local, remote and container backends.

    Args:
        config: Configuration to use (default: read from the environment)

    Returns:
        ProviderRegistry with all three backends
    """
    if config is None:
        config = WorkspaceConfig.from_env()

    registry = ProviderRegistry(
        [
            create_local_provider(config),
            create_remote_provider(config),
            create_container_provider(config),
        ]
    )
    logger.info(f"Available backends: {', '.join(registry.names())}")
    return registry
