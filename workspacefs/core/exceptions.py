"""Custom exception hierarchy for workspacefs.

Every provider failure is classifiable into one of the kinds below, so the
dispatch layer can translate it without parsing messages. Each class carries
a stable ``kind`` string for that purpose.
"""


class WorkspaceFSError(Exception):
    """Base exception for all workspacefs errors."""

    kind = "error"


# =============================================================================
# Provider Errors
# =============================================================================

class ProviderError(WorkspaceFSError):
    """Base exception for file system provider errors.

    Args:
        message: Human readable description
        path: Caller-visible path the operation was about, if any
    """

    kind = "provider_error"

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class NotFoundError(ProviderError):
    """Nothing exists at the requested path."""

    kind = "not_found"


class NotAFileError(ProviderError):
    """The requested path is a folder where a file was expected."""

    kind = "not_a_file"


class AlreadyExistsError(ProviderError):
    """An object already occupies the requested path."""

    kind = "already_exists"


class TooLargeError(ProviderError):
    """File content exceeds the read ceiling."""

    kind = "too_large"

    def __init__(self, message: str, path: str | None = None, size: int | None = None, limit: int | None = None):
        super().__init__(message, path)
        self.size = size
        self.limit = limit


class AccessDeniedError(ProviderError):
    """Path resolves outside the backend's root."""

    kind = "access_denied"


class PathTraversalError(AccessDeniedError):
    """A '..' segment survived path normalization."""

    kind = "path_traversal"


class InvalidRequestError(ProviderError):
    """Malformed input (unknown item kind, NUL byte in a path, ...)."""

    kind = "invalid_request"


class ExternalCommandFailedError(ProviderError):
    """An invoked external command reported failure."""

    kind = "external_command_failed"

    def __init__(
        self,
        message: str,
        path: str | None = None,
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message, path)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr


class ProcessTimeoutError(ExternalCommandFailedError):
    """An external command exceeded its timeout and was killed."""

    kind = "external_command_failed"


class BackendUnavailableError(ProviderError):
    """Liveness precheck failed.

    ``fallback_allowed`` is True when the backend is simply absent or not
    running, which read operations may answer from mock data. It is False
    when the precheck itself could not be carried out.
    """

    kind = "backend_unavailable"

    def __init__(
        self,
        message: str,
        path: str | None = None,
        backend: str | None = None,
        fallback_allowed: bool = True,
    ):
        super().__init__(message, path)
        self.backend = backend
        self.fallback_allowed = fallback_allowed


# =============================================================================
# Process Errors
# =============================================================================

class ProcessInvocationError(WorkspaceFSError):
    """The external program could not be started at all."""

    kind = "process_invocation"


# =============================================================================
# Configuration / Dispatch Errors
# =============================================================================

class ConfigurationError(WorkspaceFSError):
    """Configuration is missing or malformed."""

    kind = "configuration"


class UnknownBackendError(WorkspaceFSError):
    """Requested backend name is not registered."""

    kind = "unknown_backend"

    def __init__(self, name: str, available: list[str]):
        super().__init__(
            f"Unknown backend '{name}'. Available backends: {', '.join(available)}"
        )
        self.name = name
        self.available = available
