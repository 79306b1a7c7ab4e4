"""Core utilities: errors, path safety, process invocation and listing parsing."""

from .exceptions import (
    AccessDeniedError,
    AlreadyExistsError,
    BackendUnavailableError,
    ConfigurationError,
    ExternalCommandFailedError,
    InvalidRequestError,
    NotAFileError,
    NotFoundError,
    PathTraversalError,
    ProcessInvocationError,
    ProcessTimeoutError,
    ProviderError,
    TooLargeError,
    UnknownBackendError,
    WorkspaceFSError,
)
from .listing_parser import DirectoryListingParser, ListingPolicy, ListingRecord
from .path_safety import join_posix, normalize_path, resolve_under_root
from .process import ProcessInvoker, ProcessResult

__all__ = [
    "AccessDeniedError",
    "AlreadyExistsError",
    "BackendUnavailableError",
    "ConfigurationError",
    "DirectoryListingParser",
    "ExternalCommandFailedError",
    "InvalidRequestError",
    "ListingPolicy",
    "ListingRecord",
    "NotAFileError",
    "NotFoundError",
    "PathTraversalError",
    "ProcessInvocationError",
    "ProcessInvoker",
    "ProcessResult",
    "ProcessTimeoutError",
    "ProviderError",
    "TooLargeError",
    "UnknownBackendError",
    "WorkspaceFSError",
    "join_posix",
    "normalize_path",
    "resolve_under_root",
]
