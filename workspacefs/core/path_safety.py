"""Path normalization and sandboxing helpers.

Caller paths are always posix-style and backend-relative ("/docs/a.md").
``resolve_under_root`` maps them onto a host directory with two independent
checks: a lexical one on the normalized segments and a prefix check on the
resolved absolute path.
"""

import posixpath
from pathlib import Path

from .exceptions import AccessDeniedError, InvalidRequestError, PathTraversalError


def normalize_path(path: str | None) -> str:
    """Normalize a caller path to an absolute posix path.

    Collapses ``.`` and empty segments and converts backslashes. Any ``..``
    segment that remains is rejected rather than clamped.

    Args:
        path: Caller-supplied path (``None`` or empty means ``/``)

    Returns:
        Normalized path starting with ``/``

    Raises:
        InvalidRequestError: If the path contains a NUL byte
        PathTraversalError: If a ``..`` segment is present
    """
    if not path:
        return "/"
    if "\x00" in path:
        raise InvalidRequestError("Invalid path: NUL byte not allowed", path=path)

    raw = path.replace("\\", "/")
    segments = [seg for seg in raw.split("/") if seg not in ("", ".")]
    if ".." in segments:
        raise PathTraversalError(
            "Invalid path: directory traversal not allowed", path=path
        )
    return "/" + "/".join(segments)


def relative_parts(path: str | None) -> list[str]:
    """Return the normalized segments of ``path`` without the leading slash."""
    normalized = normalize_path(path)
    return [seg for seg in normalized.split("/") if seg]


def join_posix(base: str, name: str) -> str:
    """Join a listing base path and an entry name.

    Always yields an absolute posix path, also when ``base`` is ``/``.
    """
    joined = posixpath.join(base or "/", name)
    if not joined.startswith("/"):
        joined = "/" + joined
    return posixpath.normpath(joined) if joined != "/" else joined


def is_within(root: Path, candidate: Path) -> bool:
    """Check that ``candidate`` is ``root`` or lies below it."""
    try:
        candidate.relative_to(root)
    except ValueError:
        return False
    return True


def resolve_under_root(root: Path, path: str | None) -> Path:
    """Resolve a caller path to an absolute host path inside ``root``.

    Args:
        root: Absolute, already resolved sandbox root
        path: Caller-supplied path

    Returns:
        Absolute host path

    Raises:
        PathTraversalError: If the path contains ``..`` after normalization
        AccessDeniedError: If the joined path resolves outside ``root``
    """
    parts = relative_parts(path)
    joined = root.joinpath(*parts)

    # Follows symlinks, so a link pointing outside the root is caught here.
    resolved = joined.resolve()
    if not is_within(root, resolved):
        raise AccessDeniedError("Access denied: path outside workspace", path=path)
    return joined
