"""Constants and default values for workspacefs.

This module centralizes limits, defaults and environment variable names
that are shared across the providers and the dispatch server.
"""

# =============================================================================
# Capabilities
# =============================================================================

CAPABILITY_READ = "read"
CAPABILITY_WRITE = "write"
CAPABILITY_DELETE = "delete"
CAPABILITY_CREATE = "create"

ALL_CAPABILITIES = frozenset(
    {CAPABILITY_READ, CAPABILITY_WRITE, CAPABILITY_DELETE, CAPABILITY_CREATE}
)


# =============================================================================
# File Size Limits
# =============================================================================

# Maximum file size returned by get_file_content (10MB)
MAX_FILE_SIZE = 10 * 1024 * 1024


# =============================================================================
# Listing Parser
# =============================================================================

# Long-format lines with fewer fields than this are dropped
LISTING_MIN_FIELDS = 9

# Number of fixed-width columns before the entry name
LISTING_FIXED_COLUMNS = 8


# =============================================================================
# Remote Backend Latency (seconds)
# =============================================================================

REMOTE_LIST_DELAY = 0.2
REMOTE_READ_DELAY = 0.3
REMOTE_CREATE_DELAY = 0.4
REMOTE_DELETE_DELAY = 0.3
REMOTE_CONNECT_DELAY = 0.5
REMOTE_DISCONNECT_DELAY = 0.1

REMOTE_PROTOCOLS = ("ssh", "ftp", "webdav")


# =============================================================================
# Environment Variables
# =============================================================================

ENV_WORKSPACE_ROOT = "WORKSPACE_ROOT"
ENV_TARGET_CONTAINER = "TARGET_CONTAINER"
ENV_CONTAINER_RUNTIME = "CONTAINER_RUNTIME"
ENV_CONTAINER_MOCK_FALLBACK = "CONTAINER_MOCK_FALLBACK"
ENV_CONTAINER_COMMAND_TIMEOUT = "CONTAINER_COMMAND_TIMEOUT"
ENV_REMOTE_HOST = "REMOTE_HOST"
ENV_REMOTE_PORT = "REMOTE_PORT"
ENV_REMOTE_USER = "REMOTE_USER"
ENV_REMOTE_PROTOCOL = "REMOTE_PROTOCOL"
ENV_SERVER_PORT = "WORKSPACEFS_PORT"
ENV_LOG_LEVEL = "WORKSPACEFS_LOG_LEVEL"
ENV_LOG_FILE = "WORKSPACEFS_LOG_FILE"

DEFAULT_WORKSPACE_ROOT = "/home/coder/project"
DEFAULT_TARGET_CONTAINER = "workspace"
DEFAULT_CONTAINER_RUNTIME = "docker"
DEFAULT_REMOTE_HOST = "localhost"
DEFAULT_REMOTE_PORT = 22
DEFAULT_REMOTE_USER = "user"
DEFAULT_REMOTE_PROTOCOL = "ssh"
DEFAULT_SERVER_PORT = 8000
