"""Test helpers shared by the container and process tests."""

from workspacefs.core.process import ProcessResult

SAMPLE_LISTING = (
    "total 4\n"
    "-rw-r--r-- 1 user user 1024 Jan 01 12:00 file.txt\n"
    "drwxr-xr-x 2 user user 4096 Jan 01 12:00 folder\n"
)


def make_result(command, returncode=0, stdout=b"", stderr=b""):
    """Build a ProcessResult as the invoker would return it."""
    return ProcessResult(
        command=tuple(command),
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )
