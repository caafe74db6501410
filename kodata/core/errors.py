"""Error codes for CLI exit status.

Stable process exit codes used by every kodata command:
- 0: Success
- 1: User error (bad flags, bad config, unalignable releases)
- 4: Network error (release listing or asset download failed)
- 5: I/O error (bundle could not be written)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    USER_ERROR = 1
    NETWORK_ERROR = 4
    IO_ERROR = 5
