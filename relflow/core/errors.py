"""Exit codes for the relflow CLI.

The release tool reports every failure with the same nonzero status: the
operator reads the printed explanation, there is no machine-readable error
channel.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes. Values are stable."""

    OK = 0
    USER_ERROR = 1
