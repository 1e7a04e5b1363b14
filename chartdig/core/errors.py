"""Error codes for CLI exit status.

This module provides a simple enum of error codes that map to shell exit codes.
Every command ends with one of these, so scripts wrapping chartdig can tell a
bad flag apart from an unreachable cluster or a corrupt release.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable.
    - 0: Success
    - 1: User error (bad input, invalid arguments, invalid config)
    - 2: Environment error (kubectl missing)
    - 3: Decode error (corrupt payload, malformed release document)
    - 4: Network error (cluster unreachable, authentication failed)
    - 5: I/O error (directory creation or file write failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    DECODE_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")
