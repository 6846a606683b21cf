"""Process exit codes for relver commands."""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    CI pipelines only distinguish success from failure, so every fatal
    condition (policy mismatch, constraint violation, usage error, unreadable
    manifest) shares exit code 1. Graceful no-ops exit 0.
    """

    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        return self.name.lower()
