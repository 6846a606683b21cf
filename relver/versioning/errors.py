from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ErrorKind = Literal[
    "git_failed",
    "manifest_missing",
    "manifest_invalid",
    "manifest_write_failed",
    "invalid_version",
    "policy_mismatch",
    "constraint_violation",
]


@dataclass(frozen=True, slots=True)
class VersioningError:
    """Error payload shared by all versioning services.

    The CLI renders ``message`` and ``hint``; ``kind`` lets tests and callers
    tell failures apart without parsing text.
    """

    kind: ErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
