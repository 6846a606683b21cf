from __future__ import annotations

import re
from dataclasses import dataclass

from relver.core.result import Err, Ok, Result
from relver.versioning.errors import VersioningError
from relver.versioning.model import BumpKind

_VERSION_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


@dataclass(frozen=True, slots=True, order=True)
class Version:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def bump(self, kind: BumpKind) -> "Version":
        match kind:
            case "minor":
                return Version(self.major, self.minor + 1, 0)
            case "patch":
                return Version(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")


def parse_version(text: str) -> Result[Version, VersioningError]:
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return Err(
            VersioningError(
                kind="invalid_version",
                message=f"invalid version: {text!r}",
                hint="Expected MAJOR.MINOR.PATCH",
            )
        )
    return Ok(Version(int(m.group(1)), int(m.group(2)), int(m.group(3))))
