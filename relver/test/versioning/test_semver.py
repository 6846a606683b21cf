from __future__ import annotations

from relver.core.result import Err, Ok
from relver.versioning.semver import Version, parse_version


def test_parse_version() -> None:
    assert parse_version("15.2.5") == Ok(Version(15, 2, 5))
    assert parse_version(" 0.0.1\n") == Ok(Version(0, 0, 1))


def test_parse_version_rejects_other_shapes() -> None:
    for text in ("15.2", "v15.2.5", "15.2.5-beta.1", "01.2.3", "a.b.c", ""):
        result = parse_version(text)
        assert isinstance(result, Err), text
        assert result.error.kind == "invalid_version"


def test_str_and_ordering() -> None:
    assert str(Version(15, 3, 0)) == "15.3.0"
    assert Version(15, 2, 9) < Version(15, 3, 0)


def test_bump() -> None:
    assert Version(15, 2, 5).bump("minor") == Version(15, 3, 0)
    assert Version(15, 2, 5).bump("patch") == Version(15, 2, 6)
