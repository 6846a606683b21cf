"""Package manifest (package.json style) reading and version writing."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from relver.core.project import Project
from relver.core.result import Err, Ok, Result
from relver.core.structured import StrDict, as_str_dict, get_str
from relver.platform.files import atomic_write_text
from relver.versioning.errors import VersioningError
from relver.versioning.semver import Version, parse_version


@dataclass(frozen=True, slots=True)
class RawManifest:
    """A manifest whose version string has not been parsed yet."""

    path: Path
    name: str
    version: str


@dataclass(frozen=True, slots=True)
class Manifest:
    path: Path
    name: str
    version: Version


@dataclass(frozen=True, slots=True)
class ManifestUpdate:
    path: Path
    name: str
    changed: bool


def read_raw_manifest(path: Path) -> Result[RawManifest, VersioningError]:
    data = _load_json(path)
    if isinstance(data, Err):
        return data

    raw_version = get_str(data.value, "version")
    if raw_version is None:
        return Err(
            VersioningError(
                kind="manifest_invalid",
                message=f"missing version in {path.name}",
                hint=str(path),
            )
        )
    name = get_str(data.value, "name") or ""
    return Ok(RawManifest(path=path, name=name, version=raw_version))


def read_manifest(path: Path) -> Result[Manifest, VersioningError]:
    raw = read_raw_manifest(path)
    if isinstance(raw, Err):
        return raw

    version = parse_version(raw.value.version)
    if isinstance(version, Err):
        return Err(
            VersioningError(
                kind="invalid_version",
                message=f"{path.name}: {version.error.message}",
                hint=version.error.hint,
            )
        )
    return Ok(Manifest(path=path, name=raw.value.name, version=version.value))


def write_version(path: Path, version: Version) -> Result[ManifestUpdate, VersioningError]:
    """Set ``version`` in one manifest, keeping every other key in place.

    The file is rewritten with 2-space indentation and a trailing newline,
    and only when the version actually differs.
    """
    data = _load_json(path)
    if isinstance(data, Err):
        return data

    obj = data.value
    name = get_str(obj, "name") or ""
    if get_str(obj, "version") == str(version):
        return Ok(ManifestUpdate(path=path, name=name, changed=False))

    obj["version"] = str(version)
    try:
        atomic_write_text(path, json.dumps(obj, indent=2, ensure_ascii=False) + "\n")
    except OSError as e:
        return Err(
            VersioningError(
                kind="manifest_write_failed",
                message=f"failed to write {path.name}: {e}",
                hint=str(path),
            )
        )
    return Ok(ManifestUpdate(path=path, name=name, changed=True))


def apply_version(
    *, project: Project, version: Version
) -> Result[list[ManifestUpdate], VersioningError]:
    """Write ``version`` to the root manifest and, if present, the library one.

    Not transactional: a failure on the library manifest leaves the root
    manifest already updated.
    """
    updates: list[ManifestUpdate] = []

    root = write_version(project.root_manifest_path, version)
    if isinstance(root, Err):
        return root
    updates.append(root.value)

    library_path = project.library_manifest_path
    if library_path is not None and library_path.is_file():
        library = write_version(library_path, version)
        if isinstance(library, Err):
            return library
        updates.append(library.value)

    return Ok(updates)


def _load_json(path: Path) -> Result[StrDict, VersioningError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(
            VersioningError(
                kind="manifest_missing",
                message=f"manifest not found: {path.name}",
                hint=str(path),
            )
        )
    except OSError as e:
        return Err(
            VersioningError(
                kind="manifest_missing",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(
            VersioningError(
                kind="manifest_invalid",
                message=f"invalid JSON in {path.name}: {e}",
                hint=str(path),
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            VersioningError(
                kind="manifest_invalid",
                message=f"invalid JSON root in {path.name}",
                hint=str(path),
            )
        )
    return Ok(data)
