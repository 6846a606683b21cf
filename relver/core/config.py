"""Typed configuration loading.

The optional ``relver.toml`` at the project root describes where the
manifests and changelog live and which branches carry a version policy.
Every key has a default, so a project without the file behaves exactly like
the built-in ``main`` policy.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "ChangelogConfig",
    "CommitsConfig",
    "Config",
    "ConfigError",
    "ManifestsConfig",
    "PolicyConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "relver.toml"

DEFAULT_ROOT_MANIFEST = "package.json"
DEFAULT_LIBRARY_MANIFEST = "projects/picker/package.json"
DEFAULT_CHANGELOG = "CHANGELOG.md"
DEFAULT_FRAMEWORK = "Angular 15.x"
DEFAULT_FALLBACK_LIMIT = 10


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ManifestsConfig:
    """Manifest paths, relative to the project root."""

    root: str = DEFAULT_ROOT_MANIFEST
    library: str | None = DEFAULT_LIBRARY_MANIFEST


@dataclass(frozen=True, slots=True)
class ChangelogConfig:
    path: str = DEFAULT_CHANGELOG
    # Upstream framework named in each entry's compatibility heading.
    framework: str = DEFAULT_FRAMEWORK


@dataclass(frozen=True, slots=True)
class CommitsConfig:
    # Commits inspected when the repository has no tag yet.
    fallback_limit: int = DEFAULT_FALLBACK_LIMIT


@dataclass(frozen=True, slots=True)
class PolicyConfig:
    """Version policy bound to one branch."""

    branch: str
    max_major: int
    default_minor: int


def _default_policies() -> tuple[PolicyConfig, ...]:
    return (PolicyConfig(branch="main", max_major=15, default_minor=2),)


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    manifests: ManifestsConfig = field(default_factory=ManifestsConfig)
    changelog: ChangelogConfig = field(default_factory=ChangelogConfig)
    commits: CommitsConfig = field(default_factory=CommitsConfig)
    policies: tuple[PolicyConfig, ...] = field(default_factory=_default_policies)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If a ``[policies.<branch>]`` table is incomplete or
                ``commits.fallback_limit`` is not a positive integer.
        """
        manifests: StrDict = get_table(data, "manifests") or {}
        changelog: StrDict = get_table(data, "changelog") or {}
        commits: StrDict = get_table(data, "commits") or {}

        library: str | None = DEFAULT_LIBRARY_MANIFEST
        if "library" in manifests:
            # An explicit empty string disables the library manifest.
            library = get_str(manifests, "library")

        policies_tbl = get_table(data, "policies")
        policies = _default_policies() if policies_tbl is None else _parse_policies(policies_tbl)

        return cls(
            manifests=ManifestsConfig(
                root=get_str(manifests, "root") or DEFAULT_ROOT_MANIFEST,
                library=library,
            ),
            changelog=ChangelogConfig(
                path=get_str(changelog, "path") or DEFAULT_CHANGELOG,
                framework=get_str(changelog, "framework") or DEFAULT_FRAMEWORK,
            ),
            commits=CommitsConfig(
                fallback_limit=_parse_fallback_limit(commits),
            ),
            policies=policies,
        )


def _parse_fallback_limit(table: StrDict) -> int:
    if "fallback_limit" not in table:
        return DEFAULT_FALLBACK_LIMIT
    limit = get_int(table, "fallback_limit")
    if limit is None or limit == 0:
        raise ValueError("commits.fallback_limit must be a positive integer")
    return limit


def _parse_policies(table: StrDict) -> tuple[PolicyConfig, ...]:
    out: list[PolicyConfig] = []
    for branch, raw in table.items():
        entry = as_str_dict(raw)
        if entry is None:
            raise ValueError(f"policies.{branch} must be a table")
        max_major = get_int(entry, "max_major")
        default_minor = get_int(entry, "default_minor")
        if max_major is None or default_minor is None:
            raise ValueError(
                f"policies.{branch} needs non-negative integers max_major and default_minor"
            )
        out.append(PolicyConfig(branch=branch, max_major=max_major, default_minor=default_minor))
    return tuple(out)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to relver.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config when the file exists, otherwise return the defaults.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
