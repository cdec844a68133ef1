"""Configuration loading for grimoire (grimoire.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

import yaml

from .models import VersionRecord

CONFIG_FILENAME = "grimoire.yml"

METADATA_KINDS = ("manifest", "source")
EXAMPLE_KINDS = ("http", "directory")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or is inconsistent."""


@dataclass
class MetadataSource:
    """Where a version's symbol metadata comes from."""

    kind: str
    paths: List[Path] = field(default_factory=list)


@dataclass
class ExampleSourceConfig:
    """External example provider for a version."""

    kind: str
    base_url: Optional[str] = None
    path: Optional[Path] = None
    timeout: float = 10.0


@dataclass
class VersionConfig:
    """Settings for one release version in the documentation tree."""

    version: str
    prior: Optional[str] = None
    exclude_namespaces: FrozenSet[str] = frozenset()
    metadata: Optional[MetadataSource] = None
    examples: Optional[ExampleSourceConfig] = None
    call_to_action: bool = False

    @property
    def record(self) -> VersionRecord:
        return VersionRecord(version=self.version, prior=self.prior)

    def includes(self, namespace: str) -> bool:
        return namespace not in self.exclude_namespaces


@dataclass
class GrimoireConfig:
    """Represents the high-level settings defined in grimoire.yml."""

    root: Path
    namespaces: List[str]
    versions: List[VersionConfig]
    output_root: Path
    source_roots: List[Path] = field(default_factory=list)
    highlight_language: str = "clojure"
    edit_url: Optional[str] = None
    workers: int = 1

    def version(self, name: str) -> VersionConfig:
        for candidate in self.versions:
            if candidate.version == name:
                return candidate
        raise KeyError(name)


def load_config(config_path: Path) -> GrimoireConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_file}")
    root = config_file.parent
    data = _read_config(config_file)
    return parse_config(data, root=root)


def parse_config(data: Any, *, root: Path) -> GrimoireConfig:
    """Build a ``GrimoireConfig`` from an already-parsed mapping."""
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    namespaces = _as_str_list(data.get("namespaces"))
    if not namespaces:
        raise ConfigError("`namespaces` must list at least one namespace")

    raw_versions = data.get("versions")
    if not isinstance(raw_versions, list) or not raw_versions:
        raise ConfigError("`versions` must list at least one version")

    versions: List[VersionConfig] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw_versions):
        version = _parse_version(entry, index, root)
        if version.version in seen:
            raise ConfigError(f"Version {version.version} is configured more than once")
        seen.add(version.version)
        versions.append(version)
    _check_chain(versions)

    workers = _as_int(data.get("workers"))
    if workers is None:
        workers = 1
    if workers < 1:
        raise ConfigError("`workers` must be a positive integer")

    output_root = _as_str(data.get("output_root"))
    return GrimoireConfig(
        root=root,
        namespaces=namespaces,
        versions=versions,
        output_root=_resolve_path(root, output_root or "."),
        source_roots=[_resolve_path(root, item) for item in _as_str_list(data.get("source_roots"))],
        highlight_language=_as_str(data.get("highlight_language")) or "clojure",
        edit_url=_as_str(data.get("edit_url")),
        workers=workers,
    )


def _parse_version(entry: Any, index: int, root: Path) -> VersionConfig:
    if not isinstance(entry, dict):
        entry = {"version": entry}
    version = _version_name(entry.get("version"), index, "version")
    if not version:
        raise ConfigError(f"versions[{index}] is missing `version`")
    prior = _version_name(entry.get("prior"), index, "prior")

    metadata = None
    metadata_data = _as_dict(entry.get("metadata"))
    if metadata_data:
        kind = _as_str(metadata_data.get("kind")) or "manifest"
        if kind not in METADATA_KINDS:
            raise ConfigError(f"Unknown metadata kind {kind!r} for version {version}")
        raw_paths = _as_str_list(metadata_data.get("paths")) or _as_str_list(
            metadata_data.get("path")
        )
        if not raw_paths:
            raise ConfigError(f"Metadata for version {version} needs `path` or `paths`")
        metadata = MetadataSource(kind=kind, paths=[_resolve_path(root, p) for p in raw_paths])

    examples = None
    examples_data = _as_dict(entry.get("examples"))
    if examples_data:
        kind = _as_str(examples_data.get("kind")) or "http"
        if kind not in EXAMPLE_KINDS:
            raise ConfigError(f"Unknown examples kind {kind!r} for version {version}")
        path = _as_str(examples_data.get("path"))
        examples = ExampleSourceConfig(
            kind=kind,
            base_url=_as_str(examples_data.get("base_url")),
            path=_resolve_path(root, path) if path else None,
            timeout=_as_float(examples_data.get("timeout")) or 10.0,
        )
        if kind == "http" and not examples.base_url:
            raise ConfigError(f"HTTP examples for version {version} need `base_url`")
        if kind == "directory" and examples.path is None:
            raise ConfigError(f"Directory examples for version {version} need `path`")

    return VersionConfig(
        version=version,
        prior=prior,
        exclude_namespaces=frozenset(_as_str_list(entry.get("exclude_namespaces"))),
        metadata=metadata,
        examples=examples,
        call_to_action=_as_bool(entry.get("call_to_action")) or False,
    )


def _version_name(value: Any, index: int, key: str) -> Optional[str]:
    """Return a version name, rejecting YAML numbers such as an unquoted ``1.10``."""
    if value is None or isinstance(value, str):
        return value
    raise ConfigError(
        f"versions[{index}].{key} must be a quoted string, got {value!r}"
    )


def _check_chain(versions: Sequence[VersionConfig]) -> None:
    priors = {version.version: version.prior for version in versions}
    for start in priors:
        visited = {start}
        current = priors.get(start)
        while current is not None:
            if current in visited:
                raise ConfigError(f"Version chain starting at {start} contains a cycle")
            visited.add(current)
            current = priors.get(current)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return path


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ExampleSourceConfig",
    "GrimoireConfig",
    "MetadataSource",
    "VersionConfig",
    "load_config",
    "parse_config",
]
