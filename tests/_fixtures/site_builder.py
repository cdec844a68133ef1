"""Helper utilities for constructing temporary documentation sources in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Mapping

import yaml

from grimoire.config import GrimoireConfig, load_config


class SiteBuilder:
    """Writes sources, metadata manifests and grimoire.yml into a throwaway tree."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries beneath the project root."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def manifest(self, namespaces: Mapping[str, Any], name: str = "metadata.yml") -> Path:
        """Write a metadata manifest and return its path."""
        path = self.root / name
        path.write_text(yaml.safe_dump({"namespaces": dict(namespaces)}), encoding="utf-8")
        return path

    def config(self, data: Mapping[str, Any]) -> GrimoireConfig:
        """Write grimoire.yml and load it back through the real loader."""
        path = self.root / "grimoire.yml"
        path.write_text(yaml.safe_dump(dict(data), sort_keys=False), encoding="utf-8")
        return load_config(path)

    def output(self, *parts: str) -> Path:
        """Return a path inside the default output root."""
        return self.root.joinpath("out", *parts)


def demo_config(**overrides: Any) -> dict[str, Any]:
    """Baseline grimoire.yml contents for the demo project."""
    data: dict[str, Any] = {
        "output_root": "out",
        "namespaces": ["demo"],
        "source_roots": ["src"],
        "versions": [
            {"version": "9.9.9", "metadata": {"kind": "manifest", "path": "metadata.yml"}}
        ],
    }
    data.update(overrides)
    return data


__all__ = ["SiteBuilder", "demo_config"]
