"""Filesystem layout and fragment writing for the documentation tree."""

from __future__ import annotations

from pathlib import Path

from .errors import FilesystemFailure

INCLUDES_DIR = "_includes"


class TreeLayout:
    """Maps ``(version, namespace, symbol)`` keys onto output paths."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.includes_root = self.root / INCLUDES_DIR

    def version_dir(self, version: str) -> Path:
        return self.root / version

    def include_version_dir(self, version: str) -> Path:
        return self.includes_root / version

    def namespace_dir(self, version: str, namespace: str) -> Path:
        return self.version_dir(version) / namespace

    def include_namespace_dir(self, version: str, namespace: str) -> Path:
        return self.include_version_dir(version) / namespace

    def symbol_dir(self, version: str, namespace: str, sanitized: str) -> Path:
        return self.namespace_dir(version, namespace) / sanitized

    def include_symbol_dir(self, version: str, namespace: str, sanitized: str) -> Path:
        return self.include_namespace_dir(version, namespace) / sanitized

    def relative(self, path: Path) -> str:
        """Path relative to the output root, with forward slashes."""
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()


class FragmentWriter:
    """Writes fragments, distinguishing always-regenerated from write-once files."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def ensure_dir(self, path: Path) -> Path:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemFailure(path, "create directory", exc) from exc
        return path

    def write(self, path: Path, text: str) -> Path:
        try:
            with path.open("w", encoding="utf-8", newline="\n") as handle:
                handle.write(text)
        except OSError as exc:
            raise FilesystemFailure(path, "write", exc) from exc
        return path

    def write_once(self, path: Path, text: str) -> bool:
        """Write ``text`` only when ``path`` does not exist yet; preserves manual edits."""
        if self.exists(path):
            return False
        self.write(path, text)
        return True


__all__ = ["FragmentWriter", "INCLUDES_DIR", "TreeLayout"]
