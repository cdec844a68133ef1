"""Example provider reading hand-maintained example files from disk."""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..logging import get_logger
from ..models import Example
from ..naming import sanitize
from .base import ExampleProvider

_EXAMPLE_SUFFIXES = (".clj", ".cljc", ".txt", ".md")


class DirectoryExampleProvider(ExampleProvider):
    """Reads ``<root>/<namespace>/<sanitized-name>/*`` files as example bodies."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.logger = get_logger("examples.directory")

    def examples_for(self, namespace: str, name: str) -> List[Example]:
        directory = self.root / namespace / sanitize(name)
        if not directory.is_dir():
            return []
        examples: List[Example] = []
        for path in sorted(directory.iterdir()):
            if not path.is_file() or path.suffix not in _EXAMPLE_SUFFIXES:
                continue
            try:
                body = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Skipping unreadable example %s: %s", path, exc)
                continue
            if body.strip():
                examples.append(Example(body=body, source=str(path)))
        return examples


__all__ = ["DirectoryExampleProvider"]
