"""Exact source-text extraction for symbol definitions."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from .errors import SourceUnresolvable
from .logging import get_logger
from .models import SymbolRecord
from .reader import CharStream, FormReader, ReaderError

SOURCE_NOT_FOUND = ";; Source not found!\n;; Black magic likely in this var's definition"


class SourceExtractor:
    """Reads the single top-level form that defines a symbol."""

    def __init__(self, source_roots: Sequence[Path] = ()) -> None:
        self.source_roots = [Path(root) for root in source_roots]
        self.logger = get_logger("source")

    def extract(self, symbol: SymbolRecord) -> str:
        """Return the verbatim definition of ``symbol`` or a placeholder."""
        try:
            return self.read_definition(symbol)
        except SourceUnresolvable as exc:
            self.logger.debug("Using placeholder source for %s: %s", symbol.identity, exc)
            return SOURCE_NOT_FOUND

    def read_definition(self, symbol: SymbolRecord) -> str:
        if not symbol.source_file or symbol.source_line is None:
            raise SourceUnresolvable(f"{symbol.identity} has no source location")
        path = self.resolve(symbol.source_file)
        if path is None:
            raise SourceUnresolvable(f"{symbol.source_file} not found on source roots")
        return read_form_at(path, symbol.source_line)

    def resolve(self, source_file: str) -> Optional[Path]:
        """Locate ``source_file`` directly or beneath one of the source roots."""
        candidate = Path(source_file).expanduser()
        if candidate.is_absolute():
            return candidate if candidate.is_file() else None
        for root in self.source_roots:
            resolved = root / candidate
            if resolved.is_file():
                return resolved
        return None


def read_form_at(path: Path, line: int) -> str:
    """Return the text of the first complete form starting on ``line`` of ``path``."""
    if line < 1:
        raise SourceUnresolvable(f"Invalid line {line} for {path}")
    text: List[str] = []
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            for _ in range(line - 1):
                if not handle.readline():
                    raise SourceUnresolvable(f"{path} has fewer than {line} lines")
            stream = CharStream(handle, line=line, echo=text)
            FormReader(stream).read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceUnresolvable(f"Unable to read {path}: {exc}") from exc
    except ReaderError as exc:
        raise SourceUnresolvable(f"Unable to read a form from {path}:{line}: {exc}") from exc
    return "".join(text)


__all__ = ["SOURCE_NOT_FOUND", "SourceExtractor", "read_form_at"]
