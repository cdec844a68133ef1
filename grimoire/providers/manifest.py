"""Metadata provider backed by a pre-exported symbol manifest."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from ..config import ConfigError
from ..errors import NamespaceUnavailableInVersion
from ..logging import get_logger
from ..models import SymbolMeta
from .base import MetadataProvider


class ManifestProvider(MetadataProvider):
    """Reads namespaces and symbols from YAML or JSON manifest files.

    A manifest looks like::

        namespaces:
          demo:
            - name: add-two
              kind: function
              arglists: ["[x]"]
              doc: adds two
              file: demo.clj
              line: 1

    ``kind`` may be replaced by the ``macro`` / ``invocable`` flags a runtime
    exporter reports directly. Later files override namespaces of earlier ones.
    """

    def __init__(self, paths: Sequence[Path]) -> None:
        self.paths = [Path(path) for path in paths]
        self.logger = get_logger("providers.manifest")
        self._namespaces: Optional[Dict[str, List[Any]]] = None

    def namespaces(self) -> Sequence[str]:
        return list(self._load())

    def list_public_symbols(self, namespace: str) -> Sequence[SymbolMeta]:
        entries = self._load().get(namespace)
        if entries is None:
            raise NamespaceUnavailableInVersion(namespace)
        return [_meta_from_entry(namespace, entry) for entry in entries]

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self) -> Dict[str, List[Any]]:
        if self._namespaces is not None:
            return self._namespaces
        namespaces: Dict[str, List[Any]] = {}
        for path in self.paths:
            data = self._read(path)
            raw = data.get("namespaces") if isinstance(data, dict) else None
            if not isinstance(raw, dict):
                raise ConfigError(f"Manifest {path} must map `namespaces` to symbol lists")
            for name, entries in raw.items():
                if not isinstance(entries, list):
                    raise ConfigError(f"Manifest {path}: namespace {name} must be a list")
                namespaces[str(name)] = entries
            self.logger.debug("Loaded %d namespaces from %s", len(raw), path)
        self._namespaces = namespaces
        return namespaces

    @staticmethod
    def _read(path: Path) -> Any:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Unable to read metadata manifest {path}: {exc}") from exc
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse metadata manifest {path}: {exc}") from exc


def _meta_from_entry(namespace: str, entry: Any) -> SymbolMeta:
    if not isinstance(entry, dict):
        return SymbolMeta(name=entry if isinstance(entry, str) else None, namespace=None)
    kind = entry.get("kind")
    is_macro = bool(entry.get("macro", kind == "macro"))
    is_invocable = bool(entry.get("invocable", kind in {"macro", "function"}))
    return SymbolMeta(
        name=entry.get("name"),
        namespace=entry.get("namespace", namespace),
        is_macro=is_macro,
        is_invocable=is_invocable,
        arglists=_normalise_arglists(entry.get("arglists")),
        doc=entry.get("doc"),
        source_file=entry.get("file"),
        source_line=entry.get("line"),
    )


def _normalise_arglists(value: Any) -> Any:
    if not isinstance(value, list):
        return value
    normalised: List[Any] = []
    for item in value:
        if isinstance(item, list):
            normalised.append("[" + " ".join(str(part) for part in item) + "]")
        else:
            normalised.append(item)
    return normalised


__all__ = ["ManifestProvider"]
