"""Symbol classification into macros, functions and values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import MetadataUnavailable
from .models import SymbolKind, SymbolMeta, SymbolRecord
from .providers.base import MetadataProvider


@dataclass
class Classification:
    """Public symbols of one namespace, partitioned by kind."""

    namespace: str
    symbols: List[SymbolRecord] = field(default_factory=list)
    rejected: List[Tuple[SymbolMeta, MetadataUnavailable]] = field(default_factory=list)

    @property
    def macros(self) -> List[SymbolRecord]:
        return [symbol for symbol in self.symbols if symbol.kind is SymbolKind.MACRO]

    @property
    def functions(self) -> List[SymbolRecord]:
        return [symbol for symbol in self.symbols if symbol.kind is SymbolKind.FUNCTION]

    @property
    def values(self) -> List[SymbolRecord]:
        return [symbol for symbol in self.symbols if symbol.kind is SymbolKind.VALUE]


def classify(namespace: str, provider: MetadataProvider) -> Classification:
    """Fetch and classify every public binding of ``namespace``."""
    result = Classification(namespace=namespace)
    for meta in provider.list_public_symbols(namespace):
        try:
            record = to_record(meta)
        except MetadataUnavailable as exc:
            result.rejected.append((meta, exc))
            continue
        if record.namespace != namespace:
            result.rejected.append(
                (meta, MetadataUnavailable(record.identity, f"not interned in {namespace}"))
            )
            continue
        result.symbols.append(record)
    return result


def kind_of(meta: SymbolMeta) -> SymbolKind:
    if meta.is_macro:
        return SymbolKind.MACRO
    if meta.is_invocable:
        return SymbolKind.FUNCTION
    return SymbolKind.VALUE


def to_record(meta: SymbolMeta) -> SymbolRecord:
    """Validate raw provider metadata and build an immutable record."""
    identity = f"{meta.namespace}/{meta.name}"
    if not isinstance(meta.name, str) or not meta.name:
        raise MetadataUnavailable(identity, "symbol name is missing")
    if not isinstance(meta.namespace, str) or not meta.namespace:
        raise MetadataUnavailable(identity, "defining namespace is missing")

    arglists: Tuple[str, ...] = ()
    if isinstance(meta.arglists, (list, tuple)):
        arglists = tuple(item for item in meta.arglists if isinstance(item, str))

    line = meta.source_line
    if isinstance(line, bool) or not isinstance(line, int) or line < 1:
        line = None

    return SymbolRecord(
        namespace=meta.namespace,
        name=meta.name,
        kind=kind_of(meta),
        arglists=arglists,
        doc=meta.doc if isinstance(meta.doc, str) else None,
        source_file=meta.source_file if isinstance(meta.source_file, str) else None,
        source_line=line,
    )


__all__ = ["Classification", "classify", "kind_of", "to_record"]
