"""Metadata provider that reads definitions straight from source files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..errors import NamespaceUnavailableInVersion
from ..logging import get_logger
from ..models import SymbolMeta
from ..reader import (
    Keyword,
    ListForm,
    MapForm,
    Meta,
    ReaderError,
    Symbol,
    TopLevelForm,
    VectorForm,
    read_all,
    to_source,
)
from .base import MetadataProvider

_SOURCE_SUFFIXES = (".clj", ".cljc")

_FUNCTION_DEFINERS = {"defn", "defmacro"}
_VALUE_DEFINERS = {"def", "defonce"}
_PRIVATE_DEFINERS = {"defn-"}

_PRIVATE = Keyword("private")
_MACRO = Keyword("macro")
_DOC = Keyword("doc")
_ARGLISTS = Keyword("arglists")
_TAG = Keyword("tag")


@dataclass
class _Definition:
    name: str
    is_macro: bool
    is_invocable: bool
    arglists: List[str]
    doc: Optional[str]
    line: int


class SourceTreeProvider(MetadataProvider):
    """Scans ``.clj``/``.cljc`` files and collects public top-level definitions."""

    def __init__(self, roots: Sequence[Path]) -> None:
        self.roots = [Path(root) for root in roots]
        self.logger = get_logger("providers.source_tree")
        self._index: Optional[Dict[str, List[SymbolMeta]]] = None

    def namespaces(self) -> Sequence[str]:
        return list(self._scan())

    def list_public_symbols(self, namespace: str) -> Sequence[SymbolMeta]:
        symbols = self._scan().get(namespace)
        if symbols is None:
            raise NamespaceUnavailableInVersion(namespace)
        return list(symbols)

    # ------------------------------------------------------------------
    # Scanning

    def _scan(self) -> Dict[str, List[SymbolMeta]]:
        if self._index is not None:
            return self._index
        index: Dict[str, Dict[str, SymbolMeta]] = {}
        for path in self._iter_files():
            try:
                forms = read_all(path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, ReaderError) as exc:
                self.logger.warning("Skipping unreadable source %s: %s", path, exc)
                continue
            namespace = _namespace_of(forms)
            if namespace is None:
                self.logger.debug("No ns form in %s; skipping", path)
                continue
            symbols = index.setdefault(namespace, {})
            for located in forms:
                definition = _definition_of(located)
                if definition is None:
                    continue
                symbols[definition.name] = SymbolMeta(
                    name=definition.name,
                    namespace=namespace,
                    is_macro=definition.is_macro,
                    is_invocable=definition.is_invocable,
                    arglists=definition.arglists,
                    doc=definition.doc,
                    source_file=str(path),
                    source_line=definition.line,
                )
        self._index = {ns: list(symbols.values()) for ns, symbols in index.items()}
        return self._index

    def _iter_files(self) -> Iterable[Path]:
        for root in self.roots:
            if root.is_file():
                yield root
                continue
            if not root.is_dir():
                self.logger.warning("Source root %s does not exist", root)
                continue
            for path in sorted(root.rglob("*")):
                if path.is_file() and path.suffix in _SOURCE_SUFFIXES:
                    yield path


def _namespace_of(forms: Sequence[TopLevelForm]) -> Optional[str]:
    for located in forms:
        form = located.form
        if _head(form) in {"ns", "in-ns"} and len(form) > 1:
            target, _ = _unwrap(form[1])
            if isinstance(target, ListForm) and _head(target) == "quote" and len(target) > 1:
                target = target[1]
            if isinstance(target, Symbol):
                return str(target)
    return None


def _definition_of(located: TopLevelForm) -> Optional[_Definition]:
    form = located.form
    head = _head(form)
    if head is None or head in _PRIVATE_DEFINERS or len(form) < 2:
        return None
    if head not in _FUNCTION_DEFINERS | _VALUE_DEFINERS | {"defmulti"}:
        return None
    name_form, meta = _unwrap(form[1])
    if not isinstance(name_form, Symbol):
        return None

    rest = list(form[2:])
    doc: Optional[str] = None
    arglists: List[str] = []
    is_macro = head == "defmacro" or meta.get(_MACRO) is True
    is_invocable = head in _FUNCTION_DEFINERS or head == "defmulti"

    if head in _FUNCTION_DEFINERS or head == "defmulti":
        if rest and isinstance(rest[0], str):
            doc = rest.pop(0)
        if rest and isinstance(rest[0], MapForm):
            meta.update(_meta_map(rest.pop(0)))
        if head != "defmulti":
            arglists = _arglists_from_body(rest)
    else:
        if len(rest) >= 2 and isinstance(rest[0], str):
            doc = rest.pop(0)
        init = rest[0] if rest else None
        if _head(init) in {"fn", "fn*"}:
            is_invocable = True
            arglists = _arglists_from_body(list(init[1:]))

    if meta.get(_PRIVATE) is True:
        return None
    declared = _declared_arglists(meta.get(_ARGLISTS))
    if declared is not None:
        arglists = declared
    if doc is None and isinstance(meta.get(_DOC), str):
        doc = meta[_DOC]

    return _Definition(
        name=name_form.name,
        is_macro=is_macro,
        is_invocable=is_invocable or is_macro,
        arglists=arglists,
        doc=doc,
        line=located.line,
    )


def _arglists_from_body(body: List[Any]) -> List[str]:
    if body and isinstance(body[0], Symbol):
        # named fn: (fn self [x] ...)
        body = body[1:]
    if body and isinstance(_unwrap(body[0])[0], VectorForm):
        return [to_source(_unwrap(body[0])[0])]
    arglists: List[str] = []
    for arity in body:
        if isinstance(arity, ListForm) and arity and isinstance(_unwrap(arity[0])[0], VectorForm):
            arglists.append(to_source(_unwrap(arity[0])[0]))
    return arglists


def _declared_arglists(value: Any) -> Optional[List[str]]:
    if isinstance(value, ListForm) and _head(value) == "quote" and len(value) > 1:
        value = value[1]
    if isinstance(value, (ListForm, VectorForm)) and all(
        isinstance(item, VectorForm) for item in value
    ):
        return [to_source(item) for item in value]
    return None


def _unwrap(form: Any) -> tuple[Any, Dict[Any, Any]]:
    """Strip ``^meta`` wrappers, returning the bare form and merged metadata."""
    meta: Dict[Any, Any] = {}
    while isinstance(form, Meta):
        meta.update(_meta_map(form.meta))
        form = form.form
    return form, meta


def _meta_map(meta: Any) -> Dict[Any, Any]:
    if isinstance(meta, Keyword):
        return {meta: True}
    if isinstance(meta, MapForm):
        return {key: value for key, value in meta}
    if isinstance(meta, (Symbol, str)):
        return {_TAG: meta}
    return {}


def _head(form: Any) -> Optional[str]:
    if isinstance(form, ListForm) and form and isinstance(form[0], Symbol):
        return form[0].name
    return None


__all__ = ["SourceTreeProvider"]
