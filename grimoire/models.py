"""Core data models shared across grimoire components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from .naming import sanitize


class SymbolKind(str, Enum):
    """Classification of a public binding."""

    MACRO = "macro"
    FUNCTION = "function"
    VALUE = "value"

    @property
    def has_source(self) -> bool:
        return self is not SymbolKind.VALUE


@dataclass
class SymbolMeta:
    """Raw metadata for one public binding, as supplied by a provider.

    Fields are untyped here; ``grimoire.classifier.to_record`` validates
    them before anything is rendered.
    """

    name: Any
    namespace: Any
    is_macro: bool = False
    is_invocable: bool = False
    arglists: Any = None
    doc: Any = None
    source_file: Any = None
    source_line: Any = None


@dataclass(frozen=True)
class SymbolRecord:
    """Validated, immutable view of a symbol for a single generation run."""

    namespace: str
    name: str
    kind: SymbolKind
    arglists: Tuple[str, ...] = ()
    doc: Optional[str] = None
    source_file: Optional[str] = None
    source_line: Optional[int] = None

    @property
    def sanitized_name(self) -> str:
        return sanitize(self.name)

    @property
    def identity(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class VersionRecord:
    """A release version and the version it inherits documentation from."""

    version: str
    prior: Optional[str] = None


@dataclass
class Example:
    """A single usage example supplied by an example provider."""

    body: str
    source: str = ""


@dataclass
class SymbolOutcome:
    """Result of processing one symbol: either written fragments or a failure."""

    namespace: str
    name: str
    kind: Optional[SymbolKind] = None
    fragments: List[str] = field(default_factory=list)
    error: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, record: SymbolRecord, fragments: List[str]) -> "SymbolOutcome":
        return cls(
            namespace=record.namespace,
            name=record.name,
            kind=record.kind,
            fragments=list(fragments),
        )

    @classmethod
    def failure(cls, namespace: str, name: str, exc: BaseException) -> "SymbolOutcome":
        return cls(
            namespace=namespace,
            name=name,
            error=exc.__class__.__name__,
            reason=str(exc),
        )

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def identity(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass
class NamespaceReport:
    """Per-namespace summary of a generation run."""

    namespace: str
    outcomes: List[SymbolOutcome] = field(default_factory=list)
    skipped: Optional[str] = None

    @property
    def succeeded(self) -> List[SymbolOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> List[SymbolOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


@dataclass
class VersionReport:
    """Per-version summary of a generation run."""

    version: str
    namespaces: List[NamespaceReport] = field(default_factory=list)

    @property
    def processed(self) -> List[NamespaceReport]:
        return [report for report in self.namespaces if report.skipped is None]


@dataclass
class RunReport:
    """Aggregated outcome of a full generation run."""

    versions: List[VersionReport] = field(default_factory=list)

    @property
    def failed_symbols(self) -> List[SymbolOutcome]:
        return [
            outcome
            for version in self.versions
            for namespace in version.namespaces
            for outcome in namespace.failed
        ]

    @property
    def symbol_count(self) -> int:
        return sum(
            len(namespace.succeeded)
            for version in self.versions
            for namespace in version.namespaces
        )
