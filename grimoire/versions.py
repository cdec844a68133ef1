"""Version chain traversal and example inheritance between releases."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, Optional

from .examples.base import ExampleProvider
from .models import SymbolRecord, VersionRecord
from .render import ContentRenderer, include


class VersionChain:
    """Read-only view of the ``version -> prior version`` links."""

    def __init__(
        self,
        records: Iterable[VersionRecord],
        includes_root: Path,
        *,
        exists: Callable[[Path], bool] = Path.exists,
    ) -> None:
        self._priors: Dict[str, Optional[str]] = {
            record.version: record.prior for record in records
        }
        self.includes_root = Path(includes_root)
        self._exists = exists

    def prior_of(self, version: str) -> Optional[str]:
        return self._priors.get(version)

    def ancestors(self, version: str) -> Iterator[str]:
        """Yield prior versions, nearest first; stops on unknown versions or cycles."""
        seen = {version}
        current = self.prior_of(version)
        while current is not None and current not in seen:
            yield current
            seen.add(current)
            current = self.prior_of(current)

    def resolve_fallback_examples(
        self, version: str, namespace: str, sanitized: str
    ) -> Optional[str]:
        """Return an include directive for the nearest prior ``examples`` fragment."""
        for prior in self.ancestors(version):
            fragment = self.includes_root / prior / namespace / sanitized / "examples.md"
            if self._exists(fragment):
                return include(prior, namespace, sanitized, "examples.md")
        return None


class ExampleResolver:
    """Composes the initial content of a symbol's ``examples`` fragment."""

    def __init__(self, chain: VersionChain, renderer: ContentRenderer) -> None:
        self.chain = chain
        self.renderer = renderer

    def compose(
        self,
        version: str,
        symbol: SymbolRecord,
        fragment_path: str,
        *,
        provider: Optional[ExampleProvider] = None,
        call_to_action: bool = False,
    ) -> str:
        fallback = self.chain.resolve_fallback_examples(
            version, symbol.namespace, symbol.sanitized_name
        )
        examples = provider.examples_for(symbol.namespace, symbol.name) if provider else []

        parts = []
        if fallback:
            parts.append(fallback)
        if examples:
            parts.append(self.renderer.render_examples(examples))
        if call_to_action or not parts:
            parts.append(self.renderer.render_call_to_action("examples", fragment_path))
        return "\n".join(parts)


__all__ = ["ExampleResolver", "VersionChain"]
