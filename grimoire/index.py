"""Alphabetical index pages for namespaces and versions."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Sequence

from .models import SymbolRecord
from .naming import escape_markdown
from .render import include, render_front_matter, render_link_list


class IndexBuilder:
    """Groups symbols by initial letter and renders linked listings."""

    def build(self, symbols: Iterable[SymbolRecord]) -> str:
        groups: Dict[str, List[SymbolRecord]] = defaultdict(list)
        for symbol in symbols:
            groups[symbol.name[:1].upper()].append(symbol)

        blocks = []
        for heading in sorted(groups):
            members = sorted(groups[heading], key=lambda symbol: (symbol.name, symbol.sanitized_name))
            links = render_link_list(
                (escape_markdown(symbol.name), symbol.sanitized_name) for symbol in members
            )
            blocks.append(f"### {escape_markdown(heading)}\n\n{links}")
        return "\n".join(blocks)

    def render_namespace_page(
        self,
        version: str,
        namespace: str,
        *,
        macros: Sequence[SymbolRecord] = (),
        values: Sequence[SymbolRecord] = (),
        functions: Sequence[SymbolRecord] = (),
    ) -> str:
        parts = [
            render_front_matter({"layout": "ns", "title": namespace}),
            "\n",
            include(version, namespace, "index.md"),
        ]
        for title, members in (("Macros", macros), ("Vars", values), ("Functions", functions)):
            if members:
                parts.append(f"\n## {title}\n\n{self.build(members)}")
        return "".join(parts)

    def render_version_page(self, version: str, namespaces: Sequence[str]) -> str:
        return (
            render_front_matter({"layout": "release", "version": version})
            + "\n## Release information\n\n"
            + include(version, "index.md")
            + "\n## Namespaces\n\n"
            + render_link_list((escape_markdown(ns), ns) for ns in namespaces)
        )


__all__ = ["IndexBuilder"]
