"""Markdown and Liquid rendering of documentation fragments."""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Optional, Sequence

import yaml

from .models import Example, SymbolRecord
from .naming import escape_markdown

_TRAILING_BLANKS = re.compile(r"[\t ]+\n")


def liquid(*words: str) -> str:
    """Render a single Liquid tag on its own line."""
    return "{% " + " ".join(words) + " %}\n"


def trim_dot(path: str) -> str:
    return path[2:] if path.startswith("./") else path


def include_ref(*parts: str) -> str:
    """Path of a fragment relative to the ``_includes`` directory."""
    return trim_dot("/".join(parts))


def include(*parts: str) -> str:
    return liquid("include", include_ref(*parts))


def render_front_matter(mapping: Mapping[str, object]) -> str:
    body = yaml.safe_dump(
        dict(mapping),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=1000,
    )
    return f"---\n{body}---\n"


def raw_block(text: str) -> str:
    """Guard ``text`` so the site generator does not interpret template syntax in it."""
    body = text if text.endswith("\n") or not text else text + "\n"
    return liquid("raw") + body + liquid("endraw")


class ContentRenderer:
    """Produces the per-symbol fragments; performs no I/O."""

    def __init__(self, *, highlight_language: str = "clojure", edit_url: Optional[str] = None) -> None:
        self.highlight_language = highlight_language
        self.edit_url = edit_url

    def render_docs(self, symbol: SymbolRecord) -> str:
        sections = []
        if symbol.arglists:
            sections.append("## Arities\n" + raw_block("\n".join(symbol.arglists)))
        doc = symbol.doc if symbol.doc and symbol.doc.strip() else "No documentation available."
        sections.append("## Documentation\n" + raw_block(doc))
        return "\n".join(sections)

    def render_src(self, symbol: SymbolRecord, source: str) -> Optional[str]:
        if not symbol.kind.has_source:
            return None
        return self._highlight(source, "linenos")

    def render_index(self, version: str, symbol: SymbolRecord) -> str:
        namespace = symbol.namespace
        sanitized = symbol.sanitized_name
        display = escape_markdown(symbol.name)
        parts = [
            render_front_matter(
                {"layout": "fn", "namespace": namespace, "symbol": display}
            ),
            f"\n# [{escape_markdown(namespace)}](../)/{display}\n\n",
            include(version, namespace, sanitized, "docs.md"),
            "\n## Examples\n\n",
            include(version, namespace, sanitized, "examples.md"),
        ]
        if symbol.kind.has_source:
            parts.append("\n## Source\n\n")
            parts.append(include(version, namespace, sanitized, "src.md"))
        return "".join(parts)

    def render_examples(self, examples: Sequence[Example]) -> str:
        blocks = []
        for index, example in enumerate(examples, start=1):
            body = _TRAILING_BLANKS.sub("\n", example.body)
            blocks.append(
                f"### Example {index}\n"
                f"[permalink](#example-{index})\n\n"
                + self._highlight(body, "linenos")
            )
        return "\n\n".join(blocks)

    def render_call_to_action(self, what: str, fragment_path: str) -> str:
        label = f"Please add {what}!"
        if self.edit_url:
            return f"[{label}]({self.edit_url}{fragment_path})\n"
        return f"{label}\n"

    def render_commentary(self, scope: str, what: str, fragment_path: str) -> str:
        return (
            f"No {scope} specific documentation!\n\n"
            + self.render_call_to_action(what, fragment_path)
            + "\n"
        )

    def _highlight(self, code: str, *options: str) -> str:
        return (
            liquid("highlight", self.highlight_language, *options)
            + raw_block(code)
            + liquid("endhighlight")
        )


def render_link_list(entries: Iterable[tuple[str, str]]) -> str:
    """Render ``(text, target)`` pairs as a Markdown bullet list of links."""
    return "".join(f"- [{text}](./{target}/)\n" for text, target in entries)


__all__ = [
    "ContentRenderer",
    "include",
    "include_ref",
    "liquid",
    "raw_block",
    "render_front_matter",
    "render_link_list",
    "trim_dot",
]
