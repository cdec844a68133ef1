"""Tests for grimoire.naming."""

from __future__ import annotations

import pytest

from grimoire.errors import NameCollision
from grimoire.naming import SanitizedNameRegistry, escape_markdown, sanitize


def test_sanitize_leaves_plain_names_alone() -> None:
    assert sanitize("pop") == "pop"


def test_sanitize_replaces_punctuation_and_trims_separators() -> None:
    assert (
        sanitize("*initial-report-counters*")
        == "STAR_initial_DASH_report_DASH_counters_STAR"
    )


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("swap!", "swap_BANG"),
        ("->>", "DASH__GT__GT"),
        ("not=", "not_EQ"),
        ("+'", "PLUS__SQUOTE"),
        ("clojure.core//", "clojure_DOT_core_SLASH__SLASH"),
        ("nil?", "nil_QMARK"),
        ("<=", "LT__EQ"),
    ],
)
def test_sanitize_token_table(raw: str, expected: str) -> None:
    assert sanitize(raw) == expected


@pytest.mark.parametrize("raw", ["*ns*", "swap!", "->>", "a.b/c", "<=", "+'", "ns-publics"])
def test_sanitize_is_idempotent_and_path_safe(raw: str) -> None:
    once = sanitize(raw)
    assert sanitize(once) == once
    assert "/" not in once
    assert not once.startswith("_")
    assert not once.endswith("_")


def test_escape_markdown_escapes_emphasis_and_links() -> None:
    assert escape_markdown("*out*") == "\\*out\\*"
    assert escape_markdown("a_b") == "a\\_b"
    assert escape_markdown("[x]") == "\\[x\\]"
    assert escape_markdown("conj") == "conj"


def test_registry_rejects_distinct_names_with_same_segment() -> None:
    registry = SanitizedNameRegistry()
    assert registry.claim("a-b") == "a_DASH_b"
    assert registry.claim("a-b") == "a_DASH_b"

    with pytest.raises(NameCollision) as excinfo:
        registry.claim("a_DASH_b")

    assert excinfo.value.existing == "a-b"
    assert "a_DASH_b" in registry
    assert len(registry) == 1


def test_registry_rejects_names_that_sanitize_to_nothing() -> None:
    registry = SanitizedNameRegistry()
    with pytest.raises(NameCollision):
        registry.claim("_")
