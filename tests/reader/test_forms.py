"""Tests for the incremental form reader."""

from __future__ import annotations

import pytest

from grimoire.reader import (
    Char,
    CharStream,
    Keyword,
    ListForm,
    MapForm,
    Meta,
    NumberLiteral,
    ReaderError,
    Regex,
    Symbol,
    Tagged,
    VectorForm,
    read_all,
    read_form,
    to_source,
)

SAMPLE = """(ns demo.core)

(defn add-two
  "adds two"
  [x]
  (+ x 2))

;; comment
(def ^:private secret 42)
"""


def test_read_all_reports_starting_lines() -> None:
    forms = read_all(SAMPLE)

    assert [located.line for located in forms] == [1, 3, 9]
    assert forms[1].end_line == 6
    defn = forms[1].form
    assert isinstance(defn, ListForm)
    assert defn[0] == Symbol("defn")
    assert defn[1] == Symbol("add-two")
    assert defn[2] == "adds two"
    assert defn[3] == VectorForm((Symbol("x"),))


def test_echo_buffer_holds_exactly_one_form() -> None:
    echo: list[str] = []
    stream = CharStream.from_text("(foo (bar \")\") baz) (next)", echo=echo)

    read_form(stream)

    assert "".join(echo) == '(foo (bar ")") baz)'


def test_lookahead_is_withdrawn_from_echo() -> None:
    echo: list[str] = []
    stream = CharStream.from_text("foo bar", echo=echo)

    assert read_form(stream) == Symbol("foo")
    assert "".join(echo) == "foo"
    assert read_form(stream) == Symbol("bar")


def test_strings_keep_escaped_quotes_and_parens() -> None:
    form = read_form(CharStream.from_text('"a (\\"b\\")\\n" rest'))
    assert form == 'a ("b")\n'


def test_character_literals_do_not_open_collections() -> None:
    (located,) = read_all("[\\( \\) \\newline \\a]")
    assert located.form == VectorForm((Char("("), Char(")"), Char("\n"), Char("a")))


def test_comments_and_discards_are_skipped_inside_forms() -> None:
    (located,) = read_all("(a ; ) not a closer\n #_(ignored (deeply)) b)")
    assert located.form == ListForm((Symbol("a"), Symbol("b")))


def test_reader_macros_and_metadata() -> None:
    (located,) = read_all("(def ^:dynamic *x* @(atom 'y))")
    form = located.form

    assert form[1] == Meta(Keyword("dynamic"), Symbol("*x*"))
    assert form[2] == ListForm(
        (
            Symbol("deref"),
            ListForm((Symbol("atom"), ListForm((Symbol("quote"), Symbol("y"))))),
        )
    )


def test_atoms_are_interpreted() -> None:
    forms = [located.form for located in read_all("42 -7 1.5 1/2 nil true :k ::auto clojure.core/map")]
    assert forms[:6] == [42, -7, 1.5, NumberLiteral("1/2"), None, True]
    assert forms[6] == Keyword("k")
    assert forms[7] == Keyword("auto", auto=True)
    assert forms[8] == Symbol("map", ns="clojure.core")


def test_dispatch_forms() -> None:
    forms = [
        located.form
        for located in read_all('#"a\\"b" #{1 2} #?(:clj 1 :cljs 2) #inst "2014-01-01" #\'foo')
    ]
    assert forms[0] == Regex('a\\"b')
    assert tuple(forms[1]) == (1, 2)
    assert forms[2] == Tagged(
        Symbol("?"), ListForm((Keyword("clj"), 1, Keyword("cljs"), 2))
    )
    assert forms[3] == Tagged(Symbol("inst"), "2014-01-01")
    assert forms[4] == ListForm((Symbol("var"), Symbol("foo")))


def test_map_literals_keep_pairs() -> None:
    form = read_form(CharStream.from_text("{:a 1 :b [2]}"))
    assert isinstance(form, MapForm)
    assert form.get(Keyword("a")) == 1
    assert form.keys() == [Keyword("a"), Keyword("b")]


def test_to_source_round_trips_arglists() -> None:
    form = read_form(CharStream.from_text("[x & {:keys [a b], :or {a 1}}]"))
    assert to_source(form) == "[x & {:keys [a b], :or {a 1}}]"


def test_to_source_drops_type_hints() -> None:
    form = read_form(CharStream.from_text("[^String s ^long n]"))
    assert to_source(form) == "[s n]"


@pytest.mark.parametrize(
    "text",
    [
        "(defn broken [x]\n  (+ x 1)",
        "(a]",
        ")",
        '"unterminated',
        "{:a}",
        "\\bogus",
    ],
)
def test_malformed_input_raises_reader_error(text: str) -> None:
    with pytest.raises(ReaderError):
        read_all(text)


def test_reader_error_reports_position() -> None:
    with pytest.raises(ReaderError) as excinfo:
        read_all("(ok)\n(still ok)\n   ]")
    assert excinfo.value.line == 3
