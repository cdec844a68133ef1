"""Tests for the source-tree metadata provider."""

from __future__ import annotations

from pathlib import Path

import pytest

from grimoire.errors import NamespaceUnavailableInVersion
from grimoire.providers import SourceTreeProvider
from grimoire.source import read_form_at

SAMPLE = """\
(ns sample.core
  "Sample namespace."
  (:require [clojure.string :as str]))

(def ^:dynamic *depth* 3)

(def ^{:doc "Greeting used by greet." :private false}
  greeting
  "hello")

(defn greet
  "Says hello."
  ([] (greet "world"))
  ([who] (str greeting " " who)))
(defn- helper [x] x)
(def ^:private secret 42)
(defmacro with-greeting
  {:arglists '([name & body])}
  [name & body]
  `(let [~name greeting] ~@body))

(defmulti render :kind)
(def shout (fn [^String s] (str/upper-case s)))
(defn greet "redefined later" [who] who)
"""


@pytest.fixture
def sample_root(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    (root / "sample").mkdir(parents=True)
    (root / "sample" / "core.clj").write_text(SAMPLE, encoding="utf-8")
    (root / "sample" / "notes.txt").write_text("(ns ignored)", encoding="utf-8")
    (root / "sample" / "util.cljc").write_text("(in-ns 'sample.util)\n(defn helper [] 1)\n", encoding="utf-8")
    (root / "sample" / "broken.clj").write_text("(ns sample.broken)\n(defn oops [x]", encoding="utf-8")
    return root


def _by_name(provider: SourceTreeProvider, namespace: str) -> dict:
    return {meta.name: meta for meta in provider.list_public_symbols(namespace)}


def test_namespaces_come_from_ns_forms(sample_root: Path) -> None:
    provider = SourceTreeProvider([sample_root])
    assert sorted(provider.namespaces()) == ["sample.core", "sample.util"]


def test_public_definitions_are_collected(sample_root: Path) -> None:
    symbols = _by_name(SourceTreeProvider([sample_root]), "sample.core")

    assert sorted(symbols) == ["*depth*", "greet", "greeting", "render", "shout", "with-greeting"]

    depth = symbols["*depth*"]
    assert (depth.is_macro, depth.is_invocable, depth.source_line) == (False, False, 5)
    assert symbols["greeting"].doc == "Greeting used by greet."
    assert symbols["greeting"].source_line == 7

    macro = symbols["with-greeting"]
    assert (macro.is_macro, macro.is_invocable) == (True, True)
    assert macro.arglists == ["[name & body]"]
    assert macro.source_line == 17

    assert symbols["render"].is_invocable
    assert symbols["render"].arglists == []
    assert symbols["shout"].is_invocable
    assert symbols["shout"].arglists == ["[s]"]


def test_later_definitions_win(sample_root: Path) -> None:
    greet = _by_name(SourceTreeProvider([sample_root]), "sample.core")["greet"]

    assert greet.doc == "redefined later"
    assert greet.arglists == ["[who]"]
    assert greet.source_line == 24


def test_multi_arity_arglists(tmp_path: Path) -> None:
    path = tmp_path / "multi.clj"
    path.write_text(
        '(ns multi)\n(defn greet "Says hello." ([] 1) ([who] 2) ([who & more] 3))\n',
        encoding="utf-8",
    )

    (greet,) = SourceTreeProvider([path]).list_public_symbols("multi")

    assert greet.arglists == ["[]", "[who]", "[who & more]"]
    assert greet.doc == "Says hello."


def test_locations_point_at_extractable_forms(sample_root: Path) -> None:
    symbols = _by_name(SourceTreeProvider([sample_root]), "sample.core")
    meta = symbols["with-greeting"]

    text = read_form_at(Path(meta.source_file), meta.source_line)

    assert text.startswith("(defmacro with-greeting")
    assert text.endswith("~@body))")


def test_private_and_unreadable_sources_are_skipped(sample_root: Path) -> None:
    provider = SourceTreeProvider([sample_root])

    assert "helper" not in _by_name(provider, "sample.core")
    assert "secret" not in _by_name(provider, "sample.core")
    assert [meta.name for meta in provider.list_public_symbols("sample.util")] == ["helper"]
    with pytest.raises(NamespaceUnavailableInVersion):
        provider.list_public_symbols("sample.broken")


def test_missing_root_yields_no_namespaces(tmp_path: Path) -> None:
    assert SourceTreeProvider([tmp_path / "nowhere"]).namespaces() == []


def test_map_metadata_and_attr_maps(tmp_path: Path) -> None:
    path = tmp_path / "meta.clj"
    path.write_text(
        "(ns meta.core)\n"
        '(defn ^{:added "1.0" :static true} inc2 [x] (+ x 2))\n'
        '(defn with-attrs "d" {:added "1.0" :arglists \'([x] [x y])} ([x] x) ([x y] y))\n'
        "(defn ^{:private true} tucked [] nil)\n"
        '(defn concealed "d" {:private true} [] nil)\n',
        encoding="utf-8",
    )

    symbols = _by_name(SourceTreeProvider([path]), "meta.core")

    assert sorted(symbols) == ["inc2", "with-attrs"]
    assert symbols["inc2"].arglists == ["[x]"]
    assert symbols["with-attrs"].doc == "d"
    assert symbols["with-attrs"].arglists == ["[x]", "[x y]"]
