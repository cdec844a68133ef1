"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from grimoire.cli import _build_parser, main
from tests._fixtures.site_builder import SiteBuilder, demo_config


def test_cli_defaults() -> None:
    args = _build_parser().parse_args([])

    assert args.config == "grimoire.yml"
    assert args.output is None
    assert args.versions is None
    assert args.verbose is False
    assert args.log_file is None


def test_cli_accepts_repeated_only_version() -> None:
    args = _build_parser().parse_args(["--only-version", "1.4.0", "--only-version", "1.6.0", "-v"])

    assert args.versions == ["1.4.0", "1.6.0"]
    assert args.verbose is True


def test_main_generates_tree_and_prints_summary(
    demo_site: SiteBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    demo_site.config(demo_config())

    main(["-c", str(demo_site.root / "grimoire.yml")])

    out = capsys.readouterr().out
    assert "9.9.9: 1 namespaces, 1 symbols written" in out
    assert demo_site.output("9.9.9", "demo", "add_DASH_two", "index.md").is_file()


def test_main_output_override_and_log_file(
    demo_site: SiteBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    demo_site.config(demo_config())
    target = tmp_path / "elsewhere"
    log_file = tmp_path / "run.log"

    main(["-c", str(demo_site.root), "-o", str(target), "--log-file", str(log_file)])

    assert (target / "9.9.9" / "index.md").is_file()
    assert not demo_site.output().exists()
    assert "Processing version 9.9.9" in log_file.read_text(encoding="utf-8")


def test_main_reports_failures_and_skips(
    demo_site: SiteBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    demo_site.manifest({"demo": [{"kind": "function"}]})
    demo_site.config(demo_config(namespaces=["demo", "missing"]))

    main(["-c", str(demo_site.root)])

    out = capsys.readouterr().out
    assert "9.9.9: 1 namespaces, 0 symbols written" in out
    assert "  skipped missing: Namespace missing is not available" in out
    assert "  failed demo/<unnamed>: Metadata unavailable for demo/None" in out


def test_main_exits_on_missing_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["-c", str(tmp_path / "nope.yml")])

    assert excinfo.value.code == 1
    assert "Configuration file not found" in capsys.readouterr().err


def test_main_exits_on_unknown_version(demo_site: SiteBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    demo_site.config(demo_config())

    with pytest.raises(SystemExit) as excinfo:
        main(["-c", str(demo_site.root), "--only-version", "0.0.1"])

    assert excinfo.value.code == 1
    assert "Unknown versions requested: 0.0.1" in capsys.readouterr().err
