"""Tests for grimoire.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from grimoire.cli import main
from grimoire.logging import configure_logging, get_logger, symbol_context
from tests._fixtures.site_builder import SiteBuilder, demo_config


def test_records_carry_the_active_symbol(tmp_path: Path) -> None:
    log_file = tmp_path / "run.log"
    configure_logging(log_file=log_file)
    logger = get_logger("render")

    logger.info("before")
    with symbol_context("1.6.0", "clojure.core/swap!"):
        logger.warning("inside")
    logger.info("after")

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert lines[0].endswith("grimoire.render: before")
    assert lines[1].endswith("grimoire.render: [1.6.0 clojure.core/swap!] inside")
    assert lines[2].endswith("grimoire.render: after")


def test_configure_logging_replaces_handlers(tmp_path: Path) -> None:
    configure_logging()
    logger = configure_logging(verbose=True, log_file=tmp_path / "run.log")

    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert len(logger.handlers) == 2


def test_symbol_work_is_tagged_during_a_run(demo_site: SiteBuilder, tmp_path: Path) -> None:
    demo_site.config(demo_config())
    log_file = tmp_path / "run.log"

    main(["-c", str(demo_site.root), "-v", "--log-file", str(log_file)])

    text = log_file.read_text(encoding="utf-8")
    assert "[9.9.9 demo/add-two] Wrote docs, src, examples, index" in text
    assert "Processing version 9.9.9" in text
