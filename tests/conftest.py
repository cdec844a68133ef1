from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.site_builder import SiteBuilder


@pytest.fixture(autouse=True)
def reset_grimoire_logger():
    """Drop handlers installed by ``configure_logging`` so they do not outlive a test."""
    yield
    logger = logging.getLogger("grimoire")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def site_builder(tmp_path: Path) -> SiteBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return SiteBuilder(tmp_path)


@pytest.fixture
def demo_site(site_builder: SiteBuilder) -> SiteBuilder:
    """A single `demo` namespace with one function, documented for version 9.9.9."""
    site_builder.write({"src/demo.clj": "(defn add-two [x] (+ x 2))\n"})
    site_builder.manifest(
        {
            "demo": [
                {
                    "name": "add-two",
                    "kind": "function",
                    "doc": "adds two",
                    "arglists": [["x"]],
                    "file": "demo.clj",
                    "line": 1,
                }
            ]
        }
    )
    return site_builder
