"""Logging utilities for grimoire runs."""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_LOGGER_NAME = "grimoire"

_SYMBOL: contextvars.ContextVar[str] = contextvars.ContextVar("grimoire_symbol", default="")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the grimoire hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class SymbolContextFilter(logging.Filter):
    """Sets ``record.symbol`` to ``"[<version> <ns>/<name>] "`` inside ``symbol_context``."""

    def filter(self, record: logging.LogRecord) -> bool:
        current = _SYMBOL.get()
        record.symbol = f"[{current}] " if current else ""
        return True


@contextmanager
def symbol_context(version: str, identity: str) -> Iterator[None]:
    """Tag every record logged in this block (and this thread) with a symbol."""
    token = _SYMBOL.set(f"{version} {identity}")
    try:
        yield
    finally:
        _SYMBOL.reset(token)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the grimoire logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    context = SymbolContextFilter()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(context)
    stream_handler.setFormatter(logging.Formatter("[grimoire] %(levelname)s %(symbol)s%(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.addFilter(context)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(symbol)s%(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["SymbolContextFilter", "configure_logging", "get_logger", "symbol_context"]
