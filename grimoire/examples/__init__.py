"""External example providers and their factory."""

from __future__ import annotations

from typing import Optional

from ..config import ConfigError, ExampleSourceConfig
from .base import ExampleProvider
from .directory import DirectoryExampleProvider
from .http import HttpExampleProvider


def build_example_provider(config: Optional[ExampleSourceConfig]) -> Optional[ExampleProvider]:
    """Instantiate the example provider for a version, if one is configured."""
    if config is None:
        return None
    if config.kind == "http" and config.base_url:
        return HttpExampleProvider(config.base_url, timeout=config.timeout)
    if config.kind == "directory" and config.path is not None:
        return DirectoryExampleProvider(config.path)
    raise ConfigError(f"Incomplete examples configuration of kind {config.kind!r}")


__all__ = [
    "DirectoryExampleProvider",
    "ExampleProvider",
    "HttpExampleProvider",
    "build_example_provider",
]
