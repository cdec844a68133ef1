"""Symbol metadata providers and their factory."""

from __future__ import annotations

from typing import Callable, Dict

from ..config import ConfigError, MetadataSource
from .base import MetadataProvider
from .manifest import ManifestProvider
from .source_tree import SourceTreeProvider

_BUILTIN_FACTORIES: Dict[str, Callable[[MetadataSource], MetadataProvider]] = {
    "manifest": lambda source: ManifestProvider(source.paths),
    "source": lambda source: SourceTreeProvider(source.paths),
}


def build_provider(source: MetadataSource | None, *, version: str | None = None) -> MetadataProvider:
    """Instantiate the metadata provider described by ``source``."""
    if source is None:
        label = f" for version {version}" if version else ""
        raise ConfigError(f"No metadata source configured{label}")
    factory = _BUILTIN_FACTORIES.get(source.kind)
    if factory is None:
        raise ConfigError(f"Unknown metadata kind {source.kind!r}")
    return factory(source)


__all__ = [
    "ManifestProvider",
    "MetadataProvider",
    "SourceTreeProvider",
    "build_provider",
]
