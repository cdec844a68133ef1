"""Error taxonomy for documentation tree generation."""

from __future__ import annotations

from pathlib import Path


class GrimoireError(RuntimeError):
    """Base class for errors raised while generating a documentation tree."""


class MetadataUnavailable(GrimoireError):
    """Raised when a symbol's metadata cannot be turned into a usable record."""

    def __init__(self, identity: str, reason: str) -> None:
        super().__init__(f"Metadata unavailable for {identity}: {reason}")
        self.identity = identity
        self.reason = reason


class SourceUnresolvable(GrimoireError):
    """Raised when a symbol's defining source text cannot be located or read."""


class NamespaceUnavailableInVersion(GrimoireError):
    """Raised by metadata providers that do not know a requested namespace."""

    def __init__(self, namespace: str, version: str | None = None) -> None:
        where = f" in version {version}" if version else ""
        super().__init__(f"Namespace {namespace} is not available{where}")
        self.namespace = namespace
        self.version = version


class NameCollision(GrimoireError):
    """Raised when a symbol name cannot be given a unique path segment."""

    def __init__(self, raw: str, sanitized: str, existing: str | None = None) -> None:
        if existing is None:
            message = f"Name {raw!r} sanitizes to an empty path segment"
        else:
            message = f"Name {raw!r} collides with {existing!r} as {sanitized!r}"
        super().__init__(message)
        self.raw = raw
        self.sanitized = sanitized
        self.existing = existing


class FilesystemFailure(GrimoireError):
    """Raised when a directory or fragment cannot be created or written."""

    def __init__(self, path: Path, operation: str, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to {operation} {path}{detail}")
        self.path = path
        self.operation = operation


__all__ = [
    "FilesystemFailure",
    "GrimoireError",
    "MetadataUnavailable",
    "NameCollision",
    "NamespaceUnavailableInVersion",
    "SourceUnresolvable",
]
