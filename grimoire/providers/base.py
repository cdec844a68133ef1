"""Base classes for symbol metadata providers."""

from abc import ABC, abstractmethod
from typing import Sequence

from ..models import SymbolMeta


class MetadataProvider(ABC):
    """Contract for adapters that expose a runtime's public symbols."""

    @abstractmethod
    def namespaces(self) -> Sequence[str]:
        """Return the namespaces this provider can describe."""

    @abstractmethod
    def list_public_symbols(self, namespace: str) -> Sequence[SymbolMeta]:
        """Return metadata for every public binding in ``namespace``.

        Raises ``NamespaceUnavailableInVersion`` when the namespace is unknown.
        """
