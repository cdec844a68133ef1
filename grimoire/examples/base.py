"""Base classes for external example-content providers."""

from abc import ABC, abstractmethod
from typing import List

from ..models import Example


class ExampleProvider(ABC):
    """Supplies usage examples for a symbol; returning nothing is not an error."""

    @abstractmethod
    def examples_for(self, namespace: str, name: str) -> List[Example]:
        """Return zero or more examples for ``namespace/name``."""
