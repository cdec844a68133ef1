"""Versioned static documentation trees for namespaced symbol tables."""

__version__ = "0.3.0"
