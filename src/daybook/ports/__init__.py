"""Ports - interfaces/protocols for external dependencies."""

from .entry_store import EntryStore
from .auth_provider import AuthProvider
from .document_exporter import DocumentExporter

__all__ = [
    "EntryStore",
    "AuthProvider",
    "DocumentExporter",
]
