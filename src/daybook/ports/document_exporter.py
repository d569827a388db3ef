"""Document export interface."""

from pathlib import Path
from typing import Protocol

from daybook.core.entries import Entry


class DocumentExporter(Protocol):
    """Interface for writing entries to a document, oldest first."""

    def export(self, entries: list[Entry], path: Path | str) -> Path:
        """Write entries to path and return it."""
        ...
