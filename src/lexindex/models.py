"""Core LexIndex data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(slots=True)
class Document:
    """Decoded corpus file, identified by its path relative to the corpus root."""

    path: str
    text: str


@dataclass(frozen=True, slots=True)
class ChunkMetadata:
    """Where a chunk came from."""

    file: str
    length: int

    def as_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "length": self.length}


@dataclass(frozen=True, slots=True)
class ChunkRecord:
    """Window of document text paired with metadata."""

    text: str
    metadata: ChunkMetadata
