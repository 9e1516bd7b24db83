"""Dataset indexing pipeline: load, chunk, vectorize and publish a snapshot."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from lexindex.index.search import SearchResult, rank
from lexindex.index.vectors import VectorSpace, build_vector_space, vectorize_query
from lexindex.ingestion.loader import load_corpus
from lexindex.models import ChunkMetadata, ChunkRecord, Document
from lexindex.utils.text import chunk_text

LOGGER = logging.getLogger(__name__)

DEFAULT_CHUNK_CHARS = 1000
DEFAULT_OVERLAP = 200
DEFAULT_TOP_K = 4


class IndexLoadError(RuntimeError):
    """Raised when a rebuild cannot read the corpus at all."""


@dataclass(slots=True)
class IndexStats:
    files: List[str] = field(default_factory=list)
    num_files: int = 0
    num_chunks: int = 0
    vocabulary_size: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "files": list(self.files),
            "numFiles": self.num_files,
            "numChunks": self.num_chunks,
            "vocabularySize": self.vocabulary_size,
        }


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Everything one ``load()`` produced. Never mutated after publication."""

    files: Tuple[str, ...]
    chunks: Tuple[ChunkRecord, ...]
    space: VectorSpace

    def __post_init__(self) -> None:
        if len(self.chunks) != len(self.space.vectors):
            raise ValueError(
                f"chunks and vectors are misaligned ({len(self.chunks)} != {len(self.space.vectors)})"
            )

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls(files=(), chunks=(), space=VectorSpace.empty())


def chunk_documents(
    documents: List[Document], *, chunk_chars: int, overlap: int
) -> List[ChunkRecord]:
    """Chunk documents in order, keeping document then window order."""
    records: List[ChunkRecord] = []
    for document in documents:
        for text in chunk_text(document.text, max_chars=chunk_chars, overlap=overlap):
            records.append(
                ChunkRecord(text=text, metadata=ChunkMetadata(file=document.path, length=len(text)))
            )
    return records


def build_snapshot(
    documents: List[Document],
    *,
    chunk_chars: int = DEFAULT_CHUNK_CHARS,
    overlap: int = DEFAULT_OVERLAP,
) -> Snapshot:
    chunks = chunk_documents(documents, chunk_chars=chunk_chars, overlap=overlap)
    space = build_vector_space(chunk.text for chunk in chunks)
    return Snapshot(
        files=tuple(document.path for document in documents),
        chunks=tuple(chunks),
        space=space,
    )


def _stats_for(snapshot: Snapshot) -> IndexStats:
    return IndexStats(
        files=list(snapshot.files),
        num_files=len(snapshot.files),
        num_chunks=len(snapshot.chunks),
        vocabulary_size=snapshot.space.vocabulary_size,
    )


class DatasetIndex:
    """In-process TF-IDF index over a directory of text documents.

    ``load()`` rebuilds everything from disk and swaps the result in with one
    assignment, so ``search()`` and ``stats()`` always see a complete snapshot.
    """

    def __init__(
        self,
        root: Path,
        *,
        readme_path: Optional[Path] = None,
        chunk_chars: int = DEFAULT_CHUNK_CHARS,
        overlap: int = DEFAULT_OVERLAP,
    ) -> None:
        self.root = Path(root)
        self.readme_path = Path(readme_path) if readme_path is not None else self.root.parent / "README.md"
        self.chunk_chars = chunk_chars
        self.overlap = overlap
        self._snapshot = Snapshot.empty()
        self._load_lock = threading.Lock()

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def load(self) -> IndexStats:
        """Rebuild the index from disk.

        Raises ``IndexLoadError`` if the corpus cannot be traversed; the
        previous snapshot stays in place in that case.
        """
        with self._load_lock:
            try:
                documents = load_corpus(self.root, extra_files=[self.readme_path])
            except OSError as exc:
                LOGGER.error("Rebuild of %s failed, keeping previous index: %s", self.root, exc)
                raise IndexLoadError(f"Failed to load corpus from {self.root}: {exc}") from exc

            snapshot = build_snapshot(documents, chunk_chars=self.chunk_chars, overlap=self.overlap)
            self._snapshot = snapshot

        stats = _stats_for(snapshot)
        LOGGER.info(
            "Indexed %d files into %d chunks (vocabulary: %d terms)",
            stats.num_files,
            stats.num_chunks,
            stats.vocabulary_size,
        )
        return stats

    def search(self, query: str, top_k: int = DEFAULT_TOP_K) -> List[SearchResult]:
        snapshot = self._snapshot
        if not snapshot.chunks:
            return []

        query_vector, query_norm = vectorize_query(query, snapshot.space.idf)
        ranked = rank(
            query_vector,
            query_norm,
            snapshot.space.vectors,
            snapshot.space.norms,
            top_k=top_k,
        )
        results: List[SearchResult] = []
        for index, score in ranked:
            chunk = snapshot.chunks[index]
            results.append(SearchResult(text=chunk.text, score=score, meta=chunk.metadata))
        return results

    def stats(self) -> IndexStats:
        return _stats_for(self._snapshot)
