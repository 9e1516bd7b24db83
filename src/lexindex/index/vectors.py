"""Sparse TF-IDF vector space over chunk texts.

Vectors are plain ``dict`` objects keyed by term, so memory grows with the
number of distinct (term, chunk) pairs rather than vocabulary x chunks.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Sequence, Tuple

from lexindex.utils.text import tokenize

SparseVector = Dict[str, float]


@dataclass(frozen=True, slots=True)
class VectorSpace:
    """IDF table plus one weighted vector and norm per chunk, index-aligned."""

    idf: Mapping[str, float]
    vectors: Tuple[SparseVector, ...]
    norms: Tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.vectors) != len(self.norms):
            raise ValueError(
                f"vectors and norms are misaligned ({len(self.vectors)} != {len(self.norms)})"
            )

    @property
    def vocabulary_size(self) -> int:
        return len(self.idf)

    @classmethod
    def empty(cls) -> "VectorSpace":
        return cls(idf={}, vectors=(), norms=())


def count_terms(text: str) -> Counter[str]:
    return Counter(tokenize(text))


def inverse_document_frequency(num_chunks: int, df: int) -> float:
    """Smoothed IDF: ``ln((N + 1) / (df + 1)) + 1``, always positive for ``df <= N``."""
    return math.log((num_chunks + 1) / (df + 1)) + 1.0


def term_frequency_weight(count: int) -> float:
    return 1.0 + math.log(count)


def compute_idf(term_counts: Sequence[Mapping[str, int]]) -> Dict[str, float]:
    """Build the IDF table from per-chunk term counts.

    Each chunk contributes at most once to a term's document frequency.
    """
    df: Counter[str] = Counter()
    for counts in term_counts:
        df.update(counts.keys())
    num_chunks = len(term_counts)
    return {term: inverse_document_frequency(num_chunks, freq) for term, freq in df.items()}


def weigh_terms(counts: Mapping[str, int], idf: Mapping[str, float]) -> Tuple[SparseVector, float]:
    """Weight ``counts`` as ``(1 + ln tf) * idf`` and return ``(vector, norm)``.

    Terms missing from ``idf`` are dropped. An empty vector has norm 1.
    """
    vector: SparseVector = {}
    sum_squares = 0.0
    for term, count in counts.items():
        weight = term_frequency_weight(count) * idf.get(term, 0.0)
        if weight > 0:
            vector[term] = weight
            sum_squares += weight * weight
    norm = math.sqrt(sum_squares) if sum_squares > 0 else 1.0
    return vector, norm


def build_vector_space(chunks: Iterable[str]) -> VectorSpace:
    """Compute the IDF table and weighted chunk vectors for ``chunks``."""
    term_counts = [count_terms(chunk) for chunk in chunks]
    idf = compute_idf(term_counts)

    vectors = []
    norms = []
    for counts in term_counts:
        vector, norm = weigh_terms(counts, idf)
        vectors.append(vector)
        norms.append(norm)
    return VectorSpace(idf=idf, vectors=tuple(vectors), norms=tuple(norms))


def vectorize_query(query: str, idf: Mapping[str, float]) -> Tuple[SparseVector, float]:
    """Vectorize a query against a previously learned IDF table.

    IDF is never re-estimated from the query; unknown terms carry no weight.
    """
    return weigh_terms(count_terms(query), idf)
