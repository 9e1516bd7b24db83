"""Cosine ranking over sparse chunk vectors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from lexindex.models import ChunkMetadata


@dataclass(slots=True)
class SearchResult:
    text: str
    score: float
    meta: ChunkMetadata

    def as_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "score": self.score, "meta": self.meta.as_dict()}


def dot_product(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    if len(b) < len(a):
        a, b = b, a
    total = 0.0
    for term, weight in a.items():
        other = b.get(term)
        if other:
            total += weight * other
    return total


def cosine_similarity(
    a: Mapping[str, float], b: Mapping[str, float], norm_a: float, norm_b: float
) -> float:
    # Capped at 1.0 so rounding never reports more than a perfect match.
    return min(dot_product(a, b) / (norm_a * norm_b), 1.0)


def rank(
    query_vector: Mapping[str, float],
    query_norm: float,
    vectors: Sequence[Mapping[str, float]],
    norms: Sequence[float],
    *,
    top_k: int,
) -> List[Tuple[int, float]]:
    """Score every chunk and return up to ``top_k`` ``(index, score)`` pairs.

    Ordering is by descending score, then ascending chunk index. Pairs with a
    score of zero or less are never returned.
    """
    if top_k <= 0 or not vectors or not query_vector:
        return []

    scored = [
        (index, cosine_similarity(query_vector, vector, query_norm, norms[index]))
        for index, vector in enumerate(vectors)
    ]
    scored.sort(key=lambda item: (-item[1], item[0]))

    ranked: List[Tuple[int, float]] = []
    for index, score in scored[:top_k]:
        if score <= 0:
            break
        ranked.append((index, score))
    return ranked


def format_context(results: Sequence[SearchResult]) -> str:
    """Render ranked results as numbered document blocks for a language model prompt."""
    blocks = [
        f"# Document {position} (score={result.score:.3f}, file={result.meta.file})\n{result.text}"
        for position, result in enumerate(results, start=1)
    ]
    return "\n\n".join(blocks)
