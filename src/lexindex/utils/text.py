"""Text helpers: tokenization and overlapping character windows."""

from __future__ import annotations

import re
from typing import Iterator, List

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str) -> List[str]:
    """Lower-case ``text`` and split it into alphanumeric tokens.

    Any character that is neither ``[a-z0-9]`` nor whitespace acts as a separator.
    """
    return _NON_ALNUM.sub(" ", text.lower()).split()


def iter_windows(text: str, *, max_chars: int = 1000, overlap: int = 200) -> Iterator[tuple[int, int]]:
    """Yield ``(start, end)`` offsets of overlapping windows over ``text``.

    Every window but the last advances ``start`` strictly. When the overlap
    would keep ``start`` in place (``overlap >= max_chars``) the next window
    begins at the previous end instead, so iteration always terminates.
    """
    if max_chars < 1:
        raise ValueError(f"max_chars must be positive, got {max_chars}")
    overlap = max(overlap, 0)
    length = len(text)
    if length == 0:
        return

    start = 0
    while True:
        end = min(start + max_chars, length)
        yield start, end
        if end == length:
            return
        next_start = max(0, end - overlap)
        if next_start <= start:
            next_start = end
        start = next_start


def chunk_text(text: str, *, max_chars: int = 1000, overlap: int = 200) -> List[str]:
    """Split text into overlapping character chunks.

    Text shorter than ``max_chars`` comes back as a single chunk; empty text
    yields no chunks.
    """
    return [text[start:end] for start, end in iter_windows(text, max_chars=max_chars, overlap=overlap)]
