"""Utility helpers for working with files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

CORPUS_SUFFIXES = frozenset({".txt", ".md", ".json"})


def is_corpus_file(path: Path) -> bool:
    return path.suffix.lower() in CORPUS_SUFFIXES


def iter_corpus_paths(root: Path) -> Iterator[Path]:
    """Yield text, markdown and JSON files below ``root`` in sorted order.

    Directories are skipped; anything else with a matching suffix (including
    dangling links) is yielded so the reader can report it.
    """
    for path in sorted(root.rglob("*")):
        if path.is_dir():
            continue
        if is_corpus_file(path):
            yield path


def relative_name(path: Path, root: Path) -> str:
    """Path of ``path`` relative to ``root`` with POSIX separators.

    Files outside ``root`` get a ``..``-prefixed name.
    """
    return Path(os.path.relpath(path, root)).as_posix()
