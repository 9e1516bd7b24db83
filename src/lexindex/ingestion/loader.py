"""Corpus loading: enumerate source files and decode them to plain text."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

from lexindex.models import Document
from lexindex.utils.files import iter_corpus_paths, relative_name

LOGGER = logging.getLogger(__name__)


def decode_text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def render_json(raw: str, path: Path) -> str:
    """Return readable text for JSON content.

    A top-level string is used verbatim, any other value is pretty-printed and
    content that fails to parse is returned unchanged.
    """
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        LOGGER.debug("Keeping %s as raw text, JSON parse failed: %s", path, exc)
        return raw
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False)


def read_document(path: Path) -> str:
    """Read one corpus file as text. Raises ``OSError`` if it cannot be read."""
    text = decode_text(path.read_bytes())
    if path.suffix.lower() == ".json":
        text = render_json(text, path)
    return text


def load_corpus(root: Path, *, extra_files: Optional[List[Path]] = None) -> List[Document]:
    """Load every corpus document below ``root`` plus any existing ``extra_files``.

    A missing ``root`` is created empty. Files that cannot be read are logged
    and skipped; errors while walking the tree itself propagate as ``OSError``.
    """
    root = Path(root)
    root.mkdir(parents=True, exist_ok=True)

    paths = list(iter_corpus_paths(root))
    for extra in extra_files or []:
        if extra.is_file() and extra not in paths:
            paths.append(extra)

    documents: List[Document] = []
    for path in paths:
        try:
            text = read_document(path)
        except OSError as exc:
            LOGGER.warning("Skipping unreadable file %s: %s", path, exc)
            continue
        documents.append(Document(path=relative_name(path, root), text=text))

    LOGGER.debug("Loaded %d documents from %s", len(documents), root)
    return documents
