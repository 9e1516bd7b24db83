"""FastAPI application exposing the dataset index to the chat layer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, List

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from lexindex.config import AppConfig
from lexindex.index.indexer import DatasetIndex, IndexLoadError
from lexindex.index.search import SearchResult, format_context

LOGGER = logging.getLogger(__name__)

MAX_TOP_K = 8

app = FastAPI(title="LexIndex Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_index: DatasetIndex | None = None


class SearchPayload(BaseModel):
    query: str
    top_k: int = 4


def build_index(config: AppConfig, base_dir: Path | None = None) -> DatasetIndex:
    return DatasetIndex(
        config.resolve_data_dir(base_dir),
        readme_path=config.resolve_readme_path(base_dir),
        chunk_chars=config.chunk_chars,
        overlap=config.overlap,
    )


def configure_index(index: DatasetIndex | None) -> None:
    """Replace the process-wide index (``None`` resets to lazy defaults)."""
    global _index
    _index = index


def _publish_default_index() -> tuple[DatasetIndex, bool]:
    """Return the shared index, creating it unloaded if needed."""
    global _index
    if _index is not None:
        return _index, False
    _index = build_index(AppConfig(), Path.cwd())
    return _index, True


def get_index() -> DatasetIndex:
    """Shared index, loaded from disk the first time it is created.

    A failed first load leaves the empty snapshot in place until a reload
    succeeds.
    """
    index, created = _publish_default_index()
    if created:
        try:
            index.load()
        except IndexLoadError as exc:
            LOGGER.warning("Serving an empty index until the next reload: %s", exc)
    return index


def get_reload_target() -> DatasetIndex:
    """Shared index without loading it; the reload endpoint does that itself."""
    return _publish_default_index()[0]


def _clamp_top_k(top_k: int) -> int:
    return max(1, min(top_k, MAX_TOP_K))


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/api/datasets/stats")
async def dataset_stats(index: DatasetIndex = Depends(get_index)) -> dict[str, Any]:
    return {"success": True, "stats": index.stats().as_dict()}


@app.post("/api/datasets/reload")
async def reload_datasets(index: DatasetIndex = Depends(get_reload_target)) -> dict[str, Any]:
    try:
        stats = await asyncio.to_thread(index.load)
    except IndexLoadError as exc:
        LOGGER.warning("Reload failed: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to reload datasets") from exc
    return {"success": True, "stats": stats.as_dict()}


def _run_search(payload: SearchPayload, index: DatasetIndex) -> List[SearchResult]:
    query = payload.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Empty query")
    return index.search(query, top_k=_clamp_top_k(payload.top_k))


@app.post("/search")
async def search_datasets(
    payload: SearchPayload, index: DatasetIndex = Depends(get_index)
) -> dict[str, Any]:
    results = _run_search(payload, index)
    return {"results": [result.as_dict() for result in results]}


@app.post("/context")
async def search_context(
    payload: SearchPayload, index: DatasetIndex = Depends(get_index)
) -> dict[str, Any]:
    results = _run_search(payload, index)
    return {
        "context": format_context(results),
        "results": [result.as_dict() for result in results],
    }
