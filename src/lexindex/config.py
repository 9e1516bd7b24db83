"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_DIR_ENV = "LEXINDEX_DATA_DIR"


def _get_default_data_dir() -> Path:
    """Get the default corpus directory, honouring the environment override."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override)
    return Path("datasets")


@dataclass(slots=True)
class AppConfig:
    data_dir: Path | None = None
    readme_path: Path | None = None
    chunk_chars: int = 1000
    overlap: int = 200
    top_k: int = 4

    def __post_init__(self) -> None:
        if self.data_dir is None:
            self.data_dir = _get_default_data_dir()
        if self.readme_path is None:
            self.readme_path = Path(self.data_dir).parent / "README.md"

    def resolve_data_dir(self, base_dir: Path | None = None) -> Path:
        if self.data_dir is None:
            self.data_dir = _get_default_data_dir()
        if Path(self.data_dir).is_absolute() or base_dir is None:
            return Path(self.data_dir)
        return base_dir / self.data_dir

    def resolve_readme_path(self, base_dir: Path | None = None) -> Path:
        if self.readme_path is None:
            self.readme_path = Path(self.data_dir).parent / "README.md"
        if Path(self.readme_path).is_absolute() or base_dir is None:
            return Path(self.readme_path)
        return base_dir / self.readme_path
