"""Command line interface for LexIndex."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from lexindex.config import AppConfig
from lexindex.index.indexer import DatasetIndex, IndexLoadError
from lexindex.web.app import app as web_app
from lexindex.web.app import build_index, configure_index


console = Console()
app = typer.Typer(help="LexIndex - lexical TF-IDF search over a folder of documents")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_index(data_dir: Path | None) -> DatasetIndex:
    config = AppConfig(data_dir=data_dir)
    index = build_index(config, Path.cwd())
    try:
        index.load()
    except IndexLoadError as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(code=1) from exc
    return index


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    data_dir: Path = typer.Option(None, "--data-dir", help="Corpus directory"),
    top_k: int = typer.Option(AppConfig().top_k, help="Number of results to display"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rank corpus chunks against a query."""
    _setup_logging(verbose)
    index = _load_index(data_dir)

    results = index.search(query, top_k=top_k)
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("File")
    table.add_column("Length")
    table.add_column("Snippet")

    for result in results:
        snippet = result.text.replace("\n", " ")
        table.add_row(f"{result.score:.4f}", result.meta.file, str(result.meta.length), snippet[:180])

    console.print(table)


@app.command()
def stats(
    data_dir: Path = typer.Option(None, "--data-dir", help="Corpus directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show what a fresh load of the corpus contains."""
    _setup_logging(verbose)
    summary = _load_index(data_dir).stats()

    console.print(
        f"Files: {summary.num_files}, chunks: {summary.num_chunks}, "
        f"vocabulary: {summary.vocabulary_size}"
    )
    for name in summary.files:
        console.print(f"  {name}")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    data_dir: Path = typer.Option(None, "--data-dir", help="Corpus directory"),
) -> None:
    """Start the HTTP interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    _setup_logging(False)
    index = _load_index(data_dir)
    configure_index(index)

    console.print(f"Starting web interface on http://{host}:{port} (corpus: {index.root})")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    app()
