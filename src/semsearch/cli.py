"""Typer CLI definition for semsearch."""

import dataclasses
import logging
import sys
from pathlib import Path

import typer

from .config import load_config
from .core import SemanticSearch
from .errors import SemanticSearchError
from .models_manager import (
    download_models,
    ensure_models_available,
    get_model_cache_dir,
)

app = typer.Typer(help="Rank and pair text by semantic similarity")


def read_choices(choices: list[str] | None, file: Path | None) -> list[str]:
    """Collect choices from arguments, a file, or stdin (in priority order).

    Files and stdin hold one choice per line; blank lines are skipped.

    Raises:
        ValueError: If no choices are provided
    """
    if choices:
        return list(choices)

    if file is not None:
        lines = file.read_text().splitlines()
    elif not sys.stdin.isatty():
        lines = sys.stdin.read().splitlines()
    else:
        lines = []

    result = [line.strip() for line in lines if line.strip()]
    if not result:
        raise ValueError("No choices provided")
    return result


def build_search(ctx: typer.Context) -> SemanticSearch:
    """Create a search from config plus the global command-line overrides."""
    options = ctx.obj or {}
    config = load_config()

    if options.get("model"):
        config = dataclasses.replace(
            config,
            embeddings=dataclasses.replace(config.embeddings, model=options["model"]),
        )
    if options.get("similarity"):
        config = dataclasses.replace(
            config,
            search=dataclasses.replace(config.search, similarity=options["similarity"]),
        )

    ensure_models_available(config.embeddings.model)
    return SemanticSearch.from_config(config)


def fail(error: Exception, debug: bool) -> typer.Exit:
    """Report an error on stderr and return the exit to raise."""
    if debug:
        typer.echo(f"Debug - {type(error).__name__}: {error!r}", err=True)
    elif isinstance(error, (SemanticSearchError, ValueError, KeyError, OSError)):
        message = error.args[0] if isinstance(error, KeyError) else error
        typer.echo(f"Error: {message}", err=True)
    else:
        typer.echo("Error: An unexpected error occurred", err=True)
    return typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    model: str | None = typer.Option(
        None, "-m", "--model", help="Embedding model (from config if omitted)"
    ),
    similarity: str | None = typer.Option(
        None, "-s", "--similarity", help="Similarity measure: cosine or dot"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show verbose errors and logs"),
) -> None:
    """Rank and pair text by semantic similarity."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    ctx.obj = {"model": model, "similarity": similarity, "debug": debug}


@app.command()
def best(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text to compare against"),
    choices: list[str] | None = typer.Argument(None, help="Candidate texts"),
    file: Path | None = typer.Option(
        None, "-f", "--file", help="Read choices from file, one per line"
    ),
) -> None:
    """Print the choice most similar to QUERY."""
    debug = ctx.obj["debug"]
    try:
        items = read_choices(choices, file)
        result = build_search(ctx).find_most_similar(query, items)
    except Exception as e:
        raise fail(e, debug) from None

    typer.echo(f"{result.score:.4f}\t{result.item}")


@app.command()
def rank(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text to compare against"),
    choices: list[str] | None = typer.Argument(None, help="Candidate texts"),
    file: Path | None = typer.Option(
        None, "-f", "--file", help="Read choices from file, one per line"
    ),
    top: int | None = typer.Option(
        None, "-n", "--top", min=0, help="Show only the best N"
    ),
    threshold: float | None = typer.Option(
        None, "-t", "--threshold", help="Hide choices scoring below this"
    ),
) -> None:
    """Print choices ordered by similarity to QUERY, best first."""
    debug = ctx.obj["debug"]
    try:
        items = read_choices(choices, file)
        results = build_search(ctx).order_by_similarity(
            query, items, threshold=threshold
        )
        if top is not None:
            results = results[:top]
    except Exception as e:
        raise fail(e, debug) from None

    for result in results:
        typer.echo(f"{result.score:.4f}\t{result.item}")


@app.command()
def pair(
    ctx: typer.Context,
    left: list[str] = typer.Option(..., "-l", "--left", help="Item of the first group"),
    right: list[str] = typer.Option(
        ..., "-r", "--right", help="Item of the second group"
    ),
) -> None:
    """Pair --left items with --right items for maximum total similarity."""
    debug = ctx.obj["debug"]
    try:
        pairs = build_search(ctx).pair_scores(left, right)
    except Exception as e:
        raise fail(e, debug) from None

    for matched in pairs:
        typer.echo(f"{matched.left}\t{matched.right}\t{matched.score:.4f}")


@app.command("download-models")
def download_models_command(ctx: typer.Context) -> None:
    """Download the configured embedding model and exit."""
    model = ctx.obj.get("model") or load_config().embeddings.model
    typer.echo(f"Downloading embedding model: {model}")
    try:
        dimension = download_models(model)
    except Exception as e:
        typer.echo("Troubleshooting:", err=True)
        typer.echo("1. Check your internet connection", err=True)
        typer.echo("2. Check the model name on huggingface.co", err=True)
        typer.echo(f"3. Check disk space in {get_model_cache_dir()}", err=True)
        raise fail(e, ctx.obj["debug"]) from None

    typer.echo(f"✓ Model downloaded successfully (dimension: {dimension})")
    typer.echo(f"✓ Models cached at: {get_model_cache_dir()}")
