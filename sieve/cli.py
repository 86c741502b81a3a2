"""Sieve CLI application with Typer."""

import json
import statistics
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, NoReturn, Optional, get_args

import typer

from sieve import __version__
from sieve.config import LogLevel, get_settings, set_settings
from sieve.errors import SieveError
from sieve.index import ApproximateNearestNeighborsIndex, tree_stats
from sieve.index.ann import stack_vectors
from sieve.index.search import exact_search
from sieve.utils.jsonl import VectorRecord, read_vector_records, write_vector_records
from sieve.utils.recall import recall_at_k
from sieve.utils.synthetic import random_vectors
from sieve.vector import Vector

app = typer.Typer(
    name="sieve",
    help="Approximate nearest neighbour search over random-projection forests",
    add_completion=False,
    no_args_is_help=True,
)

VectorsArg = Annotated[
    Path,
    typer.Argument(
        exists=True, dir_okay=False, readable=True, help="JSONL file of {id, vector} records"
    ),
]
NumTreesOpt = Annotated[Optional[int], typer.Option("--num-trees", "-t", help="Trees in the forest")]
LeafSizeOpt = Annotated[
    Optional[int], typer.Option("--max-leaf-size", "-l", help="Largest leaf before splitting")
]
SeedOpt = Annotated[Optional[int], typer.Option("--seed", help="Seed for hyperplane sampling")]
WorkersOpt = Annotated[Optional[int], typer.Option("--workers", help="Worker threads")]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"sieve version {__version__}")
        raise typer.Exit()


def fail(message: str) -> NoReturn:
    """Print ``message`` in red and exit with status 2."""
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=2)


def parse_query(raw: str) -> list[float]:
    """Parse a comma-separated query such as ``"1.0,2.5"``."""
    parts = [part.strip() for part in raw.split(",") if part.strip()]
    if not parts:
        raise typer.BadParameter("query must contain at least one number")
    try:
        return [float(part) for part in parts]
    except ValueError as exc:
        raise typer.BadParameter(f"query must be comma-separated numbers: {exc}") from exc


def _build(
    vectors: Sequence[Vector],
    ids: Sequence[int],
    num_trees: int | None,
    max_leaf_size: int | None,
    seed: int | None,
    workers: int | None,
) -> ApproximateNearestNeighborsIndex:
    try:
        return ApproximateNearestNeighborsIndex.build_from_settings(
            vectors,
            ids,
            num_trees=num_trees,
            max_leaf_size=max_leaf_size,
            seed=seed,
            max_workers=workers,
        )
    except SieveError as exc:
        fail(str(exc))


def _load(path: Path) -> tuple[list[Vector], list[int]]:
    try:
        return read_vector_records(path)
    except SieveError as exc:
        fail(str(exc))


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL"),
    ] = None,
) -> None:
    """Sieve command-line interface."""
    settings = get_settings()
    if log_level is not None:
        level = log_level.upper()
        if level not in get_args(LogLevel):
            raise typer.BadParameter(f"unknown log level {log_level!r}", param_hint="--log-level")
        settings = settings.model_copy(update={"log_level": level})
        set_settings(settings)
    settings.configure_logging()


@app.command()
def search(
    vectors_path: VectorsArg,
    query: Annotated[str, typer.Option("--query", "-q", help="Comma-separated coordinates")],
    top_k: Annotated[Optional[int], typer.Option("--top-k", "-k", help="Results to return")] = None,
    num_trees: NumTreesOpt = None,
    max_leaf_size: LeafSizeOpt = None,
    seed: SeedOpt = None,
    workers: WorkersOpt = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit one JSON object per result")] = False,
) -> None:
    """Build an index from VECTORS_PATH and run a single query."""
    vectors, ids = _load(vectors_path)
    index = _build(vectors, ids, num_trees, max_leaf_size, seed, workers)
    k = top_k if top_k is not None else get_settings().default_top_k

    try:
        results = index.search(parse_query(query), k)
    except SieveError as exc:
        fail(str(exc))

    if as_json:
        for result in results:
            typer.echo(
                json.dumps(
                    {
                        "id": result.vector_id,
                        "distance": result.distance,
                        "vector": result.vector.tolist(),
                    }
                )
            )
        return

    if not results:
        typer.echo("No results")
        return
    for rank, result in enumerate(results, start=1):
        typer.echo(f"{rank:>3}  id={result.vector_id}  distance={result.distance:.6g}")


@app.command()
def stats(
    vectors_path: VectorsArg,
    num_trees: NumTreesOpt = None,
    max_leaf_size: LeafSizeOpt = None,
    seed: SeedOpt = None,
    workers: WorkersOpt = None,
) -> None:
    """Build an index from VECTORS_PATH and describe the forest."""
    vectors, ids = _load(vectors_path)
    index = _build(vectors, ids, num_trees, max_leaf_size, seed, workers)

    typer.echo(f"Vectors supplied: {len(vectors)}")
    typer.echo(f"Unique vectors: {len(index)}")
    typer.echo(f"Dimension: {index.dimension if index.dimension is not None else '-'}")
    typer.echo(f"Trees: {index.num_trees}  max leaf size: {index.max_leaf_size}")
    for position, tree in enumerate(index.trees):
        shape = tree_stats(tree)
        typer.echo(
            f"  tree {position}: depth={shape.depth} leaves={shape.leaf_count} "
            f"largest_leaf={shape.largest_leaf}"
        )


@app.command()
def bench(
    count: Annotated[int, typer.Option("--count", "-n", min=1, help="Vectors to index")] = 1000,
    dimension: Annotated[int, typer.Option("--dimension", "-d", min=1)] = 32,
    queries: Annotated[int, typer.Option("--queries", min=1, help="Queries to run")] = 20,
    top_k: Annotated[Optional[int], typer.Option("--top-k", "-k")] = None,
    num_trees: NumTreesOpt = None,
    max_leaf_size: LeafSizeOpt = None,
    seed: SeedOpt = None,
    workers: WorkersOpt = None,
) -> None:
    """Measure build time, query latency and recall@k on synthetic data."""
    settings = get_settings()
    data_seed = seed if seed is not None else settings.seed
    k = top_k if top_k is not None else settings.default_top_k

    vectors = random_vectors(count, dimension, seed=data_seed)
    query_seed = None if data_seed is None else data_seed + 1
    query_vectors = random_vectors(queries, dimension, seed=query_seed)

    start = time.perf_counter()
    index = _build(vectors, list(range(count)), num_trees, max_leaf_size, seed, workers)
    build_ms = (time.perf_counter() - start) * 1000.0

    latencies: list[float] = []
    recalls: list[float] = []
    matrix = stack_vectors(index.all_vectors(), index.dimension)
    for query_vector in query_vectors:
        start = time.perf_counter()
        results = index.search(query_vector, k)
        latencies.append((time.perf_counter() - start) * 1000.0)
        exact = exact_search(matrix, query_vector, k)
        recalls.append(
            recall_at_k(
                (result.vector_id for result in results),
                (index.ids[internal_id] for internal_id, _ in exact),
            )
        )

    typer.echo(f"Indexed {len(index)} vectors (dim={dimension}) into {index.num_trees} trees")
    typer.echo(f"Build: {build_ms:.1f} ms")
    typer.echo(
        f"Query: mean {statistics.fmean(latencies):.2f} ms, "
        f"max {max(latencies):.2f} ms over {queries} queries"
    )
    typer.echo(f"Recall@{k}: {statistics.fmean(recalls):.3f}")


@app.command()
def generate(
    output: Annotated[Path, typer.Argument(dir_okay=False, help="Destination JSONL file")],
    count: Annotated[int, typer.Option("--count", "-n", min=0)] = 1000,
    dimension: Annotated[int, typer.Option("--dimension", "-d", min=1)] = 32,
    seed: SeedOpt = None,
) -> None:
    """Write COUNT synthetic vectors to OUTPUT as JSONL."""
    vectors = random_vectors(count, dimension, seed=seed)
    written = write_vector_records(
        output,
        (VectorRecord(vector_id=position, vector=vector) for position, vector in enumerate(vectors)),
    )
    typer.echo(f"Wrote {written} vectors to {output}")


if __name__ == "__main__":
    app()
