"""Command-line interface for multidistances (``mdist``)."""

import functools
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from . import __version__
from .compression import COMPRESSORS
from .config import ConfigManager, MultiDistancesConfig
from .core.diversity import Strategy, sequence
from .core.loader import collect_files, read_contents
from .core.matrix import compare_one_to_many, compute_matrix, distance, rank_matches
from .core.reporting import read_matrix_csv, write_matrix_csv, write_sequence_csv
from .errors import ConfigurationError, MultiDistancesError
from .metrics.base import DistanceMetric
from .metrics.modifiers import MODIFIERS
from .registry import available_metrics, create_metric
from .utils.logging_setup import get_logger, setup_logging

logger = get_logger(__name__)

console = Console()
err_console = Console(stderr=True)


def handle_errors(func):
    """Report library errors in red and exit with status 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except MultiDistancesError as e:
            err_console.print(f"[red]Error:[/red] {e.message}", highlight=False)
            logger.debug("Command failed", exc_info=True)
            sys.exit(1)
    return wrapper


def metric_options(func):
    """Options shared by every command that builds a metric."""
    options = [
        click.option("--metric", "-m", help="Distance metric name (see `mdist metrics`)"),
        click.option("--modifier", help=f"Metric modifier: {', '.join(MODIFIERS)}"),
        click.option("--q", "q", type=int, help="Gram length for q-gram metrics"),
        click.option("--level", type=int, help="Compression level for ncd-* metrics (clamped)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def collection_options(func):
    """Options controlling which files are compared."""
    options = [
        click.option("--ext", "extensions", multiple=True,
                     help="File extension to include (repeatable)"),
        click.option("--recursive/--no-recursive", default=None,
                     help="Descend into subdirectories"),
        click.option("--precalc/--no-precalc", default=None,
                     help="Precalculate per-file data where the metric supports it"),
        click.option("--workers", "-j", type=int, help="Worker threads for the matrix build"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _config(ctx: click.Context) -> MultiDistancesConfig:
    return ctx.obj["config"]


def _build_metric(cfg: MultiDistancesConfig, metric: Optional[str], modifier: Optional[str],
                  q: Optional[int], level: Optional[int]) -> DistanceMetric:
    return create_metric(
        metric or cfg.metric,
        q=q if q is not None else cfg.q,
        level=level if level is not None else cfg.compression_level,
        modifier=modifier if modifier is not None else cfg.modifier,
    )


def _load_items(cfg: MultiDistancesConfig, paths: Tuple[str, ...], extensions: Tuple[str, ...],
                recursive: Optional[bool]) -> Tuple[List[str], List[str]]:
    files = collect_files(
        [Path(p) for p in paths],
        extensions=list(extensions) or cfg.extensions,
        recursive=cfg.recursive if recursive is None else recursive,
    )
    if not files:
        raise ConfigurationError("No files found to compare", parameter="paths")
    return [str(f) for f in files], read_contents(files)


def _matrix_with_progress(metric: DistanceMetric, contents: List[str], precalc: bool, workers: int):
    columns = (
        TextColumn("[cyan]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
    )
    with Progress(*columns, console=err_console, transient=True,
                  disable=not err_console.is_terminal) as progress:
        task = progress.add_task(f"{metric.name} distances", total=None)

        def report(done: int, total: int):
            progress.update(task, completed=done, total=total)

        return compute_matrix(metric, contents, precalc=precalc, workers=workers, progress=report)


@click.group()
@click.option("--config", "-c", "config_path", type=click.Path(path_type=Path),
              help="Path to configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path),
              help="Also write a JSON-lines debug log to this file")
@click.version_option(__version__, prog_name="mdist")
@click.pass_context
@handle_errors
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool, log_file: Optional[Path]):
    """Compare files by string and compression distances and order them by diversity."""
    manager = ConfigManager(config_path, console=console)
    cfg = manager.load()
    cfg.validate()
    setup_logging(level="DEBUG" if verbose else cfg.log_level, log_file=log_file)
    ctx.obj = {"config": cfg, "manager": manager}


@cli.command(name="dist")
@click.argument("file_a", type=click.Path(exists=True, dir_okay=False))
@click.argument("file_b", type=click.Path(exists=True, dir_okay=False))
@metric_options
@click.pass_context
@handle_errors
def dist_command(ctx, file_a, file_b, metric, modifier, q, level):
    """Print the distance between two files."""
    cfg = _config(ctx)
    dm = _build_metric(cfg, metric, modifier, q, level)
    a, b = read_contents([Path(file_a), Path(file_b)])
    click.echo(repr(distance(dm, a, b)))


@cli.command(name="dists")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="CSV file to write (default: stdout)")
@metric_options
@collection_options
@click.pass_context
@handle_errors
def dists_command(ctx, paths, output, metric, modifier, q, level,
                  extensions, recursive, precalc, workers):
    """Write the pairwise distance matrix of all files as CSV."""
    cfg = _config(ctx)
    dm = _build_metric(cfg, metric, modifier, q, level)
    names, contents = _load_items(cfg, paths, extensions, recursive)
    matrix = _matrix_with_progress(
        dm, contents,
        precalc=cfg.precalc if precalc is None else precalc,
        workers=workers or cfg.workers,
    )
    write_matrix_csv(output or click.get_text_stream("stdout"), names, matrix)
    if output:
        err_console.print(f"[green]✓ Wrote {len(names)}x{len(names)} matrix to {output}[/green]",
                          highlight=False)


@cli.command(name="divseq")
@click.argument("paths", nargs=-1, type=click.Path(exists=True))
@click.option("--strategy", "-s", type=click.Choice(["maximin", "maximean"], case_sensitive=False),
              help="Diversity objective")
@click.option("--matrix", "matrix_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Use a distance matrix CSV written by `mdist dists` instead of PATHS")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="CSV file to write (default: stdout)")
@click.option("--top", "top", type=int, help="Number of leading files to summarize")
@metric_options
@collection_options
@click.pass_context
@handle_errors
def divseq_command(ctx, paths, strategy, matrix_path, output, top, metric, modifier, q, level,
                   extensions, recursive, precalc, workers):
    """Order files so that each next file is as different as possible from those before."""
    cfg = _config(ctx)
    strat = Strategy.parse(strategy or cfg.strategy)

    if matrix_path is not None:
        if paths:
            raise ConfigurationError("Give either PATHS or --matrix, not both", parameter="matrix")
        names, matrix = read_matrix_csv(matrix_path)
        dm = None
    else:
        if not paths:
            raise ConfigurationError("No PATHS given and no --matrix", parameter="paths")
        dm = _build_metric(cfg, metric, modifier, q, level)
        names, contents = _load_items(cfg, paths, extensions, recursive)
        matrix = _matrix_with_progress(
            dm, contents,
            precalc=cfg.precalc if precalc is None else precalc,
            workers=workers or cfg.workers,
        )

    seq = sequence(dm, matrix, strat)

    if output is None:
        write_sequence_csv(click.get_text_stream("stdout"), names, seq)
        return

    write_sequence_csv(output, names, seq)
    table = Table(title=f"Most diverse files ({strat.label})")
    table.add_column("Rank", justify="right")
    table.add_column("File")
    for item in seq.head(top or cfg.top_n):
        table.add_row(str(seq.rank[item] + 1), names[item])
    console.print(table)
    err_console.print(f"[green]✓ Wrote {strat.label} sequence to {output}[/green]", highlight=False)


@cli.command(name="query")
@click.argument("query_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--top-n", "-n", type=int, help="How many similar and distant files to list")
@metric_options
@collection_options
@click.pass_context
@handle_errors
def query_command(ctx, query_file, paths, top_n, metric, modifier, q, level,
                  extensions, recursive, precalc, workers):
    """List the files most similar to, and most distant from, QUERY_FILE."""
    cfg = _config(ctx)
    dm = _build_metric(cfg, metric, modifier, q, level)
    names, contents = _load_items(cfg, paths, extensions, recursive)

    query_path = Path(query_file).resolve()
    candidates = [(n, c) for n, c in zip(names, contents) if Path(n).resolve() != query_path]
    if not candidates:
        raise ConfigurationError("No files to compare the query against", parameter="paths")
    names = [n for n, _ in candidates]

    [query_text] = read_contents([Path(query_file)])
    scores = compare_one_to_many(
        dm, query_text, [c for _, c in candidates],
        precalc=cfg.precalc if precalc is None else precalc,
        workers=workers or cfg.workers,
    )
    similar, distant = rank_matches(scores, names, top_n or cfg.top_n)

    for title, rows in (("Most similar", similar), ("Most distant", distant)):
        table = Table(title=f"{title} to {query_file} ({dm.name})")
        table.add_column("#", justify="right")
        table.add_column("File")
        table.add_column("Distance", justify="right")
        for k, (name, score) in enumerate(rows, 1):
            table.add_row(str(k), name, f"{score:.4f}")
        console.print(table)


@cli.command(name="metrics")
def metrics_command():
    """List available metrics, modifiers and compressors."""
    table = Table(title="Metrics")
    table.add_column("Name")
    table.add_column("Modifiable")
    for name in available_metrics():
        table.add_row(name, "yes" if create_metric(name).composable else "no")
    console.print(table)

    console.print(f"Modifiers: {', '.join(MODIFIERS)}", highlight=False)

    codecs = Table(title="Compressors")
    codecs.add_column("Codec")
    codecs.add_column("Levels")
    codecs.add_column("Default", justify="right")
    for name, cls in COMPRESSORS.items():
        codecs.add_row(name, f"{cls.min_level}-{cls.max_level}", str(cls.default_level))
    console.print(codecs)


@cli.group(name="config")
def config_group():
    """Manage the configuration file."""


@config_group.command(name="init")
@click.option("--path", type=click.Path(dir_okay=False, path_type=Path),
              default=Path(ConfigManager.DEFAULT_CONFIG_FILE), show_default=True,
              help="Path for config file")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@handle_errors
def config_init(path, force):
    """Write a configuration file with default settings."""
    if path.exists() and not force:
        raise ConfigurationError(f"Config file {path} already exists (use --force)",
                                 parameter="path")
    written = ConfigManager(path, console=console).save(MultiDistancesConfig())
    console.print(f"[green]✓ Created config file at {written}[/green]", highlight=False)


@config_group.command(name="show")
@click.pass_context
def config_show(ctx):
    """Display the effective configuration."""
    manager: ConfigManager = ctx.obj["manager"]
    manager.display(_config(ctx))


def main():
    """Main CLI entry point."""
    cli(prog_name="mdist")


if __name__ == "__main__":
    main()
