"""
Pairwise distance computation.

The matrix builder evaluates the metric on the upper triangle only and
mirrors it, so an N-item collection costs N(N-1)/2 metric calls. When the
metric supports it, per-item tokens are computed once up front.
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial.distance import is_valid_dm, squareform

from ..errors import ComputationError, ConfigurationError
from ..metrics.base import DistanceMetric
from ..utils.logging_setup import get_logger, timed_operation
from .parallel import ParallelExecutor

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]

# Upper bound on progress notifications per build (plus the final one)
PROGRESS_UPDATES = 100


def distance(metric: DistanceMetric, a: str, b: str) -> float:
    """Distance between two contents."""
    return float(metric(a, b))


def _tokens(metric: DistanceMetric, contents: Sequence[str], precalc: bool) -> Optional[List[Any]]:
    if not (precalc and metric.supports_precalculation):
        return None
    return [metric.precalculate(c) for c in contents]


def _pair_distance(metric: DistanceMetric, contents: Sequence[str],
                   tokens: Optional[List[Any]], i: int, j: int) -> float:
    try:
        if tokens is None:
            return float(metric(contents[i], contents[j]))
        return float(metric.distance_from_tokens(tokens[i], tokens[j], contents[i], contents[j]))
    except ComputationError as e:
        raise ComputationError(e.message, codec=e.codec, pair=(i, j)) from e


def compute_matrix(
    metric: DistanceMetric,
    contents: Sequence[str],
    precalc: bool = False,
    workers: int = 1,
    progress: Optional[ProgressCallback] = None,
) -> np.ndarray:
    """
    Compute the symmetric matrix of pairwise distances.

    Args:
        metric: Distance metric
        contents: Item contents, indexed 0..N-1
        precalc: Run the metric's per-item precalculation first
        workers: Worker threads; rows of the upper triangle are distributed
            over them. The result does not depend on this value.
        progress: Optional ``callback(done_pairs, total_pairs)``

    Returns:
        N x N float64 array with zero diagonal

    Raises:
        ConfigurationError: ``contents`` is empty
        ComputationError: A compressor failed; no matrix is returned
    """
    n = len(contents)
    if n == 0:
        raise ConfigurationError("Cannot compute a distance matrix for zero items",
                                 parameter="contents")

    total = n * (n - 1) // 2
    with timed_operation(logger, "compute_matrix", metric=metric.name, items=n,
                         pairs=total, precalc=precalc, workers=workers):
        condensed = _upper_triangle(metric, contents, precalc, workers, progress)

    return squareform(np.asarray(condensed, dtype=np.float64), checks=False)


def _upper_triangle(metric: DistanceMetric, contents: Sequence[str], precalc: bool,
                    workers: int, progress: Optional[ProgressCallback]) -> List[float]:
    """Row-major condensed distances for all pairs i < j."""
    n = len(contents)
    total = n * (n - 1) // 2
    tokens = _tokens(metric, contents, precalc)
    if tokens is not None:
        logger.debug(f"Precalculated {n} tokens for {metric.name}")

    def row(i: int) -> List[float]:
        return [_pair_distance(metric, contents, tokens, i, j) for j in range(i + 1, n)]

    rows = list(range(n - 1))
    condensed: List[float] = []
    step = max(1, total // PROGRESS_UPDATES)
    next_report = step

    def collect(values: List[float]):
        nonlocal next_report
        condensed.extend(values)
        if progress and len(condensed) >= next_report:
            progress(len(condensed), total)
            next_report = len(condensed) + step

    if workers > 1 and len(rows) > 1:
        with ParallelExecutor(max_workers=workers) as executor:
            for values in executor.imap(row, rows):
                collect(values)
    else:
        for i in rows:
            collect(row(i))

    if progress:
        progress(total, total)
    return condensed


def compare_one_to_many(
    metric: DistanceMetric,
    query: str,
    contents: Sequence[str],
    precalc: bool = False,
    workers: int = 1,
) -> List[float]:
    """
    Distance from ``query`` to each of ``contents``.

    Args:
        metric: Distance metric
        query: Query content
        contents: Candidate contents
        precalc: Use precalculated tokens (the query's is computed once)
        workers: Worker threads

    Returns:
        One distance per candidate, in candidate order
    """
    if precalc and metric.supports_precalculation:
        query_token = metric.precalculate(query)

        def score(content: str) -> float:
            token = metric.precalculate(content)
            return float(metric.distance_from_tokens(query_token, token, query, content))
    else:
        def score(content: str) -> float:
            return float(metric(query, content))

    if workers > 1 and len(contents) > 1:
        with ParallelExecutor(max_workers=workers) as executor:
            return executor.map(score, list(contents))
    return [score(c) for c in contents]


def rank_matches(
    scores: Sequence[float],
    names: Sequence[str],
    top_n: int = 5,
) -> Tuple[List[Tuple[str, float]], List[Tuple[str, float]]]:
    """
    Split query scores into the most similar and the most distant candidates.

    Equal scores keep candidate order.

    Returns:
        ``(most_similar, most_distant)``, each a list of ``(name, score)``
    """
    if len(scores) != len(names):
        raise ConfigurationError(
            f"Got {len(scores)} scores for {len(names)} names", parameter="names"
        )
    by_distance = sorted(range(len(scores)), key=lambda k: scores[k])
    by_remoteness = sorted(range(len(scores)), key=lambda k: -scores[k])
    similar = [(names[k], float(scores[k])) for k in by_distance[:top_n]]
    distant = [(names[k], float(scores[k])) for k in by_remoteness[:top_n]]
    return similar, distant


def validate_matrix(matrix: Any, tol: float = 1e-9) -> np.ndarray:
    """
    Check that ``matrix`` is a usable distance matrix.

    Square, finite, non-negative, symmetric and with a zero diagonal.

    Returns:
        The matrix as a float64 array

    Raises:
        ConfigurationError: Any of the above fails
    """
    m = np.asarray(matrix, dtype=np.float64)
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        raise ConfigurationError(f"Distance matrix must be square, got shape {m.shape}",
                                 parameter="matrix")
    if m.shape[0] == 0:
        raise ConfigurationError("Distance matrix is empty", parameter="matrix")
    if not np.all(np.isfinite(m)):
        raise ConfigurationError("Distance matrix has non-finite entries", parameter="matrix")
    if np.any(m < 0):
        raise ConfigurationError("Distance matrix has negative entries", parameter="matrix")
    if not is_valid_dm(m, tol=tol):
        raise ConfigurationError("Distance matrix must be symmetric with a zero diagonal",
                                 parameter="matrix")
    return m
