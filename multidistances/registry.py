"""Metric registry: name lookup, fuzzy name resolution and metric construction."""

from typing import Callable, Dict, List, Optional, Sequence

from .compression import NCD, get_compressor
from .errors import ConfigurationError
from .metrics.base import DistanceMetric
from .metrics.edit import (
    DamerauLevenshtein,
    Hamming,
    Jaro,
    Levenshtein,
    RatcliffObershelp,
    levenshtein,
)
from .metrics.modifiers import Winkler, modify
from .metrics.qgram import Cosine, Jaccard, Overlap, QGram, SorensenDice
from .utils.logging_setup import get_logger

logger = get_logger(__name__)

# Constructors take (q, level); each ignores what it has no use for
MetricFactory = Callable[[int, Optional[int]], DistanceMetric]


def _ncd(codec: str) -> MetricFactory:
    return lambda q, level: NCD(get_compressor(codec, level))


# Insertion order is registration order, which breaks fuzzy-match ties
METRICS: Dict[str, MetricFactory] = {
    "levenshtein": lambda q, level: Levenshtein(),
    "damerau-levenshtein": lambda q, level: DamerauLevenshtein(),
    "hamming": lambda q, level: Hamming(),
    "jaro": lambda q, level: Jaro(),
    "jaro-winkler": lambda q, level: Winkler(Jaro()),
    "ratcliff-obershelp": lambda q, level: RatcliffObershelp(),
    "qgram": lambda q, level: QGram(q),
    "cosine": lambda q, level: Cosine(q),
    "jaccard": lambda q, level: Jaccard(q),
    "overlap": lambda q, level: Overlap(q),
    "sorensen-dice": lambda q, level: SorensenDice(q),
    "ncd-zlib": _ncd("zlib"),
    "ncd-gzip": _ncd("gzip"),
    "ncd-deflate": _ncd("deflate"),
    "ncd-xz": _ncd("xz"),
    "ncd-bzip2": _ncd("bzip2"),
}


def available_metrics() -> List[str]:
    """Registered metric names in registration order."""
    return list(METRICS)


def resolve(requested: str, known: Sequence[str]) -> str:
    """
    Find the known name closest to ``requested``.

    Exact matches win, then case-insensitive ones, then the name with the
    smallest Levenshtein distance to the request. Ties go to the name that
    comes first in ``known``.

    Raises:
        ConfigurationError: ``known`` is empty
    """
    if not known:
        raise ConfigurationError(
            f"Cannot resolve '{requested}': no candidates", parameter="metric"
        )
    if requested in known:
        return requested

    lowered = requested.lower()
    for name in known:
        if name.lower() == lowered:
            return name

    best = min(known, key=lambda name: levenshtein(lowered, name.lower()))
    logger.warning(f"Unknown name '{requested}', using closest match '{best}'")
    return best


def create_metric(
    name: str,
    q: int = 2,
    level: Optional[int] = None,
    modifier: Optional[str] = None,
) -> DistanceMetric:
    """
    Build a metric from its registry name.

    Args:
        name: Metric name; misspellings resolve to the closest registered name
        q: Gram length for q-gram metrics
        level: Compression level for NCD metrics (clamped per codec)
        modifier: Optional modifier name to wrap the metric with

    Returns:
        Metric instance

    Raises:
        ConfigurationError: Unusable ``q``, unknown modifier, or a modifier
            applied to a compression metric
    """
    resolved = resolve(name, available_metrics())
    metric = METRICS[resolved](q, level)
    if modifier:
        metric = modify(metric, modifier)
    logger.debug(f"Created metric {metric!r}")
    return metric
