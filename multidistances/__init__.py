"""multidistances - pairwise string/compression distances and diversity ordering of text collections."""

__version__ = "0.4.0"

from .errors import ComputationError, ConfigurationError, MultiDistancesError
from .metrics.base import DistanceMetric
from .compression import NCD, get_compressor
from .registry import available_metrics, create_metric, resolve
from .core.matrix import compare_one_to_many, compute_matrix, distance
from .core.diversity import DiversitySequence, Strategy, diversity_sequence, sequence

__all__ = [
    "__version__",
    # Errors
    "MultiDistancesError",
    "ConfigurationError",
    "ComputationError",
    # Metrics
    "DistanceMetric",
    "NCD",
    "get_compressor",
    "available_metrics",
    "create_metric",
    "resolve",
    # Operations
    "distance",
    "compute_matrix",
    "compare_one_to_many",
    "DiversitySequence",
    "Strategy",
    "diversity_sequence",
    "sequence",
]
