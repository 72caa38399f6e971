"""Distance matrix engine, diversity sequencing and file I/O."""

from .diversity import DiversitySequence, Strategy, diversity_sequence, sequence
from .matrix import compare_one_to_many, compute_matrix, distance, rank_matches, validate_matrix

__all__ = [
    "DiversitySequence",
    "Strategy",
    "diversity_sequence",
    "sequence",
    "compare_one_to_many",
    "compute_matrix",
    "distance",
    "rank_matches",
    "validate_matrix",
]
