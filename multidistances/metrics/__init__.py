"""String distance metrics and the modifiers that compose them."""

from .base import DistanceMetric
from .edit import DamerauLevenshtein, Hamming, Jaro, Levenshtein, RatcliffObershelp
from .qgram import Cosine, Jaccard, Overlap, QGram, SorensenDice
from .modifiers import MODIFIERS, Partial, TokenMax, TokenSet, TokenSort, Winkler, modify

__all__ = [
    "DistanceMetric",
    # Edit based
    "Levenshtein",
    "DamerauLevenshtein",
    "Hamming",
    "Jaro",
    "RatcliffObershelp",
    # Q-gram based
    "QGram",
    "Cosine",
    "Jaccard",
    "Overlap",
    "SorensenDice",
    # Modifiers
    "MODIFIERS",
    "Winkler",
    "Partial",
    "TokenSort",
    "TokenSet",
    "TokenMax",
    "modify",
]
