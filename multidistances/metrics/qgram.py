"""
Q-gram (token) based string distances.

Strings are reduced to their multiset of overlapping substrings of length
``q``. A string shorter than ``q`` has an empty profile; two empty profiles
are at distance 0 only if the strings are identical.
"""

import math
from abc import abstractmethod
from collections import Counter

from ..errors import ConfigurationError
from .base import DistanceMetric


def qgram_profile(s: str, q: int) -> Counter:
    """Count the overlapping q-grams of ``s``."""
    return Counter(s[i:i + q] for i in range(len(s) - q + 1))


class QGramMetric(DistanceMetric):
    """Base for metrics computed from two q-gram profiles."""

    def __init__(self, q: int = 2):
        if q < 1:
            raise ConfigurationError(f"q must be >= 1, got {q}", parameter="q")
        self.q = q

    def distance(self, a: str, b: str) -> float:
        if a == b:
            return 0.0
        pa = qgram_profile(a, self.q)
        pb = qgram_profile(b, self.q)
        if not pa and not pb:
            return 1.0
        return self._profile_distance(pa, pb)

    @abstractmethod
    def _profile_distance(self, pa: Counter, pb: Counter) -> float:
        """Distance between two profiles, not both empty."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(q={self.q})"


class QGram(QGramMetric):
    """L1 distance between q-gram count profiles."""

    name = "qgram"

    def _profile_distance(self, pa: Counter, pb: Counter) -> float:
        keys = set(pa) | set(pb)
        return float(sum(abs(pa[k] - pb[k]) for k in keys))

    def normalized(self, a: str, b: str) -> float:
        if a == b:
            return 0.0
        pa = qgram_profile(a, self.q)
        pb = qgram_profile(b, self.q)
        total = sum(pa.values()) + sum(pb.values())
        if total == 0:
            return 1.0
        return self._profile_distance(pa, pb) / total


class Cosine(QGramMetric):
    name = "cosine"

    def _profile_distance(self, pa: Counter, pb: Counter) -> float:
        if not pa or not pb:
            return 1.0
        dot = sum(count * pb[gram] for gram, count in pa.items())
        norm_a = math.sqrt(sum(c * c for c in pa.values()))
        norm_b = math.sqrt(sum(c * c for c in pb.values()))
        return max(0.0, 1.0 - dot / (norm_a * norm_b))


class _SetMetric(QGramMetric):
    """Metrics on the q-gram sets, ignoring multiplicity."""

    def _profile_distance(self, pa: Counter, pb: Counter) -> float:
        sa, sb = set(pa), set(pb)
        return self._set_distance(len(sa & sb), len(sa), len(sb))

    @abstractmethod
    def _set_distance(self, common: int, na: int, nb: int) -> float:
        """Distance from the shared and per-side q-gram set sizes."""


class Jaccard(_SetMetric):
    name = "jaccard"

    def _set_distance(self, common: int, na: int, nb: int) -> float:
        return 1.0 - common / (na + nb - common)


class SorensenDice(_SetMetric):
    name = "sorensen-dice"

    def _set_distance(self, common: int, na: int, nb: int) -> float:
        return 1.0 - 2.0 * common / (na + nb)


class Overlap(_SetMetric):
    name = "overlap"

    def _set_distance(self, common: int, na: int, nb: int) -> float:
        smaller = min(na, nb)
        if smaller == 0:
            return 1.0
        return 1.0 - common / smaller

