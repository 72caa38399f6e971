"""
Edit-based string distances.

These are pure functions of two strings. Their per-pair cost cannot be
reduced by caching per-item work, so they keep the no-op precalculation
inherited from :class:`DistanceMetric`.
"""

from difflib import SequenceMatcher
from typing import List

from .base import DistanceMetric


def levenshtein(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute edit distance."""
    if a == b:
        return 0
    # Keep the inner row over the shorter string
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current
    return previous[-1]


class _LengthNormalized(DistanceMetric):
    """Edit distances normalized by the longer string's length."""

    def normalized(self, a: str, b: str) -> float:
        longest = max(len(a), len(b))
        if longest == 0:
            return 0.0
        return min(1.0, self.distance(a, b) / longest)


class Levenshtein(_LengthNormalized):
    name = "levenshtein"

    def distance(self, a: str, b: str) -> float:
        return float(levenshtein(a, b))


class DamerauLevenshtein(_LengthNormalized):
    """Optimal string alignment: Levenshtein plus adjacent transpositions.

    A substring is never edited more than once, so this is the restricted
    variant (``"CA" -> "ABC"`` is 3, not 2).
    """

    name = "damerau-levenshtein"

    def distance(self, a: str, b: str) -> float:
        if a == b:
            return 0.0
        la, lb = len(a), len(b)
        if la == 0 or lb == 0:
            return float(max(la, lb))

        two_back: List[int] = []
        previous = list(range(lb + 1))
        for i in range(1, la + 1):
            current = [i] + [0] * lb
            for j in range(1, lb + 1):
                cost = 0 if a[i - 1] == b[j - 1] else 1
                current[j] = min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + cost,
                )
                if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                    current[j] = min(current[j], two_back[j - 2] + 1)
            two_back, previous = previous, current
        return float(previous[lb])


class Hamming(_LengthNormalized):
    """Positional mismatches; each extra character of the longer string counts once."""

    name = "hamming"

    def distance(self, a: str, b: str) -> float:
        mismatches = sum(1 for ca, cb in zip(a, b) if ca != cb)
        return float(mismatches + abs(len(a) - len(b)))


def jaro_similarity(a: str, b: str) -> float:
    """Jaro similarity in ``[0, 1]``."""
    if a == b:
        return 1.0
    la, lb = len(a), len(b)
    if la == 0 or lb == 0:
        return 0.0

    window = max(max(la, lb) // 2 - 1, 0)
    a_matched = [False] * la
    b_matched = [False] * lb
    matches = 0
    for i, ca in enumerate(a):
        lo = max(0, i - window)
        hi = min(lb, i + window + 1)
        for j in range(lo, hi):
            if not b_matched[j] and b[j] == ca:
                a_matched[i] = b_matched[j] = True
                matches += 1
                break
    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i in range(la):
        if not a_matched[i]:
            continue
        while not b_matched[k]:
            k += 1
        if a[i] != b[k]:
            transpositions += 1
        k += 1

    m = float(matches)
    return (m / la + m / lb + (m - transpositions / 2.0) / m) / 3.0


class Jaro(DistanceMetric):
    name = "jaro"

    def distance(self, a: str, b: str) -> float:
        return 1.0 - jaro_similarity(a, b)


class RatcliffObershelp(DistanceMetric):
    """One minus the Gestalt pattern matching ratio."""

    name = "ratcliff-obershelp"

    def distance(self, a: str, b: str) -> float:
        if a == b:
            return 0.0
        return 1.0 - SequenceMatcher(None, a, b, autojunk=False).ratio()
