"""
Normalized compression distance.

    NCD(x, y) = (C(xy) - min(C(x), C(y))) / max(C(x), C(y))

``C`` is the compressed length. Values are usually in ``[0, 1]`` but can
exceed 1 slightly for very short inputs because of codec header overhead.
"""

from typing import Tuple

from ..metrics.base import DistanceMetric
from .codecs import Compressor

NCDToken = Tuple[bytes, int]


class NCD(DistanceMetric):
    """
    Compression distance over a compressor.

    The single-item sizes ``C(x)`` are what precalculation caches; ``C(xy)``
    has to be computed for every pair.
    """

    composable = False
    supports_precalculation = True

    def __init__(self, compressor: Compressor):
        self.compressor = compressor
        self.name = f"ncd-{compressor.name}"

    @staticmethod
    def _encode(s: str) -> bytes:
        return s.encode("utf-8", errors="surrogateescape")

    def precalculate(self, a: str) -> NCDToken:
        data = self._encode(a)
        return data, self.compressor.compress(data)

    def distance_from_tokens(self, token_a: NCDToken, token_b: NCDToken,
                             a: str, b: str) -> float:
        data_a, size_a = token_a
        data_b, size_b = token_b
        if data_a == data_b:
            return 0.0
        largest = max(size_a, size_b)
        if largest == 0:
            return 0.0
        joint = self.compressor.compress(data_a + data_b)
        return max(0.0, (joint - min(size_a, size_b)) / largest)

    def distance(self, a: str, b: str) -> float:
        if a == b:
            return 0.0
        return self.distance_from_tokens(self.precalculate(a), self.precalculate(b), a, b)

    def __repr__(self) -> str:
        return f"NCD({self.compressor!r})"
