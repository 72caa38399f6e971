"""
Base class for string distance metrics.

Every metric is a callable object ``metric(a, b) -> float`` returning a
non-negative dissimilarity. Metrics whose cost has a per-item component
(compression sizes, for instance) can override :meth:`precalculate` and
:meth:`distance_from_tokens` so that the matrix builder does that work once
per item instead of once per pair.
"""

from abc import ABC, abstractmethod
from typing import Any


class DistanceMetric(ABC):
    """
    Abstract string distance.

    Subclasses implement :meth:`distance`. :meth:`normalized` maps the score
    into ``[0, 1]`` and is what modifiers build on.
    """

    #: Registry name; set by subclasses.
    name: str = "metric"

    #: Whether modifiers (Winkler, Partial, ...) may wrap this metric.
    composable: bool = True

    #: Whether precalculate() does useful per-item work.
    supports_precalculation: bool = False

    @abstractmethod
    def distance(self, a: str, b: str) -> float:
        """Return the dissimilarity between ``a`` and ``b``."""

    def normalized(self, a: str, b: str) -> float:
        """Return the distance scaled into ``[0, 1]``.

        The default assumes the metric is already normalized.
        """
        return self.distance(a, b)

    def precalculate(self, a: str) -> Any:
        """Return the per-item token for ``a``; the item itself by default."""
        return a

    def distance_from_tokens(self, token_a: Any, token_b: Any, a: str, b: str) -> float:
        """Distance between two items given their precalculated tokens."""
        return self.distance(a, b)

    def __call__(self, a: str, b: str) -> float:
        return self.distance(a, b)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
