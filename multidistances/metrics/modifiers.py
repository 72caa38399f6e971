"""
Modifiers: metrics that wrap another metric and transform its score.

All modifiers work on the base metric's normalized distance, so their
results are in ``[0, 1]``. Wrapping a metric that declares
``composable = False`` (compression distances) is a configuration error.
"""

from typing import Callable, Dict

from ..errors import ConfigurationError
from .base import DistanceMetric


def _common_prefix_length(a: str, b: str) -> int:
    n = 0
    for ca, cb in zip(a, b):
        if ca != cb:
            break
        n += 1
    return n


def _shorter_first(a: str, b: str):
    return (a, b) if len(a) <= len(b) else (b, a)


class Modifier(DistanceMetric):
    """Base for metrics composed over another metric."""

    modifier_name = "modifier"

    def __init__(self, base: DistanceMetric):
        if not base.composable:
            raise ConfigurationError(
                f"Metric '{base.name}' cannot be combined with the "
                f"'{self.modifier_name}' modifier",
                parameter="modifier",
                details={'metric': base.name, 'modifier': self.modifier_name},
            )
        self.base = base
        self.name = f"{base.name}+{self.modifier_name}"

    def normalized(self, a: str, b: str) -> float:
        return self.distance(a, b)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.base!r})"


class Winkler(Modifier):
    """Reward a shared prefix when the base score is already good.

    With ``l`` the common prefix length capped at ``max_length``, a score
    ``d <= threshold`` becomes ``d - l * p * d``.
    """

    modifier_name = "winkler"

    def __init__(self, base: DistanceMetric, p: float = 0.1,
                 threshold: float = 0.3, max_length: int = 4):
        super().__init__(base)
        if not 0.0 <= p * max_length <= 1.0:
            raise ConfigurationError(
                "Winkler scaling p * max_length must lie in [0, 1]", parameter="p"
            )
        self.p = p
        self.threshold = threshold
        self.max_length = max_length

    def distance(self, a: str, b: str) -> float:
        score = self.base.normalized(a, b)
        if score <= self.threshold:
            prefix = min(_common_prefix_length(a, b), self.max_length)
            score -= prefix * self.p * score
        return score


class Partial(Modifier):
    """Best match of the shorter string against same-length windows of the longer."""

    modifier_name = "partial"

    def distance(self, a: str, b: str) -> float:
        short, long_ = _shorter_first(a, b)
        if len(short) == len(long_):
            return self.base.normalized(short, long_)
        if not short:
            return 1.0
        width = len(short)
        best = 1.0
        for start in range(len(long_) - width + 1):
            best = min(best, self.base.normalized(short, long_[start:start + width]))
            if best == 0.0:
                break
        return best


def _sorted_tokens(s: str) -> str:
    return " ".join(sorted(s.split()))


class TokenSort(Modifier):
    """Compare strings after sorting their whitespace-separated words."""

    modifier_name = "token-sort"

    def distance(self, a: str, b: str) -> float:
        return self.base.normalized(_sorted_tokens(a), _sorted_tokens(b))


class TokenSet(Modifier):
    """Compare the shared word set against each side's full word set."""

    modifier_name = "token-set"

    def distance(self, a: str, b: str) -> float:
        words_a, words_b = set(a.split()), set(b.split())
        common = " ".join(sorted(words_a & words_b))
        only_a = " ".join(sorted(words_a - words_b))
        only_b = " ".join(sorted(words_b - words_a))
        with_a = f"{common} {only_a}".strip()
        with_b = f"{common} {only_b}".strip()
        return min(
            self.base.normalized(common, with_a),
            self.base.normalized(common, with_b),
            self.base.normalized(with_a, with_b),
        )


class TokenMax(Modifier):
    """Minimum over the base score and scaled partial/token variants."""

    modifier_name = "token-max"

    UNBASE_SCALE = 0.95

    def __init__(self, base: DistanceMetric):
        super().__init__(base)
        self._sort = TokenSort(base)
        self._set = TokenSet(base)
        self._partial = Partial(base)
        self._partial_sort = TokenSort(self._partial)
        self._partial_set = TokenSet(self._partial)

    def distance(self, a: str, b: str) -> float:
        short, long_ = _shorter_first(a, b)
        score = self.base.normalized(short, long_)
        unbase = self.UNBASE_SCALE

        if len(long_) >= 1.5 * len(short):
            scale = 0.6 if len(long_) > 8 * len(short) else 0.9
            score = min(score, 1.0 - scale * (1.0 - self._partial(short, long_)))
            score = min(score, 1.0 - unbase * scale * (1.0 - self._partial_sort(short, long_)))
            return min(score, 1.0 - unbase * scale * (1.0 - self._partial_set(short, long_)))

        score = min(score, 1.0 - unbase * (1.0 - self._sort(short, long_)))
        return min(score, 1.0 - unbase * (1.0 - self._set(short, long_)))


MODIFIERS: Dict[str, Callable[[DistanceMetric], Modifier]] = {
    cls.modifier_name: cls for cls in (Winkler, Partial, TokenSort, TokenSet, TokenMax)
}


def modify(metric: DistanceMetric, modifier: str) -> Modifier:
    """
    Wrap ``metric`` with the named modifier.

    Args:
        metric: Base metric
        modifier: One of the names in ``MODIFIERS``

    Returns:
        The composed metric

    Raises:
        ConfigurationError: Unknown modifier, or ``metric`` is not composable
    """
    key = modifier.lower().replace("_", "-")
    if key not in MODIFIERS:
        raise ConfigurationError(
            f"Unknown modifier '{modifier}'. Available: {', '.join(MODIFIERS)}",
            parameter="modifier",
        )
    return MODIFIERS[key](metric)
