"""
Greedy diversity sequencing over a distance matrix.

Items are selected one at a time. The first item is the one with the largest
total distance to all others; every later item is the unselected one whose
score against the already-selected set is largest:

- MaxiMin: distance to the nearest selected item
- MaxiMean: mean distance to the selected items

Ties go to the lowest index. Each unselected item keeps a running score
that is updated in O(1) per selection, so a full sequence costs O(N^2)
rather than recomputing every score against the growing set.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Union

import numpy as np

from ..errors import ConfigurationError
from ..metrics.base import DistanceMetric
from ..utils.logging_setup import get_logger, log_operation
from .matrix import validate_matrix

logger = get_logger(__name__)


class Strategy(str, Enum):
    """Diversity objective."""
    MAXIMIN = "maximin"
    MAXIMEAN = "maximean"

    @property
    def label(self) -> str:
        """Display label, as used in CSV headers."""
        return {"maximin": "MaxiMin", "maximean": "MaxiMean"}[self.value]

    @classmethod
    def parse(cls, text: Union[str, "Strategy"]) -> "Strategy":
        """Parse a strategy name case-insensitively (``MaxiMin``, ``maximean``, ...)."""
        if isinstance(text, Strategy):
            return text
        key = str(text).strip().lower().replace("-", "").replace("_", "")
        for strategy in cls:
            if strategy.value == key:
                return strategy
        raise ConfigurationError(
            f"Unknown strategy '{text}'. Available: {', '.join(s.label for s in cls)}",
            parameter="strategy",
        )


@dataclass
class DiversitySequence:
    """Selection order and its inverse.

    ``order[k]`` is the item chosen at step ``k``; ``rank[i]`` is the step
    at which item ``i`` was chosen (0-based).
    """
    order: List[int]
    rank: List[int]
    strategy: Strategy

    def head(self, k: int) -> List[int]:
        """The ``k`` most diverse items, i.e. the first ``k`` selections."""
        return self.order[:max(0, k)]

    def __len__(self) -> int:
        return len(self.order)


def diversity_sequence(matrix: Any, strategy: Union[str, "Strategy"] = Strategy.MAXIMIN) -> DiversitySequence:
    """
    Order all items of a distance matrix by greedy diversification.

    Args:
        matrix: N x N distance matrix
        strategy: ``Strategy.MAXIMIN`` or ``Strategy.MAXIMEAN`` (or its name)

    Returns:
        The full sequence with its rank vector

    Raises:
        ConfigurationError: Empty or malformed matrix, or unknown strategy
    """
    strategy = Strategy.parse(strategy)
    dm = validate_matrix(matrix)
    n = dm.shape[0]
    log_operation(logger, "diversity_sequence", strategy=strategy.label, items=n)

    seed = int(np.argmax(dm.sum(axis=1)))
    order = [seed]
    if n == 1:
        return DiversitySequence(order=order, rank=[0], strategy=strategy)

    selected = np.zeros(n, dtype=bool)
    selected[seed] = True
    # MaxiMin: nearest-selected distance. MaxiMean: sum to selected items.
    running = dm[seed].copy()

    for count in range(1, n):
        if strategy is Strategy.MAXIMIN:
            scores = running.copy()
        else:
            scores = running / count
        scores[selected] = -np.inf
        # argmax returns the first maximum, i.e. the lowest index
        chosen = int(np.argmax(scores))

        order.append(chosen)
        selected[chosen] = True
        if strategy is Strategy.MAXIMIN:
            np.minimum(running, dm[chosen], out=running)
        else:
            running += dm[chosen]

    rank = [0] * n
    for position, item in enumerate(order):
        rank[item] = position

    logger.debug(f"{strategy.label} order: {order}")
    return DiversitySequence(order=order, rank=rank, strategy=strategy)


def sequence(
    metric: Optional[DistanceMetric],
    matrix: Any,
    strategy: Union[str, "Strategy"] = Strategy.MAXIMIN,
) -> DiversitySequence:
    """
    Diversity sequence for a matrix produced with ``metric``.

    The metric is only used for reporting; the ordering depends on the
    matrix alone.
    """
    if metric is not None:
        logger.info(f"Sequencing items by {metric.name} distance")
    return diversity_sequence(matrix, strategy)
