"""
Thread pool execution for independent distance computations.

Results come back in submission order; the first task error is re-raised
after the remaining tasks are cancelled.
"""

import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterator, List, Optional, TypeVar

from ..utils.logging_setup import get_logger

logger = get_logger(__name__)

T = TypeVar('T')
R = TypeVar('R')


class ParallelExecutor:
    """
    Thin wrapper over a thread pool with ordered results.
    """

    def __init__(self, max_workers: Optional[int] = None):
        """
        Initialize parallel executor.

        Args:
            max_workers: Maximum number of worker threads (default: CPU count)
        """
        self.max_workers = max_workers or os.cpu_count() or 1
        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.shutdown()

    def start(self):
        """Start the executor."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self.max_workers)

    def shutdown(self, wait: bool = True):
        """Shutdown the executor."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait, cancel_futures=True)
            self._executor = None

    def imap(self, func: Callable[[T], R], items: List[T]) -> Iterator[R]:
        """
        Apply ``func`` to every item in parallel, yielding results in order.

        Args:
            func: Function to apply
            items: Items to process

        Yields:
            Results in the order of ``items``

        Raises:
            Exception: The first exception raised by any task
        """
        if not items:
            return

        self.start()
        futures: List[Future] = [self._executor.submit(func, item) for item in items]
        try:
            for future in futures:
                yield future.result()
        except Exception as e:
            logger.error(f"Task failed: {e}")
            raise
        finally:
            for future in futures:
                future.cancel()

    def map(self, func: Callable[[T], R], items: List[T]) -> List[R]:
        """Ordered, eager version of :meth:`imap`."""
        return list(self.imap(func, items))
