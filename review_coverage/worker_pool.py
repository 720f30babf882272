"""Fixed-size worker pool shared by the analysis phases."""

import logging
from typing import Callable, Iterable, List, TypeVar
from concurrent.futures import ThreadPoolExecutor, as_completed

T = TypeVar('T')
R = TypeVar('R')


class WorkerPool:
    """A fixed number of worker threads that process work items in batches.

    The pool is created once and reused by each phase in turn. A batch
    finishes only when every item has produced a result; the first error
    cancels the items that have not started and is raised to the caller.
    """

    def __init__(self, size: int, name: str = 'worker'):
        """Initialize the pool.

        Args:
            size: Number of worker threads
            name: Thread name prefix
        """
        if size < 1:
            raise ValueError(f"Worker pool size must be positive, got {size}")
        self.size = size
        self._executor = ThreadPoolExecutor(max_workers=size, thread_name_prefix=name)
        self._closed = False

    def map_unordered(self, func: Callable[[T], R], items: Iterable[T],
                      description: str = None) -> List[R]:
        """Apply func to every item, returning results in completion order.

        Args:
            func: Function run on a worker thread for each item
            items: Work items
            description: Label for progress output, or None for silence

        Returns:
            One result per input item

        Raises:
            RuntimeError: If the pool was already closed
            Exception: The first error raised by func
        """
        if self._closed:
            raise RuntimeError("Worker pool is closed")

        items = list(items)
        if not items:
            return []

        futures = [self._executor.submit(func, item) for item in items]
        results = []
        try:
            for future in as_completed(futures):
                results.append(future.result())

                completed = len(results)
                if description and (completed % 10 == 0 or completed == len(items)):
                    print(f"  {description}: {completed}/{len(items)}", flush=True)
        except Exception:
            cancelled = sum(future.cancel() for future in futures)
            logging.debug(f"Cancelled {cancelled} pending work item(s) after error")
            raise

        return results

    def close(self):
        """Stop accepting work and join all worker threads."""
        if not self._closed:
            self._closed = True
            self._executor.shutdown(wait=True, cancel_futures=True)

    def __enter__(self) -> 'WorkerPool':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
