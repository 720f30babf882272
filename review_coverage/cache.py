"""In-memory caching of per pull request line counts."""

import logging
import threading
from typing import Callable, Dict


class LineCountCache:
    """Thread-safe, write-once map from pull request URL to added-line count.

    Concurrent lookups of the same missing key are coalesced: the first
    caller computes the value while later callers wait for it, so a pull
    request is fetched at most once unless the computation fails.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._values: Dict[str, int] = {}
        self._in_flight: Dict[str, threading.Event] = {}
        self.hits = 0
        self.misses = 0

    def put(self, key: str, value: int) -> int:
        """Store a count unless one is already present.

        Args:
            key: The pull request URL
            value: The computed count

        Returns:
            The value stored under the key (the existing one if it was already set)
        """
        with self._lock:
            return self._values.setdefault(key, value)

    def get_or_compute(self, key: str, compute: Callable[[], int]) -> int:
        """Return the cached count for key, computing it on a miss.

        The lock is only held to inspect and update the map; compute runs
        without it.

        Args:
            key: The pull request URL
            compute: Zero-argument callable producing the count

        Returns:
            The cached or freshly computed count
        """
        while True:
            with self._lock:
                if key in self._values:
                    self.hits += 1
                    logging.debug(f"Cache hit for {key}")
                    return self._values[key]
                pending = self._in_flight.get(key)
                if pending is None:
                    pending = threading.Event()
                    self._in_flight[key] = pending
                    self.misses += 1
                    owner = True
                else:
                    owner = False

            if not owner:
                # Another worker is computing this key; re-check once it is done
                pending.wait()
                continue

            try:
                return self.put(key, compute())
            finally:
                with self._lock:
                    del self._in_flight[key]
                pending.set()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
