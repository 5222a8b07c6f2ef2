"""
Memoization of computed statistics bundles.

Entries are keyed on the version of the loaded transaction set together
with the filter specification and ranking size, so a changed transaction
set never serves a stale bundle.
"""

import logging
import threading
from collections import OrderedDict
from typing import Callable, Hashable, Optional, Tuple

from ..schemas import FilterSpec, StatisticsBundle

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, FilterSpec, int]


class StatisticsCache:
    """Thread-safe LRU cache of statistics bundles"""

    def __init__(self, max_entries: int = 128):
        if max_entries < 0:
            raise ValueError("max_entries must be zero or positive")
        self.max_entries = max_entries
        self._entries: "OrderedDict[Hashable, StatisticsBundle]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(version: str, spec: FilterSpec, top_n: int) -> CacheKey:
        return (version, spec, top_n)

    def get(self, key: CacheKey) -> Optional[StatisticsBundle]:
        with self._lock:
            bundle = self._entries.get(key)
            if bundle is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return bundle

    def put(self, key: CacheKey, bundle: StatisticsBundle) -> None:
        if self.max_entries == 0:
            return
        with self._lock:
            self._entries[key] = bundle
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def get_or_compute(
        self,
        version: str,
        spec: FilterSpec,
        top_n: int,
        compute: Callable[[], StatisticsBundle]
    ) -> StatisticsBundle:
        key = self.make_key(version, spec, top_n)
        bundle = self.get(key)
        if bundle is not None:
            logger.debug(f"Statistics cache hit for version {version[:12]}")
            return bundle
        bundle = compute()
        self.put(key, bundle)
        return bundle

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)
