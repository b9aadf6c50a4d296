from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional

from shapewrap.core.observability.metrics import inc_cache

from .models import ProductShape


class ShapeCache:
    """
    Type -> ProductShape, populated at most once per type.

    The compute function runs outside the lock; the first published result
    wins and concurrent duplicates are discarded. Shapes are deterministic,
    so a discarded duplicate is always equal to the kept one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._store: Dict[Any, ProductShape] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: Any) -> Optional[ProductShape]:
        with self._lock:
            return self._store.get(key)

    def get_or_compute(self, key: Any, compute: Callable[[], ProductShape]) -> ProductShape:
        with self._lock:
            cached = self._store.get(key)
            if cached is not None:
                self.hits += 1
        if cached is not None:
            inc_cache("hit")
            return cached

        inc_cache("miss")
        shape = compute()

        with self._lock:
            self.misses += 1
            return self._store.setdefault(key, shape)

    def discard(self, key: Any) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


_SHAPE_CACHE = ShapeCache()


def get_shape_cache() -> ShapeCache:
    return _SHAPE_CACHE
