import threading
from dataclasses import dataclass

from shapewrap import derive
from shapewrap.core.observability.metrics import snapshot_named
from shapewrap.core.shape import ShapeCache
from shapewrap.core.shape.derive import _derive_uncached


@dataclass
class Person:
    name: str
    age: int
    likes_dogs: bool


def test_get_or_compute_keeps_first_published_result():
    cache = ShapeCache()
    workers = 4
    barrier = threading.Barrier(workers)
    results = []
    lock = threading.Lock()

    def compute():
        # every worker misses, then all compute concurrently
        barrier.wait(timeout=5)
        return _derive_uncached(Person)

    def worker():
        shape = cache.get_or_compute(Person, compute)
        with lock:
            results.append(shape)

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert len(results) == workers
    assert len({id(r) for r in results}) == 1
    assert cache.misses == workers
    assert len(cache) == 1

    assert cache.get_or_compute(Person, compute) is results[0]
    assert cache.hits == 1


def test_derive_counts_cache_hits_and_misses():
    derive(Person)
    derive(Person)

    snap = snapshot_named()
    assert snap["shape.cache.miss"] == 1
    assert snap["shape.cache.hit"] == 1
    assert snap["shape.derived.dataclass"] == 1


def test_clear_resets_counters():
    cache = ShapeCache()
    cache.get_or_compute(Person, lambda: _derive_uncached(Person))
    cache.clear()
    assert len(cache) == 0
    assert (cache.hits, cache.misses) == (0, 0)
