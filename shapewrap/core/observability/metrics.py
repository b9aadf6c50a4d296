from __future__ import annotations

from collections import Counter
from typing import Dict

from prometheus_client import Counter as PromCounter

# Named counters (in-process snapshot)
_NAMED = Counter()

_PROM_DERIVATIONS = PromCounter(
    "shapewrap_shape_derivations_total",
    "Product shapes derived by reflection or registration",
    ["kind"],
)

_PROM_CACHE = PromCounter(
    "shapewrap_shape_cache_lookups_total",
    "Shape cache lookups",
    ["result"],
)

_PROM_CAPABILITY_ERRORS = PromCounter(
    "shapewrap_capability_errors_total",
    "Capability resolution failures",
    ["code"],
)


def reset_metrics() -> None:
    """
    Test helper: clears the in-process counters to avoid cross-test leakage.
    Prometheus counters are monotonic and are left alone.
    """
    _NAMED.clear()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def inc_derivation(kind: str) -> None:
    _NAMED[f"shape.derived.{kind}"] += 1
    _PROM_DERIVATIONS.labels(kind=kind).inc()


def inc_cache(result: str) -> None:
    _NAMED[f"shape.cache.{result}"] += 1
    _PROM_CACHE.labels(result=result).inc()


def inc_capability_error(code: str) -> None:
    _NAMED[code] += 1
    _PROM_CAPABILITY_ERRORS.labels(code=code).inc()


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)
