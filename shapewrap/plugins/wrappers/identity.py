from __future__ import annotations

from typing import Any, Tuple

from shapewrap.core.capabilities.models import SequencePolicy, Wrapper


def _lift(value: Any) -> Any:
    return value


def _sequence(fn: Any, arg: Any) -> Any:
    return fn(arg)


_NUMBERS = (int, float, complex)
_CONCAT = (str, bytes, list, tuple)


def _combine(left: Any, right: Any) -> Any:
    # Sums and concatenations on exact builtin types; anything else (bool, None) keeps the right value.
    if type(left) in _NUMBERS and type(right) in _NUMBERS:
        return left + right
    if type(left) in _CONCAT and type(left) is type(right):
        return left + right
    if isinstance(left, dict) and isinstance(right, dict):
        return {**left, **right}
    if isinstance(left, (set, frozenset)) and isinstance(right, (set, frozenset)):
        return left | right
    return right


def _contents(wrapped: Any) -> Tuple[Any, ...]:
    return (wrapped,)


# bool has no identity: it is neither additive nor concatenative.
WRAPPER = Wrapper(
    name="identity",
    lift=_lift,
    sequence=_sequence,
    combine=_combine,
    identities={
        int: lambda: 0,
        float: lambda: 0.0,
        complex: lambda: 0j,
        str: lambda: "",
        bytes: lambda: b"",
        list: list,
        dict: dict,
        tuple: tuple,
        set: set,
        frozenset: frozenset,
    },
    contents=_contents,
    sequence_policy=SequencePolicy.TOTAL,
    version="1.0.0",
    description="W(A) = A; construct rebuilds the plain value",
)
