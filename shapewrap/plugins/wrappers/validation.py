from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from shapewrap.core.capabilities.models import SequencePolicy, Wrapper


@dataclass(frozen=True)
class Valid:
    value: Any


@dataclass(frozen=True)
class Invalid:
    errors: Tuple[str, ...]


def invalid(*errors: str) -> Invalid:
    return Invalid(tuple(errors))


def is_invalid(wrapped: Any) -> bool:
    return isinstance(wrapped, Invalid)


def check(predicate: Callable[[Any], bool], message: str) -> Callable[[Any], Any]:
    """Build a validator: value -> Valid(value) or Invalid((message,))."""

    def run(value: Any) -> Any:
        return Valid(value) if predicate(value) else Invalid((message,))

    return run


def _sequence(wrapped_fn: Any, wrapped_arg: Any) -> Any:
    if isinstance(wrapped_fn, Invalid) and isinstance(wrapped_arg, Invalid):
        return Invalid(wrapped_fn.errors + wrapped_arg.errors)
    if isinstance(wrapped_fn, Invalid):
        return wrapped_fn
    if isinstance(wrapped_arg, Invalid):
        return wrapped_arg
    return Valid(wrapped_fn.value(wrapped_arg.value))


def _combine(left: Any, right: Any) -> Any:
    # a valid value beats an invalid one; two valid values: last wins
    if isinstance(left, Invalid) and isinstance(right, Invalid):
        return Invalid(left.errors + right.errors)
    if isinstance(right, Valid):
        return right
    return left


def _contents(wrapped: Any) -> Optional[Tuple[Any, ...]]:
    if isinstance(wrapped, Valid):
        return (wrapped.value,)
    if isinstance(wrapped, Invalid):
        return ()
    return None


# No identity element: an "unset" slot has no meaningful error to report.
WRAPPER = Wrapper(
    name="validation",
    lift=Valid,
    sequence=_sequence,
    combine=_combine,
    contents=_contents,
    sequence_policy=SequencePolicy.ACCUMULATE,
    version="1.0.0",
    description="Valid(value) or Invalid(errors); construct collects errors from every slot",
)
