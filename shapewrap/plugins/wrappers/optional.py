from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from shapewrap.core.capabilities.models import SequencePolicy, Wrapper


@dataclass(frozen=True)
class Some:
    value: Any


class _Nothing:
    _instance: Optional["_Nothing"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOTHING"

    def __bool__(self) -> bool:
        return False


NOTHING = _Nothing()


def is_absent(wrapped: Any) -> bool:
    return wrapped is NOTHING


def is_present(wrapped: Any) -> bool:
    return isinstance(wrapped, Some)


def from_optional(value: Any) -> Any:
    """None -> NOTHING, anything else -> Some(value)."""
    return NOTHING if value is None else Some(value)


def _sequence(wrapped_fn: Any, wrapped_arg: Any) -> Any:
    if wrapped_fn is NOTHING or wrapped_arg is NOTHING:
        return NOTHING
    return Some(wrapped_fn.value(wrapped_arg.value))


def _combine(left: Any, right: Any) -> Any:
    # last present value wins
    return left if right is NOTHING else right


def _contents(wrapped: Any) -> Optional[Tuple[Any, ...]]:
    if isinstance(wrapped, Some):
        return (wrapped.value,)
    if wrapped is NOTHING:
        return ()
    return None


WRAPPER = Wrapper(
    name="optional",
    lift=Some,
    sequence=_sequence,
    combine=_combine,
    identity=lambda: NOTHING,
    contents=_contents,
    sequence_policy=SequencePolicy.SHORT_CIRCUIT,
    version="1.0.0",
    description="Some(value) or NOTHING; construct yields NOTHING if any slot is absent",
)
