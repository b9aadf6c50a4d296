from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple, Union

from shapewrap.core.capabilities.models import Lift, Wrapper
from shapewrap.core.capabilities.registry import reporting, resolve_wrapper

from .models import WrappedStructure

_log = logging.getLogger("shapewrap.build")


def curry(fn: Callable[..., Any], arity: int) -> Callable[[Any], Any]:
    """fn(a, b, c) -> fn'(a)(b)(c). Requires arity >= 1."""

    def step(collected: Tuple[Any, ...]) -> Callable[[Any], Any]:
        def take(arg: Any) -> Any:
            args = collected + (arg,)
            if len(args) == arity:
                return fn(*args)
            return step(args)

        return take

    return step(())


def construct(
    structure: WrappedStructure,
    wrapper: Optional[Union[Wrapper, str]] = None,
    *,
    pure: Optional[Lift] = None,
) -> Any:
    """
    Collapse a wrapped structure into W(product).

    The constructor is curried, lifted with `pure` (default: the wrapper's
    pure/lift), then fed each slot value left to right through the
    wrapper's `sequence`. What a failed slot does to the result is the
    wrapper's business (see Wrapper.sequence_policy).
    """
    w = resolve_wrapper(wrapper) if wrapper is not None else structure.wrapper
    shape = structure.shape

    with reporting(f"construct {shape.type_name}"):
        lift_ctor = pure if pure is not None else w.require_pure()
        sequence = w.require_sequence() if len(shape) else None

    _log.debug("construct %s under %s policy=%s", shape.type_name, w.name, w.sequence_policy.value)

    if sequence is None:
        return lift_ctor(shape.constructor())

    acc = lift_ctor(curry(shape.constructor, len(shape)))
    for value in structure.values:
        acc = sequence(acc, value)
    return acc
