from __future__ import annotations

import types
import typing
from typing import Any

_UNION_TYPES = tuple(t for t in (typing.Union, getattr(types, "UnionType", None)) if t is not None)


def matches(value: Any, declared: Any) -> bool:
    """
    Shallow runtime check of `value` against a declared annotation.

    Containers are checked by origin only (list[int] accepts any list).
    Anything that cannot be checked at runtime (Any, TypeVar, forward-ref
    strings, protocols without runtime support) matches.
    """
    if declared is Any or declared is object:
        return True
    if isinstance(declared, (str, typing.ForwardRef, typing.TypeVar)):
        return True
    if declared is None or declared is type(None):
        return value is None

    # NewType
    supertype = getattr(declared, "__supertype__", None)
    if supertype is not None:
        return matches(value, supertype)

    origin = typing.get_origin(declared)
    if origin is not None:
        args = typing.get_args(declared)
        if origin in _UNION_TYPES:
            return any(matches(value, a) for a in args)
        if origin is typing.Annotated:
            return matches(value, args[0])
        if origin is typing.Literal:
            return value in args
        if isinstance(origin, type):
            return isinstance(value, origin)
        return True

    if isinstance(declared, type):
        # numeric tower: int is acceptable where float/complex is declared
        if declared is float and isinstance(value, int) and not isinstance(value, bool):
            return True
        if declared is complex and isinstance(value, (int, float)) and not isinstance(value, bool):
            return True
        try:
            return isinstance(value, declared)
        except TypeError:
            return True

    return True
