from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

from shapewrap.core.capabilities.models import Wrapper
from shapewrap.core.capabilities.registry import reporting, resolve_wrapper
from shapewrap.core.errors import FieldNotFoundError, WrapperMismatchError
from shapewrap.core.shape.derive import as_shape

from .builder import build
from .models import WrappedStructure


def merge(
    left: WrappedStructure,
    right: WrappedStructure,
    wrapper: Optional[Union[Wrapper, str]] = None,
    *,
    strict: Optional[bool] = None,
) -> WrappedStructure:
    """
    Slot-wise `combine(left_i, right_i)`. Both sides must share one shape and
    one wrapper; the combined values are validated like `build`.
    """
    right.ensure_shape(left.shape)
    w = resolve_wrapper(wrapper) if wrapper is not None else left.wrapper
    for side in (left, right):
        if side.wrapper is not w:
            raise WrapperMismatchError(w.name, side.wrapper.name)
    with reporting(f"merge {left.shape.type_name}"):
        combine = w.require_combine()
    combined = [combine(a, b) for a, b in zip(left.values, right.values)]
    return build(left.shape, combined, w, strict=strict)


def map_slots(
    fn: Callable[[Any], Any],
    structure: WrappedStructure,
    wrapper: Union[Wrapper, str],
    *,
    strict: Optional[bool] = None,
) -> WrappedStructure:
    """
    Move every slot into another wrapper with one uniform function.
    The result is validated against the target wrapper like `build`.
    """
    return build(structure.shape, [fn(v) for v in structure.values], wrapper, strict=strict)


def from_mapping(
    target: Any,
    mapping: Mapping[str, Any],
    wrapper: Union[Wrapper, str],
    *,
    strict: Optional[bool] = None,
) -> WrappedStructure:
    """
    Build from label -> wrapped value. Labels absent from `mapping` get the
    wrapper's identity element for their slot type.
    """
    shape = as_shape(target)
    w = resolve_wrapper(wrapper)

    known = set(shape.labels)
    for key in mapping:
        if key not in known:
            raise FieldNotFoundError(str(key), shape.type_name)

    values = []
    for s in shape.slots:
        if s.label in mapping:
            values.append(mapping[s.label])
            continue
        with reporting(f"from_mapping {shape.type_name}.{s.label}"):
            values.append(w.identity_for(s.declared_type)())
    return build(shape, values, w, strict=strict)
