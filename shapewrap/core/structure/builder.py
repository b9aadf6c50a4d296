from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Tuple, Union

from shapewrap.core.capabilities.models import IdentityElement, Wrapper
from shapewrap.core.capabilities.registry import reporting, resolve_wrapper
from shapewrap.core.config import get_settings
from shapewrap.core.errors import ArityMismatchError, TypeMismatchError
from shapewrap.core.shape.derive import as_shape, derive
from shapewrap.core.shape.models import ProductShape, Slot
from shapewrap.core.typematch import matches

from .models import WrappedStructure

_log = logging.getLogger("shapewrap.build")

WrapperRef = Union[Wrapper, str]


def check_slot_value(slot: Slot, value: Any, wrapper: Wrapper, *, strict: Optional[bool] = None) -> None:
    """Raise TypeMismatchError unless `value` is a W(slot.declared_type)."""
    if strict is None:
        strict = get_settings().strict_types
    if not strict:
        return
    contained = wrapper.inspect(value)
    if contained is None:
        raise TypeMismatchError(slot, value, wrapper.name)
    for v in contained:
        if not matches(v, slot.declared_type):
            raise TypeMismatchError(slot, value, wrapper.name)


def build(
    target: Any,
    values: Iterable[Any],
    wrapper: WrapperRef,
    *,
    strict: Optional[bool] = None,
) -> WrappedStructure:
    """
    Wrapped structure from explicit per-slot values (already wrapped).

    `target` is a ProductShape or a product type.
    """
    shape = as_shape(target)
    w = resolve_wrapper(wrapper)
    vals = tuple(values)
    if len(vals) != len(shape):
        raise ArityMismatchError(shape.type_name, len(shape), len(vals))
    for slot, v in zip(shape.slots, vals):
        check_slot_value(slot, v, w, strict=strict)
    return WrappedStructure(shape=shape, wrapper=w, values=vals)


def deconstruct(value: Any, wrapper: WrapperRef, shape: Any = None) -> WrappedStructure:
    """
    Lift every field of a product value into the wrapper.

    Plain tuples carry no field information: pass `shape=tuple[...]`.
    """
    shp = derive(type(value)) if shape is None else as_shape(shape)
    w = resolve_wrapper(wrapper)
    with reporting(f"deconstruct {shp.type_name}"):
        lift = w.require_lift()
    return WrappedStructure(
        shape=shp,
        wrapper=w,
        values=tuple(lift(shp.extract(value, s)) for s in shp.slots),
    )


def resolve_identities(target: Any, wrapper: WrapperRef) -> Tuple[IdentityElement, ...]:
    """Identity element factory per slot, resolved up front."""
    shape = as_shape(target)
    w = resolve_wrapper(wrapper)
    with reporting(f"identity resolution for {shape.type_name}"):
        factories = tuple(w.identity_for(s.declared_type) for s in shape.slots)
    _log.debug("resolved %d identity elements for %s under %s", len(factories), shape.type_name, w.name)
    return factories


def fresh(
    target: Any,
    wrapper: WrapperRef,
    *,
    identities: Optional[Tuple[IdentityElement, ...]] = None,
) -> WrappedStructure:
    """Every slot holds the wrapper's identity element for its declared type."""
    shape: ProductShape = as_shape(target)
    w = resolve_wrapper(wrapper)
    factories = identities if identities is not None else resolve_identities(shape, w)
    return WrappedStructure(shape=shape, wrapper=w, values=tuple(f() for f in factories))
