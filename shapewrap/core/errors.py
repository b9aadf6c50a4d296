from __future__ import annotations

from typing import Any, Dict, Optional


def type_label(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or getattr(tp, "__name__", None) or repr(tp)


class ShapewrapError(Exception):
    """
    Base error. Every subclass carries a stable dotted `code` and a `data`
    payload so callers can match on codes instead of message text.
    """

    code = "shapewrap.error"

    def __init__(self, message: str, *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.data: Dict[str, Any] = dict(data or {})

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": dict(self.data)}


# --- shape ---

class ShapeError(ShapewrapError):
    code = "shape.error"


class NotAProductError(ShapeError):
    code = "shape.not_a_product"

    def __init__(self, tp: Any, reason: str):
        self.product_type = tp
        self.reason = reason
        super().__init__(
            f"{type_label(tp)} is not a product type: {reason}",
            data={"type": type_label(tp), "reason": reason},
        )


# --- build ---

class BuildError(ShapewrapError):
    code = "build.error"


class ArityMismatchError(BuildError):
    code = "build.arity_mismatch"

    def __init__(self, type_name: str, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{type_name} has {expected} slots, got {actual} values",
            data={"type": type_name, "expected": expected, "actual": actual},
        )


class TypeMismatchError(BuildError):
    code = "build.type_mismatch"

    def __init__(self, slot: Any, value: Any, wrapper_name: str):
        self.slot = slot
        self.value = value
        super().__init__(
            f"slot {slot.label!r} expects {wrapper_name}[{type_label(slot.declared_type)}], got {value!r}",
            data={
                "slot": slot.label,
                "position": slot.position,
                "declared_type": type_label(slot.declared_type),
                "wrapper": wrapper_name,
            },
        )


class ShapeMismatchError(BuildError):
    code = "build.shape_mismatch"

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"structure shape {actual} does not match {expected}",
            data={"expected": expected, "actual": actual},
        )


class WrapperMismatchError(BuildError):
    code = "build.wrapper_mismatch"

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"structure wrapped in {actual} cannot be combined under {expected}",
            data={"expected": expected, "actual": actual},
        )


# --- access ---

class AccessError(ShapewrapError):
    code = "access.error"


class FieldNotFoundError(AccessError):
    code = "access.field_not_found"

    def __init__(self, name: str, type_name: str):
        self.name = name
        self.type_name = type_name
        super().__init__(
            f"{type_name} has no field named {name!r}",
            data={"name": name, "type": type_name},
        )


class PositionOutOfRangeError(AccessError):
    code = "access.position_out_of_range"

    def __init__(self, index: Any, slot_count: int):
        self.index = index
        self.slot_count = slot_count
        super().__init__(
            f"position {index!r} is outside 1..{slot_count}",
            data={"index": index, "slot_count": slot_count},
        )


# --- capabilities ---

class CapabilityError(ShapewrapError):
    code = "capability.error"

    def __init__(self, message: str, *, wrapper: str, data: Optional[Dict[str, Any]] = None):
        self.wrapper = wrapper
        super().__init__(message, data={"wrapper": wrapper, **(data or {})})


class MissingIdentityError(CapabilityError):
    code = "capability.missing_identity"

    def __init__(self, tp: Any, wrapper: str):
        self.missing_type = tp
        super().__init__(
            f"wrapper {wrapper!r} has no identity element for {type_label(tp)}",
            wrapper=wrapper,
            data={"type": type_label(tp)},
        )


class MissingLiftError(CapabilityError):
    code = "capability.missing_lift"

    def __init__(self, wrapper: str):
        super().__init__(f"wrapper {wrapper!r} does not provide lift", wrapper=wrapper)


class MissingSequenceError(CapabilityError):
    code = "capability.missing_sequence"

    def __init__(self, wrapper: str):
        super().__init__(f"wrapper {wrapper!r} does not provide sequence", wrapper=wrapper)


class MissingCombineError(CapabilityError):
    code = "capability.missing_combine"

    def __init__(self, wrapper: str):
        super().__init__(f"wrapper {wrapper!r} does not provide combine", wrapper=wrapper)


class UnknownWrapperError(CapabilityError):
    code = "capability.unknown_wrapper"

    def __init__(self, wrapper: str, known: Any = ()):
        super().__init__(
            f"no wrapper registered under {wrapper!r}",
            wrapper=wrapper,
            data={"known": sorted(known)},
        )
