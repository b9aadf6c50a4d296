"""
shapewrap: wrapped ("higher-kinded") views of product types.

Derive a product type's shape once, then build, collapse, inspect and
update a parallel structure whose every field is W(field type) for a
pluggable wrapper W.
"""
from shapewrap.core.capabilities import (
    SequencePolicy,
    Wrapper,
    WrapperRegistry,
    get_wrapper_registry,
    resolve_wrapper,
)
from shapewrap.core.errors import (
    AccessError,
    ArityMismatchError,
    BuildError,
    CapabilityError,
    FieldNotFoundError,
    MissingCombineError,
    MissingIdentityError,
    MissingLiftError,
    MissingSequenceError,
    NotAProductError,
    PositionOutOfRangeError,
    ShapeError,
    ShapeMismatchError,
    ShapewrapError,
    TypeMismatchError,
    UnknownWrapperError,
    WrapperMismatchError,
)
from shapewrap.core.registration import WrappedType, wrap
from shapewrap.core.shape import ProductShape, Slot, derive, register_shape
from shapewrap.core.structure import (
    CONST,
    Const,
    Lens,
    WrappedStructure,
    build,
    construct,
    deconstruct,
    field,
    fresh,
    from_mapping,
    label,
    labels_where,
    map_slots,
    merge,
    position,
)

__version__ = "0.1.0"

__all__ = [
    "SequencePolicy",
    "Wrapper",
    "WrapperRegistry",
    "get_wrapper_registry",
    "resolve_wrapper",
    "AccessError",
    "ArityMismatchError",
    "BuildError",
    "CapabilityError",
    "FieldNotFoundError",
    "MissingCombineError",
    "MissingIdentityError",
    "MissingLiftError",
    "MissingSequenceError",
    "NotAProductError",
    "PositionOutOfRangeError",
    "ShapeError",
    "ShapeMismatchError",
    "ShapewrapError",
    "TypeMismatchError",
    "UnknownWrapperError",
    "WrapperMismatchError",
    "WrappedType",
    "wrap",
    "ProductShape",
    "Slot",
    "derive",
    "register_shape",
    "CONST",
    "Const",
    "Lens",
    "WrappedStructure",
    "build",
    "construct",
    "deconstruct",
    "field",
    "fresh",
    "from_mapping",
    "label",
    "labels_where",
    "map_slots",
    "merge",
    "position",
]
