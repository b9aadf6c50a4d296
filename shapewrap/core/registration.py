from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from shapewrap.core.capabilities.models import IdentityElement, Wrapper
from shapewrap.core.capabilities.registry import resolve_wrapper
from shapewrap.core.shape.derive import as_shape
from shapewrap.core.shape.models import ProductShape
from shapewrap.core.structure import accessors, builder, collapser, combinators, labels
from shapewrap.core.structure.models import WrappedStructure

_log = logging.getLogger("shapewrap.build")


class WrappedType:
    """
    One product type bound to one wrapper.

    Shape derivation and identity resolution happen here, once, so a
    missing identity element surfaces at registration rather than on the
    first `fresh()` call. Wrappers that declare no identity capability at
    all skip that step; `fresh()` then raises MissingIdentityError.
    """

    def __init__(self, product_type: Any, wrapper: Union[Wrapper, str]):
        self.shape: ProductShape = as_shape(product_type)
        self.wrapper: Wrapper = resolve_wrapper(wrapper)
        self._identities: Optional[Tuple[IdentityElement, ...]] = None
        if self.wrapper.has_identity:
            self._identities = builder.resolve_identities(self.shape, self.wrapper)
        _log.debug("wrapped %s under %s", self.shape.type_name, self.wrapper.name)

    def __repr__(self) -> str:
        return f"WrappedType({self.shape.type_name}, {self.wrapper.name})"

    def build(self, *values: Any) -> WrappedStructure:
        return builder.build(self.shape, values, self.wrapper)

    def deconstruct(self, value: Any) -> WrappedStructure:
        return builder.deconstruct(value, self.wrapper, self.shape)

    def construct(self, structure: WrappedStructure) -> Any:
        structure.ensure_shape(self.shape)
        return collapser.construct(structure, self.wrapper)

    def fresh(self) -> WrappedStructure:
        if self._identities is None:
            self._identities = builder.resolve_identities(self.shape, self.wrapper)
        return builder.fresh(self.shape, self.wrapper, identities=self._identities)

    def field(self, name: str) -> accessors.Lens:
        return accessors.field(self.shape, name)

    def position(self, index: int) -> accessors.Lens:
        return accessors.position(self.shape, index)

    def label(self) -> WrappedStructure:
        return labels.label(self.shape)

    def labels_where(self, predicate: Callable[[Any], bool], structure: WrappedStructure) -> List[str]:
        structure.ensure_shape(self.shape)
        return labels.labels_where(predicate, structure)

    def merge(self, left: WrappedStructure, right: WrappedStructure) -> WrappedStructure:
        left.ensure_shape(self.shape)
        return combinators.merge(left, right, self.wrapper)

    def from_mapping(self, mapping: Mapping[str, Any]) -> WrappedStructure:
        return combinators.from_mapping(self.shape, mapping, self.wrapper)


def wrap(product_type: Any, wrapper: Union[Wrapper, str]) -> WrappedType:
    return WrappedType(product_type, wrapper)
