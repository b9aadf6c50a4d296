from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from shapewrap.core.errors import FieldNotFoundError
from shapewrap.core.shape.derive import as_shape
from shapewrap.core.shape.models import ProductShape, Slot

from .builder import check_slot_value
from .models import WrappedStructure


@dataclass(frozen=True)
class Lens:
    """
    get/set pair bound to one resolved slot of one shape.

    Laws, for any structure s of this shape and well-typed x, y:
      get(set(s, x)) == x
      set(set(s, x), y) == set(s, y)
      set(s, get(s)) == s
    """

    shape: ProductShape
    slot: Slot

    def get(self, structure: WrappedStructure) -> Any:
        structure.ensure_shape(self.shape)
        return structure.values[self.slot.index]

    def set(self, structure: WrappedStructure, value: Any, *, strict: Optional[bool] = None) -> WrappedStructure:
        structure.ensure_shape(self.shape)
        check_slot_value(self.slot, value, structure.wrapper, strict=strict)
        return structure.replace(self.slot.position, value)

    def modify(self, structure: WrappedStructure, fn: Callable[[Any], Any]) -> WrappedStructure:
        return self.set(structure, fn(self.get(structure)))


def field(target: Any, name: str) -> Lens:
    shape = as_shape(target)
    slot = shape.find(name)
    if slot is None:
        raise FieldNotFoundError(name, shape.type_name)
    return Lens(shape=shape, slot=slot)


def position(target: Any, index: int) -> Lens:
    shape = as_shape(target)
    return Lens(shape=shape, slot=shape.slot(index))
