from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple

from shapewrap.core.capabilities.models import Wrapper
from shapewrap.core.errors import ArityMismatchError, ShapeMismatchError
from shapewrap.core.shape.models import ProductShape


@dataclass(frozen=True)
class WrappedStructure:
    """
    One W(declared_type) value per slot of `shape`, in slot order.

    Immutable: `replace` returns a new structure that shares every value
    except the replaced one.
    """

    shape: ProductShape
    wrapper: Wrapper
    values: Tuple[Any, ...]

    def __post_init__(self):
        if len(self.values) != len(self.shape):
            raise ArityMismatchError(self.shape.type_name, len(self.shape), len(self.values))

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def at(self, position: int) -> Any:
        return self.values[self.shape.slot(position).index]

    def replace(self, position: int, value: Any) -> "WrappedStructure":
        i = self.shape.slot(position).index
        return WrappedStructure(
            shape=self.shape,
            wrapper=self.wrapper,
            values=self.values[:i] + (value,) + self.values[i + 1:],
        )

    def items(self) -> List[Tuple[str, Any]]:
        return [(s.label, v) for s, v in zip(self.shape.slots, self.values)]

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.items())

    def ensure_shape(self, shape: ProductShape) -> None:
        if self.shape is not shape and self.shape != shape:
            raise ShapeMismatchError(shape.type_name, self.shape.type_name)
