from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Protocol, Tuple, Union

from shapewrap.core.capabilities.models import SequencePolicy, Wrapper
from shapewrap.core.shape.derive import as_shape
from shapewrap.core.shape.models import ProductShape

from .models import WrappedStructure


@dataclass(frozen=True)
class Const:
    """Constant wrapper value: ignores the slot type, holds `value`."""

    value: Any


def _const_contents(wrapped: Any) -> Union[Tuple[()], None]:
    # Const[A] holds no A, so there is nothing to type-check
    return () if isinstance(wrapped, Const) else None


CONST = Wrapper(
    name="const",
    lift=Const,
    contents=_const_contents,
    sequence_policy=SequencePolicy.TOTAL,
    description="Const(value) regardless of slot type; carries slot labels",
)


class SlotPredicate(Protocol):
    """Applied to every slot's wrapped value; must not depend on the slot type."""

    def __call__(self, wrapped: Any) -> bool:
        ...


def label(target: Union[WrappedStructure, ProductShape, Any]) -> WrappedStructure:
    """
    Const(label) per slot: the field name, or the position as a decimal
    string for unnamed slots. Only the shape of `target` is used.
    """
    shape = target.shape if isinstance(target, WrappedStructure) else as_shape(target)
    return WrappedStructure(
        shape=shape,
        wrapper=CONST,
        values=tuple(Const(s.label) for s in shape.slots),
    )


def labels_where(predicate: SlotPredicate, structure: WrappedStructure) -> List[str]:
    """Labels of the slots whose value satisfies `predicate`, in slot order."""
    return [s.label for s, v in zip(structure.shape.slots, structure.values) if predicate(v)]
