from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Literal, Optional, Tuple

from shapewrap.core.errors import PositionOutOfRangeError, type_label

ShapeKind = Literal["dataclass", "namedtuple", "pydantic", "tuple", "registered"]


@dataclass(frozen=True)
class Slot:
    position: int  # 1-based
    name: Optional[str]
    declared_type: Any

    @property
    def index(self) -> int:
        return self.position - 1

    @property
    def label(self) -> str:
        return self.name if self.name is not None else str(self.position)


@dataclass(frozen=True)
class ProductShape:
    """
    Ordered slot list of one product type.

    `constructor` takes the field values positionally, in slot order.
    `extractor` reads one slot's field value out of an instance.
    Neither takes part in equality: two derivations of the same type are equal.
    """

    product_type: Any
    kind: ShapeKind
    slots: Tuple[Slot, ...]
    constructor: Callable[..., Any] = field(compare=False, repr=False)
    extractor: Callable[[Any, Slot], Any] = field(compare=False, repr=False)

    def __post_init__(self):
        for i, s in enumerate(self.slots, start=1):
            if s.position != i:
                raise ValueError(f"slot positions must be contiguous from 1, got {s.position} at {i}")

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self) -> Iterator[Slot]:
        return iter(self.slots)

    @property
    def type_name(self) -> str:
        return type_label(self.product_type)

    @property
    def labels(self) -> List[str]:
        return [s.label for s in self.slots]

    @property
    def is_named(self) -> bool:
        return any(s.name is not None for s in self.slots)

    def slot(self, position: int) -> Slot:
        if isinstance(position, bool) or not isinstance(position, int) or not 1 <= position <= len(self.slots):
            raise PositionOutOfRangeError(position, len(self.slots))
        return self.slots[position - 1]

    def find(self, name: str) -> Optional[Slot]:
        for s in self.slots:
            if s.name is not None and s.name == name:
                return s
        return None

    def extract(self, value: Any, slot: Slot) -> Any:
        return self.extractor(value, slot)

    def fingerprint(self) -> str:
        """Stable across interpreter restarts: derived from names and type labels only."""
        h = hashlib.sha256()
        h.update(f"{self.type_name}:{self.kind}".encode("utf-8"))
        for s in self.slots:
            h.update(f"|{s.position}:{s.name or ''}:{type_label(s.declared_type)}".encode("utf-8"))
        return h.hexdigest()[:16]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type_name,
            "kind": self.kind,
            "slots": [
                {"position": s.position, "name": s.name, "declared_type": type_label(s.declared_type)}
                for s in self.slots
            ],
        }
