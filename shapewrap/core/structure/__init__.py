from .models import WrappedStructure
from .builder import build, check_slot_value, deconstruct, fresh, resolve_identities
from .collapser import construct, curry
from .accessors import Lens, field, position
from .labels import CONST, Const, SlotPredicate, label, labels_where
from .combinators import from_mapping, map_slots, merge

__all__ = [
    "WrappedStructure",
    "build",
    "check_slot_value",
    "deconstruct",
    "fresh",
    "resolve_identities",
    "construct",
    "curry",
    "Lens",
    "field",
    "position",
    "CONST",
    "Const",
    "SlotPredicate",
    "label",
    "labels_where",
    "from_mapping",
    "map_slots",
    "merge",
]
