import collections
import enum
from dataclasses import dataclass, field
from typing import Any, Generic, NamedTuple, Optional, TypeVar, Union

import pytest
from pydantic import AliasPath, BaseModel, Field

from shapewrap import NotAProductError, PositionOutOfRangeError, derive, register_shape
from shapewrap.core.shape import get_shape_cache

T = TypeVar("T")


@dataclass
class Person:
    name: str
    age: int
    likes_dogs: bool


class Point(NamedTuple):
    x: float
    y: float


class Account(BaseModel):
    owner: str
    balance: float = 0.0


@dataclass
class Box(Generic[T]):
    item: T
    label: str


class Color(enum.Enum):
    RED = 1
    BLUE = 2


# ---------------------------------------------------------------------------
# reflection
# ---------------------------------------------------------------------------

def test_dataclass_slots_follow_declaration_order():
    shape = derive(Person)
    assert shape.kind == "dataclass"
    assert [s.position for s in shape.slots] == [1, 2, 3]
    assert shape.labels == ["name", "age", "likes_dogs"]
    assert [s.declared_type for s in shape.slots] == [str, int, bool]
    assert shape.is_named


def test_dataclass_skips_non_init_fields():
    @dataclass
    class Counter:
        start: int
        total: int = field(init=False, default=0)

    shape = derive(Counter)
    assert shape.labels == ["start"]
    assert shape.constructor(5).start == 5


def test_namedtuple_shape():
    shape = derive(Point)
    assert shape.kind == "namedtuple"
    assert shape.labels == ["x", "y"]
    assert shape.constructor(1.0, 2.0) == Point(1.0, 2.0)


def test_untyped_namedtuple_declares_any():
    Pair = collections.namedtuple("Pair", "left right")
    shape = derive(Pair)
    assert shape.labels == ["left", "right"]
    assert all(s.declared_type is Any for s in shape.slots)


def test_pydantic_model_shape():
    shape = derive(Account)
    assert shape.kind == "pydantic"
    assert shape.labels == ["owner", "balance"]
    assert [s.declared_type for s in shape.slots] == [str, float]
    assert shape.constructor("ann", 3.5) == Account(owner="ann", balance=3.5)


def test_pydantic_constructor_uses_validation_alias():
    class Aliased(BaseModel):
        x: int = Field(validation_alias="X")

    shape = derive(Aliased)
    assert shape.labels == ["x"]
    assert shape.constructor(7) == Aliased(X=7)


def test_pydantic_alias_path_through_list_index_is_rejected():
    class Indexed(BaseModel):
        first: str = Field(validation_alias=AliasPath("items", 0))

    with pytest.raises(NotAProductError):
        derive(Indexed)


def test_fixed_tuple_slots_are_positional():
    shape = derive(tuple[int, str, bool])
    assert shape.kind == "tuple"
    assert [s.name for s in shape.slots] == [None, None, None]
    assert shape.labels == ["1", "2", "3"]
    assert not shape.is_named
    assert shape.constructor(1, "a", True) == (1, "a", True)


def test_generic_dataclass_substitutes_type_arguments():
    shape = derive(Box[int])
    assert shape.slots[0].declared_type is int
    assert shape.slots[1].declared_type is str
    assert shape.constructor(3, "x") == Box(item=3, label="x")


# ---------------------------------------------------------------------------
# not a product
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "tp",
    [Union[int, str], Optional[Person], Color, tuple[int, ...], list[int], int, "Person"],
)
def test_non_products_are_rejected(tp):
    with pytest.raises(NotAProductError) as ei:
        derive(tp)
    assert ei.value.code == "shape.not_a_product"
    assert ei.value.to_dict()["data"]["reason"]


def test_failed_derivation_is_not_cached():
    with pytest.raises(NotAProductError):
        derive(Color)
    with pytest.raises(NotAProductError):
        derive(Color)
    assert len(get_shape_cache()) == 0


# ---------------------------------------------------------------------------
# idempotency / registration
# ---------------------------------------------------------------------------

def test_rederivation_is_idempotent():
    first = derive(Person)
    assert derive(Person) is first

    get_shape_cache().clear()
    again = derive(Person)
    assert again == first
    assert again.fingerprint() == first.fingerprint()


def test_cache_can_be_disabled(clean_env):
    clean_env.setenv("SHAPEWRAP_SHAPE_CACHE", "0")
    a = derive(Person)
    b = derive(Person)
    assert a == b
    assert a is not b
    assert len(get_shape_cache()) == 0


def test_register_shape_for_plain_class():
    class Legacy:
        def __init__(self, a, b):
            self.a = a
            self.b = b

    shape = register_shape(Legacy, [("a", int), ("b", str)])
    assert derive(Legacy) is shape
    assert shape.kind == "registered"

    value = shape.constructor(1, "x")
    assert (value.a, value.b) == (1, "x")
    assert [shape.extract(value, s) for s in shape.slots] == [1, "x"]


def test_register_shape_positional_extractor():
    class Triple(tuple):
        pass

    shape = register_shape(Triple, [(None, int), (None, int), (None, int)], constructor=lambda *v: Triple(v))
    value = shape.constructor(1, 2, 3)
    assert [shape.extract(value, s) for s in shape.slots] == [1, 2, 3]


def test_slot_lookup():
    shape = derive(Person)
    assert shape.slot(2).name == "age"
    assert shape.find("likes_dogs").position == 3
    assert shape.find("email") is None
    with pytest.raises(PositionOutOfRangeError):
        shape.slot(0)


def test_to_dict_lists_slots():
    d = derive(Point).to_dict()
    assert d["type"] == "Point"
    assert d["slots"] == [
        {"position": 1, "name": "x", "declared_type": "float"},
        {"position": 2, "name": "y", "declared_type": "float"},
    ]
