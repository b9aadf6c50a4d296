from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from shapewrap import (
    MissingIdentityError,
    NotAProductError,
    ShapeMismatchError,
    UnknownWrapperError,
    WrappedType,
    build,
    wrap,
)
from shapewrap.plugins.wrappers import identity, optional, validation
from shapewrap.plugins.wrappers.optional import NOTHING, Some, is_absent
from shapewrap.plugins.wrappers.validation import Valid


@dataclass
class Person:
    name: str
    age: int
    likes_dogs: bool


@dataclass
class Pet:
    name: str


class Account(BaseModel):
    owner: str
    balance: float = 0.0


def test_wrap_by_name_binds_shape_and_wrapper():
    people = wrap(Person, "optional")
    assert isinstance(people, WrappedType)
    assert people.wrapper is optional.WRAPPER
    assert people.shape.labels == ["name", "age", "likes_dogs"]


def test_wrapped_type_operation_surface():
    people = wrap(Person, optional.WRAPPER)

    s = people.build(Some("Tom"), Some(25), Some(True))
    assert people.field("age").get(s) == Some(25)
    assert people.position(1).get(s) == Some("Tom")
    assert people.construct(s) == Some(Person("Tom", 25, True))
    assert people.deconstruct(Person("Tom", 25, True)) == s
    assert people.labels_where(is_absent, people.fresh()) == ["name", "age", "likes_dogs"]
    assert [c.value for c in people.label().values] == ["name", "age", "likes_dogs"]


def test_missing_identity_surfaces_at_registration():
    with pytest.raises(MissingIdentityError) as ei:
        wrap(Person, identity.WRAPPER)
    assert ei.value.missing_type is bool


def test_wrapper_without_identity_fails_on_fresh():
    checked = wrap(Person, validation.WRAPPER)
    s = checked.deconstruct(Person("Tom", 25, True))
    assert checked.construct(s) == Valid(Person("Tom", 25, True))
    with pytest.raises(MissingIdentityError):
        checked.fresh()


def test_non_product_and_unknown_wrapper():
    with pytest.raises(NotAProductError):
        wrap(int, "optional")
    with pytest.raises(UnknownWrapperError) as ei:
        wrap(Person, "nope")
    assert "optional" in ei.value.data["known"]


def test_wrapped_type_rejects_foreign_structure():
    people = wrap(Person, "optional")
    pet = build(Pet, [Some("Rex")], "optional")
    with pytest.raises(ShapeMismatchError):
        people.construct(pet)
    with pytest.raises(ShapeMismatchError):
        people.labels_where(is_absent, pet)


def test_partial_pydantic_input_completed_from_defaults():
    accounts = wrap(Account, "optional")

    partial = accounts.from_mapping({"owner": Some("ann")})
    assert accounts.construct(partial) is NOTHING
    assert accounts.labels_where(is_absent, partial) == ["balance"]

    defaults = accounts.build(Some(""), Some(0.0))
    assert accounts.construct(accounts.merge(defaults, partial)) == Some(Account(owner="ann", balance=0.0))
