from dataclasses import dataclass

from shapewrap import CONST, Const, build, derive, fresh, label, labels_where, position
from shapewrap.plugins.wrappers import optional
from shapewrap.plugins.wrappers.optional import NOTHING, Some, is_absent

OPT = optional.WRAPPER


@dataclass
class Person:
    name: str
    age: int
    likes_dogs: bool


def _person(*values):
    return build(Person, list(values) or [Some("Tom"), Some(25), Some(True)], OPT)


# ---------------------------------------------------------------------------
# label
# ---------------------------------------------------------------------------

def test_label_names_every_slot():
    labelled = label(_person())
    assert labelled.wrapper is CONST
    assert labelled.values == (Const("name"), Const("age"), Const("likes_dogs"))


def test_label_unnamed_slots_use_position():
    s = build(tuple[int, str, float], [Some(1), Some("a"), Some(2.0)], OPT)
    assert label(s).values == (Const("1"), Const("2"), Const("3"))


def test_label_depends_only_on_shape():
    present = label(_person())
    absent = label(_person(NOTHING, NOTHING, NOTHING))
    assert present == absent == label(Person) == label(derive(Person))


def test_label_position_get_is_slot_label():
    labelled = label(_person())
    for slot in derive(Person).slots:
        assert position(Person, slot.position).get(labelled) == Const(slot.label)


# ---------------------------------------------------------------------------
# labels_where
# ---------------------------------------------------------------------------

def test_labels_where_never_true_is_empty():
    assert labels_where(lambda w: False, _person()) == []


def test_labels_where_always_true_is_every_label():
    assert labels_where(lambda w: True, _person()) == ["name", "age", "likes_dogs"]


def test_labels_where_reports_in_slot_order():
    s = _person(NOTHING, Some(25), NOTHING)
    assert labels_where(is_absent, s) == ["name", "likes_dogs"]


def test_labels_where_calls_predicate_once_per_slot_in_order():
    seen = []

    def pred(w):
        seen.append(w)
        return False

    s = _person()
    labels_where(pred, s)
    assert seen == list(s.values)


def test_labels_where_on_unnamed_slots():
    s = build(tuple[int, int, int], [Some(1), NOTHING, Some(3)], OPT)
    assert labels_where(is_absent, s) == ["2"]


def test_labels_where_on_fresh_structure():
    assert labels_where(is_absent, fresh(Person, OPT)) == ["name", "age", "likes_dogs"]
