from __future__ import annotations

import dataclasses
import enum
import logging
import threading
import types
import typing
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from pydantic import AliasChoices, AliasPath, BaseModel

from shapewrap.core.config import get_settings
from shapewrap.core.errors import NotAProductError
from shapewrap.core.observability.metrics import inc_derivation

from .cache import get_shape_cache
from .models import ProductShape, Slot

_log = logging.getLogger("shapewrap.shape")

_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)

# Explicit registrations win over reflection.
_REGISTERED: Dict[Any, ProductShape] = {}
_REGISTERED_LOCK = threading.Lock()


def _type_hints(cls: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except Exception as exc:
        # Unresolvable forward refs: fall back to raw annotations (matched as Any).
        _log.debug("get_type_hints failed for %r: %s", cls, exc)
        return dict(getattr(cls, "__annotations__", {}) or {})


def _substitute(declared: Any, mapping: Dict[Any, Any]) -> Any:
    if isinstance(declared, typing.TypeVar):
        return mapping.get(declared, declared)
    return declared


def _by_name(value: Any, slot: Slot) -> Any:
    return getattr(value, slot.name)


def _by_index(value: Any, slot: Slot) -> Any:
    return value[slot.index]


def _slots(pairs: Sequence[Tuple[Optional[str], Any]]) -> Tuple[Slot, ...]:
    return tuple(Slot(position=i, name=n, declared_type=t) for i, (n, t) in enumerate(pairs, start=1))


def _keyword_constructor(cls: Any, keys: Sequence[str]) -> Callable[..., Any]:
    keys = tuple(keys)

    def construct(*values: Any) -> Any:
        return cls(**dict(zip(keys, values)))

    return construct


def _derive_dataclass(tp: Any, cls: Any, mapping: Dict[Any, Any]) -> ProductShape:
    hints = _type_hints(cls)
    fields = [f for f in dataclasses.fields(cls) if f.init]
    pairs = [(f.name, _substitute(hints.get(f.name, f.type), mapping)) for f in fields]
    return ProductShape(
        product_type=tp,
        kind="dataclass",
        slots=_slots(pairs),
        constructor=_keyword_constructor(cls, [f.name for f in fields]),
        extractor=_by_name,
    )


def _derive_namedtuple(tp: Any) -> ProductShape:
    hints = _type_hints(tp)
    pairs = [(name, hints.get(name, Any)) for name in tp._fields]
    return ProductShape(
        product_type=tp,
        kind="namedtuple",
        slots=_slots(pairs),
        constructor=tp,
        extractor=_by_index,
    )


def _validation_path(tp: Any, name: str, info: Any) -> Tuple[str, ...]:
    # Input key the model accepts for this field: validation_alias, then alias, then name.
    alias = info.validation_alias
    if isinstance(alias, AliasChoices):
        alias = alias.choices[0]
    if isinstance(alias, str):
        return (alias,)
    if isinstance(alias, AliasPath):
        if not all(isinstance(p, str) for p in alias.path):
            raise NotAProductError(tp, f"field {name!r} reads a list index through AliasPath")
        return tuple(alias.path)
    return (info.alias or name,)


def _validating_constructor(cls: Any, paths: Sequence[Tuple[str, ...]]) -> Callable[..., Any]:
    paths = tuple(paths)

    def construct(*values: Any) -> Any:
        data: Dict[str, Any] = {}
        for path, value in zip(paths, values):
            node = data
            for key in path[:-1]:
                node = node.setdefault(key, {})
            node[path[-1]] = value
        return cls.model_validate(data)

    return construct


def _derive_pydantic(tp: Any) -> ProductShape:
    fields = tp.model_fields
    pairs = [(name, info.annotation if info.annotation is not None else Any) for name, info in fields.items()]
    paths = [_validation_path(tp, name, info) for name, info in fields.items()]
    return ProductShape(
        product_type=tp,
        kind="pydantic",
        slots=_slots(pairs),
        constructor=_validating_constructor(tp, paths),
        extractor=_by_name,
    )


def _derive_tuple(tp: Any, args: Tuple[Any, ...]) -> ProductShape:
    if len(args) == 2 and args[1] is Ellipsis:
        raise NotAProductError(tp, "variable-length tuple has no fixed arity")

    def construct(*values: Any) -> Any:
        return tuple(values)

    return ProductShape(
        product_type=tp,
        kind="tuple",
        slots=_slots([(None, a) for a in args]),
        constructor=construct,
        extractor=_by_index,
    )


def _derive_uncached(tp: Any) -> ProductShape:
    origin = typing.get_origin(tp)

    if origin in _UNION_TYPES:
        raise NotAProductError(tp, "union has multiple alternatives")
    if origin is typing.Literal:
        raise NotAProductError(tp, "literal has multiple alternatives")
    if origin is typing.Annotated:
        return _derive_uncached(typing.get_args(tp)[0])
    if origin is tuple:
        shape = _derive_tuple(tp, typing.get_args(tp))
    elif origin is not None and isinstance(origin, type) and dataclasses.is_dataclass(origin):
        # Parametrised generic dataclass: Box[int]
        params = getattr(origin, "__parameters__", ())
        mapping = dict(zip(params, typing.get_args(tp)))
        shape = _derive_dataclass(tp, origin, mapping)
    elif origin is not None:
        raise NotAProductError(tp, "parametrised generic of a non-product type")
    elif not isinstance(tp, type):
        raise NotAProductError(tp, "not a class")
    elif issubclass(tp, enum.Enum):
        raise NotAProductError(tp, "enum has multiple alternatives")
    elif dataclasses.is_dataclass(tp):
        shape = _derive_dataclass(tp, tp, {})
    elif issubclass(tp, tuple) and hasattr(tp, "_fields"):
        shape = _derive_namedtuple(tp)
    elif issubclass(tp, BaseModel):
        shape = _derive_pydantic(tp)
    else:
        raise NotAProductError(tp, "no reflectable field list; use register_shape()")

    inc_derivation(shape.kind)
    _log.debug("derived shape %s kind=%s slots=%s", shape.type_name, shape.kind, shape.labels)
    return shape


def derive(tp: Any) -> ProductShape:
    """
    Reflect `tp` into its ProductShape.

    Registered shapes take precedence. Reflected shapes are cached per type
    unless `shape_cache_enabled` is off; either way the result for a given
    type is always equal.
    """
    try:
        hash(tp)
    except TypeError:
        return _derive_uncached(tp)

    with _REGISTERED_LOCK:
        registered = _REGISTERED.get(tp)
    if registered is not None:
        return registered

    if not get_settings().shape_cache_enabled:
        return _derive_uncached(tp)

    return get_shape_cache().get_or_compute(tp, lambda: _derive_uncached(tp))


def as_shape(target: Any) -> ProductShape:
    if isinstance(target, ProductShape):
        return target
    return derive(target)


def register_shape(
    tp: Any,
    fields: Sequence[Tuple[Optional[str], Any]],
    *,
    constructor: Optional[Callable[..., Any]] = None,
    extractor: Optional[Callable[[Any, Slot], Any]] = None,
) -> ProductShape:
    """
    Explicit registration for types reflection cannot decompose.

    `fields` is an ordered list of (name or None, declared type).
    Defaults: constructor calls `tp(*values)`; extractor reads named slots by
    attribute and unnamed slots by index.
    """
    slots = _slots(list(fields))

    def default_extract(value: Any, slot: Slot) -> Any:
        if slot.name is not None:
            return getattr(value, slot.name)
        return value[slot.index]

    shape = ProductShape(
        product_type=tp,
        kind="registered",
        slots=slots,
        constructor=constructor or tp,
        extractor=extractor or default_extract,
    )
    with _REGISTERED_LOCK:
        _REGISTERED[tp] = shape
    get_shape_cache().discard(tp)
    inc_derivation(shape.kind)
    _log.debug("registered shape %s slots=%s", shape.type_name, shape.labels)
    return shape


def clear_registrations() -> None:
    with _REGISTERED_LOCK:
        _REGISTERED.clear()
