from __future__ import annotations

import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol

from shapewrap.core.errors import (
    MissingCombineError,
    MissingIdentityError,
    MissingLiftError,
    MissingSequenceError,
)


class SequencePolicy(str, Enum):
    """How a wrapper's `sequence` threads partial failure through `construct`."""

    SHORT_CIRCUIT = "short_circuit"  # first failed slot decides the result
    ACCUMULATE = "accumulate"  # failures from every slot are collected
    TOTAL = "total"  # the wrapper cannot fail


class Lift(Protocol):
    def __call__(self, value: Any) -> Any:
        ...


class IdentityElement(Protocol):
    def __call__(self) -> Any:
        ...


class Combine(Protocol):
    def __call__(self, left: Any, right: Any) -> Any:
        ...


class Sequence(Protocol):
    def __call__(self, wrapped_fn: Any, wrapped_arg: Any) -> Any:
        ...


class Contents(Protocol):
    """Plain values held by a wrapped value, or None when it is not one."""

    def __call__(self, wrapped: Any) -> Optional[Iterable[Any]]:
        ...


@dataclass(frozen=True, eq=False)
class Wrapper:
    """
    Capability record for one wrapper `W`.

    Every capability is optional; operations that need a missing one raise
    the matching CapabilityError when they resolve it. Wrappers compare by
    identity.

    identity    uniform identity element, same for every slot type
    identities  per declared type identity elements (exact type or generic origin)
    pure        lift used for the product constructor in `construct` (defaults to lift)
    """

    name: str
    lift: Optional[Lift] = None
    sequence: Optional[Sequence] = None
    combine: Optional[Combine] = None
    identity: Optional[IdentityElement] = None
    identities: Mapping[Any, IdentityElement] = field(default_factory=dict)
    pure: Optional[Lift] = None
    contents: Optional[Contents] = None
    sequence_policy: SequencePolicy = SequencePolicy.SHORT_CIRCUIT
    version: str = "0.1.0"
    description: str = ""

    @property
    def has_identity(self) -> bool:
        return self.identity is not None or bool(self.identities)

    def require_lift(self) -> Lift:
        if self.lift is None:
            raise MissingLiftError(self.name)
        return self.lift

    def require_pure(self) -> Lift:
        if self.pure is not None:
            return self.pure
        return self.require_lift()

    def require_sequence(self) -> Sequence:
        if self.sequence is None:
            raise MissingSequenceError(self.name)
        return self.sequence

    def require_combine(self) -> Combine:
        if self.combine is None:
            raise MissingCombineError(self.name)
        return self.combine

    def identity_for(self, tp: Any) -> IdentityElement:
        # Exact type, then generic origin (list[int] -> list). No MRO walk:
        # bool must not inherit int's identity.
        for key in (tp, typing.get_origin(tp)):
            if key is None:
                continue
            try:
                factory = self.identities.get(key)
            except TypeError:
                factory = None
            if factory is not None:
                return factory
        if self.identity is not None:
            return self.identity
        raise MissingIdentityError(tp, self.name)

    def inspect(self, wrapped: Any) -> Optional[Iterable[Any]]:
        """
        Plain values to type-check. Empty when the wrapper has no `contents`
        inspector; None when `wrapped` is not a value of this wrapper.
        """
        if self.contents is None:
            return ()
        return self.contents(wrapped)

    def __repr__(self) -> str:
        return f"Wrapper(name={self.name!r}, policy={self.sequence_policy.value})"
