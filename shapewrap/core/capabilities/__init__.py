from .models import Combine, Contents, IdentityElement, Lift, Sequence, SequencePolicy, Wrapper
from .registry import (
    WrapperInfo,
    WrapperRegistry,
    get_wrapper_registry,
    reset_wrapper_registry,
    resolve_wrapper,
)

__all__ = [
    "Combine",
    "Contents",
    "IdentityElement",
    "Lift",
    "Sequence",
    "SequencePolicy",
    "Wrapper",
    "WrapperInfo",
    "WrapperRegistry",
    "get_wrapper_registry",
    "reset_wrapper_registry",
    "resolve_wrapper",
]
