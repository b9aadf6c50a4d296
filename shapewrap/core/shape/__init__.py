from .models import ProductShape, Slot
from .cache import ShapeCache, get_shape_cache
from .derive import as_shape, clear_registrations, derive, register_shape

__all__ = [
    "ProductShape",
    "Slot",
    "ShapeCache",
    "get_shape_cache",
    "as_shape",
    "clear_registrations",
    "derive",
    "register_shape",
]
