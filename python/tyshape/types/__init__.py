"""Composite pattern kinds and leaf prototypes."""

from .constructs import (
    Dict, List, Tuple, Enum, Range, Mapping, create_type,
    dict_, list_, tuple_, enumerate_, range_, mapping,
)
from .protocols import Shape, shape
from .recursive import SelfRef, selfref
from .prototypes import (
    Null, Undefined, Nil, Any, Numeric, Int, Float, Negative, Positive, Zero, Natural, Finity,
    String8, String16, String32, String64, String128,
)

__all__ = [
    # Composite kinds
    "Dict",
    "List",
    "Tuple",
    "Enum",
    "Range",
    "Mapping",
    "Shape",
    "SelfRef",
    # Factories
    "create_type",
    "dict_",
    "list_",
    "tuple_",
    "enumerate_",
    "range_",
    "mapping",
    "shape",
    "selfref",
    # Leaf prototypes
    "Null",
    "Undefined",
    "Nil",
    "Any",
    "Numeric",
    "Int",
    "Float",
    "Negative",
    "Positive",
    "Zero",
    "Natural",
    "Finity",
    "String8",
    "String16",
    "String32",
    "String64",
    "String128",
]
