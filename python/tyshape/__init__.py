"""Tyshape: runtime structural type checking for Python data."""

from tyshape.core import UNDEFINED, Prototype, TyError, Rule, Type, Runtime, validate, catch
from tyshape.types import (
    # Composite kinds
    Dict, List, Tuple, Enum, Range, Mapping, Shape, SelfRef,
    # Factories
    create_type, dict_, list_, tuple_, enumerate_, range_, mapping, shape, selfref,
    # Leaf prototypes
    Null, Undefined, Nil, Any, Numeric, Int, Float, Negative, Positive, Zero, Natural, Finity,
    String8, String16, String32, String64, String128,
)
from tyshape.rules import (
    ifexist, determine, match, shouldmatch, shouldnotmatch, ifnotmatch, ifmatch,
    shouldexist, shouldnotexist, instance, equal, nullable, nonable, lambda_, lazy,
)
from tyshape.decorators import contract
from tyshape.parser import Parser, parse, describe, define, guess, merge

__version__ = "0.1.0"

__all__ = [
    # Core
    "UNDEFINED",
    "Prototype",
    "TyError",
    "Rule",
    "Type",
    # Runtime
    "Runtime",
    "validate",
    "catch",
    "contract",
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
    # Rules
    "ifexist",
    "determine",
    "match",
    "shouldmatch",
    "shouldnotmatch",
    "ifnotmatch",
    "ifmatch",
    "shouldexist",
    "shouldnotexist",
    "instance",
    "equal",
    "nullable",
    "nonable",
    "lambda_",
    "lazy",
    # Descriptors
    "Parser",
    "parse",
    "describe",
    "define",
    "guess",
    "merge",
]
