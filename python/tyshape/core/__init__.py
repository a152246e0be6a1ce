"""Core validation engine."""

from .utils import UNDEFINED
from .prototype import Prototype
from .error import TyError
from .rule import Rule
from .type import Type
from .runtime import Runtime, _runtime
from .validator import validate, catch

__all__ = ["UNDEFINED", "Prototype", "TyError", "Rule", "Type", "Runtime", "validate", "catch", "_runtime"]
