"""Validation utilities."""

from typing import Any

from .runtime import _runtime


def validate(value: Any, pattern: Any) -> bool:
    """
    Validate a value against a pattern or a descriptor.

    Example:
        validate([1, 2, 3], "number[]")       # True
        validate([1, "a"], "number[]")        # False
        validate({"age": 10}, {"age": int})   # True
    """
    return _runtime.validate(value, pattern)


def catch(value: Any, pattern: Any):
    """Return the TyError of a mismatch, or None."""
    return _runtime.catch(value, pattern)
