"""Rule combinators."""

from .combinators import (
    ifexist, determine, match, shouldmatch, shouldnotmatch, ifnotmatch, ifmatch,
    shouldexist, shouldnotexist, instance, equal, nullable, nonable, lambda_, lazy,
)

__all__ = [
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
]
