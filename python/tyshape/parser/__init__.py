"""Descriptor language: parse, describe and infer."""

from .descriptor import Parser, parse, describe, define
from .inference import guess, merge, get_type

__all__ = ["Parser", "parse", "describe", "define", "guess", "merge", "get_type"]
