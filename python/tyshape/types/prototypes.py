"""Ready-made leaf prototypes."""

import math
from typing import Any as AnyValue

from ..core.prototype import Prototype
from ..core.utils import UNDEFINED, is_int, is_number, is_numeric


class Null(Prototype):
    name = "Null"

    def validate(self, value: AnyValue) -> bool:
        return value is None


class Undefined(Prototype):
    name = "Undefined"

    def validate(self, value: AnyValue) -> bool:
        return value is UNDEFINED


class Nil(Prototype):
    """None or an absent value."""

    name = "Nil"

    def validate(self, value: AnyValue) -> bool:
        return value is None or value is UNDEFINED


class Any(Prototype):
    name = "Any"

    def validate(self, value: AnyValue) -> bool:
        return True


class Numeric(Prototype):
    """A number, or a string that reads as one."""

    name = "Numeric"

    def validate(self, value: AnyValue) -> bool:
        return is_number(value) or is_numeric(value)


class Int(Prototype):
    name = "Int"

    def validate(self, value: AnyValue) -> bool:
        return is_int(value) or (is_number(value) and math.isfinite(value) and float(value).is_integer())


class Float(Prototype):
    name = "Float"

    def validate(self, value: AnyValue) -> bool:
        return is_number(value) and not Int().validate(value)


class Negative(Prototype):
    name = "Negative"

    def validate(self, value: AnyValue) -> bool:
        return is_number(value) and value < 0


class Positive(Prototype):
    name = "Positive"

    def validate(self, value: AnyValue) -> bool:
        return is_number(value) and value > 0


class Zero(Prototype):
    name = "Zero"

    def validate(self, value: AnyValue) -> bool:
        return is_number(value) and value == 0


class Natural(Prototype):
    """Non-negative integers."""

    name = "Natural"

    def validate(self, value: AnyValue) -> bool:
        return Int().validate(value) and value >= 0


class Finity(Prototype):
    name = "Finity"

    def validate(self, value: AnyValue) -> bool:
        return is_number(value) and math.isfinite(value)


def _string_variant(base: type, predicate) -> type:
    """A variant of `base` that accepts numeric strings only."""

    def validate(self, value: AnyValue) -> bool:
        return is_numeric(value) and predicate(value.strip())

    return type(f"{base.__name__}String", (base,), {"validate": validate, "name": base.name})


def _number_variant(base: type) -> type:
    """A variant of `base` that accepts real numbers only."""

    def validate(self, value: AnyValue) -> bool:
        return is_number(value) and base.validate(self, value)

    return type(f"{base.__name__}Number", (base,), {"validate": validate, "name": base.name})


def _is_integral_text(text: str) -> bool:
    return "." not in text and "e" not in text.lower()


Numeric.Number = _number_variant(Numeric)
Numeric.String = _string_variant(Numeric, lambda text: True)
Int.Number = _number_variant(Int)
Int.String = _string_variant(Int, _is_integral_text)
Float.Number = _number_variant(Float)
Float.String = _string_variant(Float, lambda text: "." in text)
Negative.Number = _number_variant(Negative)
Negative.String = _string_variant(Negative, lambda text: float(text) < 0)
Positive.Number = _number_variant(Positive)
Positive.String = _string_variant(Positive, lambda text: float(text) > 0)
Zero.Number = _number_variant(Zero)
Zero.String = _string_variant(Zero, lambda text: float(text) == 0)
Natural.Number = _number_variant(Natural)
Natural.String = _string_variant(Natural, lambda text: _is_integral_text(text) and int(text) >= 0)


class _BoundedString(Prototype):
    max_length = 0

    def validate(self, value: AnyValue) -> bool:
        return isinstance(value, str) and len(value) <= self.max_length


class String8(_BoundedString):
    name = "String8"
    max_length = 8


class String16(_BoundedString):
    name = "String16"
    max_length = 16


class String32(_BoundedString):
    name = "String32"
    max_length = 32


class String64(_BoundedString):
    name = "String64"
    max_length = 64


class String128(_BoundedString):
    name = "String128"
    max_length = 128
