"""Test leaf predicates.

This module tests the predicate registry, ad hoc prototypes and the
ready-made leaf prototypes.
"""

import logging
import math
import numbers
import re

import pytest

from tyshape import (
    UNDEFINED, Prototype, Type,
    Null, Undefined, Nil, Any, Numeric, Int, Float, Negative, Positive, Zero, Natural, Finity,
    String8, String16,
)


@pytest.mark.unit
class TestRegistry:
    """Test the process-wide marker registry."""

    def test_builtin_markers_exist(self):
        """Test seeded markers are registered."""
        for marker in (str, int, float, bool, list, dict, numbers.Number, math.inf):
            assert Prototype.is_(marker).existing()

    def test_typeof(self):
        """Test typeof on registered markers."""
        assert Prototype.is_(str).typeof("a")
        assert not Prototype.is_(str).typeof(1)
        assert Prototype.is_(list).typeof((1, 2))
        assert Prototype.is_(dict).typeof({})

    def test_equal(self):
        """Test literal equality."""
        assert Prototype.is_(10).equal(10)
        assert Prototype.is_({"a": [1]}).equal({"a": [1]})
        assert not Prototype.is_(True).equal(1)

    def test_literal_is_not_existing(self):
        """Test plain values are not markers."""
        assert not Prototype.is_("a").existing()
        assert not Prototype.is_(10).existing()

    def test_register_marker(self, registry):
        """Test registering a custom marker."""
        class Email:
            pass

        registry.register(Email, lambda value: isinstance(value, str) and "@" in value)
        assert Type(Email).test("a@b.c")
        assert not Type(Email).test("abc")

    def test_register_replaces(self, registry):
        """Test registering twice keeps the last predicate."""
        class Flag:
            pass

        registry.register(Flag, lambda value: value == 1)
        registry.register(Flag, lambda value: value == 2)
        assert Type(Flag).test(2)
        assert not Type(Flag).test(1)

    def test_unregister_marker(self, registry):
        """Test unregistered classes fall back to isinstance."""
        class Email:
            pass

        registry.register(Email, lambda value: isinstance(value, str))
        registry.unregister(Email)
        assert registry.find(Email) is None
        assert not Type(Email).test("a@b.c")
        assert Type(Email).test(Email())

    def test_unregister_is_logged(self, registry, caplog):
        """Test removing markers is logged like adding them."""
        class Email:
            pass

        registry.register(Email, lambda value: isinstance(value, str))
        with caplog.at_level(logging.DEBUG, logger="tyshape.core.prototype"):
            registry.unregister(Email)
        assert "unregistered leaf markers" in caplog.text

    def test_unregister_all(self, registry):
        """Test clearing the registry."""
        registry.unregister()
        assert registry.find(str) is None

    def test_registry_is_restored(self):
        """Test the fixture restored the seeded markers."""
        assert Prototype.find(str) is not None


@pytest.mark.unit
class TestMarkers:
    """Test the primitive markers."""

    def test_bool_is_not_number(self):
        """Test bool never passes as a number."""
        assert not Type(numbers.Number).test(True)
        assert not Type(int).test(False)
        assert Type(bool).test(True)

    def test_float_accepts_integers(self):
        """Test float accepts any real number."""
        assert Type(float).test(1)
        assert Type(float).test(1.5)
        assert not Type(float).test("1.5")

    def test_nan_is_not_number(self):
        """Test NaN only matches the nan marker."""
        assert not Type(numbers.Number).test(math.nan)
        assert Type(math.nan).test(float("nan"))
        assert not Type(math.nan).test(1)

    def test_infinity(self):
        """Test the infinity marker."""
        assert Type(math.inf).test(float("-inf"))
        assert not Type(math.inf).test(1e308)

    def test_regex(self):
        """Test regular expressions match strings."""
        digits = Type(re.compile(r"^\d+$"))
        assert digits.test("123")
        assert not digits.test("12a")
        assert not digits.test(123)

    def test_class_marker(self):
        """Test unregistered classes use isinstance."""
        class Animal:
            pass

        class Dog(Animal):
            pass

        assert Type(Animal).test(Dog())
        assert not Type(Dog).test(Animal())

    def test_literal(self):
        """Test literal patterns."""
        assert Type(10).test(10)
        assert not Type(10).test(11)
        assert Type(None).test(None)
        assert not Type(True).test(1)


@pytest.mark.unit
class TestPrototypes:
    """Test the ready-made leaf prototypes."""

    def test_adhoc_prototype(self):
        """Test a prototype built from a function."""
        even = Prototype(lambda value: isinstance(value, int) and value % 2 == 0, name="Even")
        assert Type(even).test(4)
        assert not Type(even).test(3)
        assert repr(even) == "Even"

    def test_raising_predicate_rejects(self):
        """Test a predicate that raises rejects the value instead of escaping."""
        positive = Prototype(lambda value: value > 0, name="Pos")
        assert Type(positive).test(1)
        assert not Type(positive).test("x")
        error = Type(positive).catch("x")
        assert error is not None
        assert error.count == 1

    def test_raising_registered_predicate(self, registry):
        """Test registered predicates and prototype subclasses that raise."""
        class Token:
            pass

        class Strict(Prototype):
            def validate(self, value):
                raise RuntimeError("unreadable")

        registry.register(Token, lambda value: value.startswith("t"))
        assert Type(Token).test("token")
        assert not Type(Token).test(5)
        assert not Type(Strict).test(5)
        assert not Prototype.is_(Strict).typeof(5)

    def test_null_and_undefined(self):
        """Test None and absent markers."""
        assert Type(Null).test(None)
        assert not Type(Null).test({})
        assert Type(Undefined).test(UNDEFINED)
        assert not Type(Undefined).test(None)
        assert Type(Nil).test(None)
        assert Type(Nil).test(UNDEFINED)
        assert not Type(Nil).test(0)

    def test_any(self):
        """Test Any accepts everything."""
        for value in ({}, "", 1, None):
            assert Type(Any).test(value)

    def test_numeric(self):
        """Test numbers and numeric strings."""
        some = Type({"number": Numeric, "numeral": Numeric})
        assert some.test({"number": 1234, "numeral": "-23132.23423"})
        assert not Type(Numeric).test("12a")

    def test_int_and_float(self):
        """Test Int and Float split the reals."""
        assert Type(Int).test(12)
        assert Type(Int).test(12.0)
        assert not Type(Int).test(12.3)
        assert not Type(Int).test(True)
        assert Type(Float).test(12.4)
        assert not Type(Float).test(12)

    def test_signs(self):
        """Test sign prototypes."""
        assert Type(Negative).test(-1)
        assert not Type(Negative).test(0)
        assert Type(Positive).test(0.1)
        assert not Type(Positive).test(0)
        assert Type(Zero).test(0)
        assert not Type(Zero).test("0")

    def test_natural(self):
        """Test non-negative integers."""
        assert Type(Natural).test(0)
        assert not Type(Natural).test(-1)
        assert not Type(Natural).test(1.5)

    def test_finity(self):
        """Test finite numbers."""
        assert Type(Finity).test(1)
        assert not Type(Finity).test(math.inf)

    def test_number_variants(self):
        """Test .Number variants refuse numeric strings."""
        assert Type(Int.Number).test(12)
        assert not Type(Int.Number).test("12")
        assert Type(Numeric.Number).test(1.5)
        assert not Type(Numeric.Number).test("1.5")

    def test_string_variants(self):
        """Test .String variants accept numeric strings only."""
        assert Type(Int.String).test("12")
        assert not Type(Int.String).test("1.5")
        assert not Type(Int.String).test(12)
        assert Type(Float.String).test("1.5")
        assert Type(Negative.String).test("-3")
        assert not Type(Positive.String).test("-3")
        assert Type(Natural.String).test("7")
        assert not Type(Natural.String).test("-7")

    def test_variants_keep_name(self):
        """Test variants report the base name."""
        assert Int.String.name == "Int"
        assert issubclass(Int.String, Int)

    def test_bounded_strings(self):
        """Test length-bounded strings."""
        assert Type(String8).test("12345678")
        assert not Type(String8).test("123456789")
        assert Type(String16).test("123456789")
        assert not Type(String16).test(1)
