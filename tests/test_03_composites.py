"""Test composite pattern kinds.

This module tests Dict, List, Tuple, Enum, Range, Mapping and Shape,
plus the lower-case factories.
"""

import math
import numbers

import pytest

from tyshape import (
    Dict, List, Tuple, Enum, Range, Mapping, Shape, Rule, Type,
    create_type, dict_, list_, tuple_, enumerate_, range_, mapping, shape,
)


@pytest.mark.unit
class TestDict:
    """Test keyed structures."""

    def test_empty_pattern_matches_any_object(self):
        """Test an empty Dict accepts every object."""
        assert Dict({}).test({})
        assert Dict({}).test({"a": 1})
        assert Dict({}).strict.test({"a": 1})

    def test_fields(self, book_data):
        """Test nested fields."""
        person = Dict({
            "name": str,
            "age": int,
            "books": [{"title": str, "price": float}],
        })
        assert person.test(book_data)

    def test_not_a_mapping(self):
        """Test a non-mapping value."""
        error = Dict({"a": int}).catch([1])
        assert error is not None
        assert "Dict" in error.message

    def test_bad_pattern(self):
        """Test a non-mapping pattern is refused."""
        with pytest.raises(TypeError):
            Dict([int])

    def test_aggregates_errors(self):
        """Test every failing field is reported."""
        error = Dict({"name": str, "age": int}).catch({"name": 1, "age": "x"})
        assert error.count == 2
        assert "$.name" in error.message
        assert "$.age" in error.message
        assert len(error.message.split("\n")) == 2

    def test_extend(self):
        """Test extend returns a new Dict."""
        book = Dict({"title": str, "price": float})
        extended = book.extend({"isbn": str})
        assert isinstance(extended, Dict)
        assert set(extended.pattern) == {"title", "price", "isbn"}
        assert set(book.pattern) == {"title", "price"}

    def test_extract(self):
        """Test extract projects a subset."""
        book = Dict({"title": str, "price": float})
        assert book.extract(["title"]).pattern == {"title": str}
        assert book.extract({"title": True, "price": False}).pattern == {"title": str}
        assert book.extract(["isbn"]).pattern == {}


@pytest.mark.unit
class TestList:
    """Test sequences of alternatives."""

    def test_alternatives(self):
        """Test every item matches some alternative."""
        items = List([str, numbers.Number])
        assert items.test(["a", 1, "b"])
        assert items.test([])

    def test_notin_at_index(self):
        """Test a miss is reported at its index."""
        error = List([str, numbers.Number]).catch(["a", None])
        assert error.count == 1
        assert error.resources[0]["kind"] == "notin"
        assert error.resources[0]["index"] == 1
        assert len(error.resources[0]["errors"]) == 2
        assert all(trace["key_path"] == [1] for trace in error.traces)
        assert "$[1]" in error.message

    def test_not_a_sequence(self):
        """Test a non-sequence value."""
        assert not List([str]).test("abc")
        assert not List([]).test("abc")

    def test_empty_pattern(self):
        """Test an empty pattern accepts any sequence."""
        assert List([]).test([1, "a", None])

    def test_tuple_value(self):
        """Test tuples are sequences."""
        assert List([int]).test((1, 2))

    def test_nested_types(self):
        """Test Type alternatives."""
        items = List([Dict({"id": int})])
        assert items.test([{"id": 1}])
        assert not items.test([{"id": "1"}])


@pytest.mark.unit
class TestTuple:
    """Test fixed-position sequences."""

    def test_positions(self):
        """Test each position is checked on its own."""
        pair = Tuple([str, numbers.Number])
        assert pair.test(["a", 1])
        assert not pair.test([1, "a"])
        assert pair.catch([1, "a"]).count == 2

    def test_extra_items(self):
        """Test extra items only fail in strict mode."""
        pair = Tuple([str, numbers.Number])
        assert pair.test(["a", 1, 2])
        error = pair.strict.catch(["a", 1, 2])
        assert error.traces[0]["kind"] == "dirty"

    def test_missing_position(self):
        """Test a short value."""
        error = Tuple([str, int]).catch(["a"])
        assert error.message == "$[1] is missing."

    def test_rule_reads_siblings(self):
        """Test Rule entries receive the whole tuple."""
        double = Rule(name="double", validate=lambda items, index: items[index] == items[0] * 2)
        pair = Tuple([int, double])
        assert pair.test([2, 4])
        assert not pair.test([2, 5])


@pytest.mark.unit
class TestEnum:
    """Test alternatives."""

    def test_any_branch(self):
        """Test any matching branch passes."""
        maybe = Enum([str, None])
        assert maybe.test("a")
        assert maybe.test(None)

    def test_notin(self):
        """Test a total miss carries every branch error."""
        error = Enum([str, None]).catch(1)
        assert error.resources[0]["kind"] == "notin"
        assert len(error.resources[0]["errors"]) == 2

    def test_nested_type(self):
        """Test Type branches."""
        assert Enum([Dict({"a": int}), int]).test({"a": 1})


@pytest.mark.unit
class TestRange:
    """Test numeric intervals."""

    def test_bounds(self):
        """Test exclusive and inclusive bounds."""
        score = Range({"min": 0, "max": 10, "min_bound": False, "max_bound": True})
        assert not score.test(0)
        assert score.test(10)
        assert not score.test(11)

    def test_default_inclusive(self):
        """Test bounds default to inclusive."""
        score = Range({"min": 0, "max": 10})
        assert score.test(0)
        assert score.test(10)

    def test_not_a_number(self):
        """Test non-numbers fail."""
        assert not Range({"min": 0, "max": 10}).test("5")
        assert not Range({"min": 0, "max": 10}).test(True)

    def test_missing_bound(self):
        """Test min and max are required."""
        with pytest.raises(ValueError):
            Range({"min": 0})
        with pytest.raises(ValueError):
            Range({"max": 0})

    def test_non_numeric_bound(self):
        """Test bounds must be numbers."""
        with pytest.raises(TypeError, match="should be numbers"):
            Range({"min": "a", "max": 10})
        with pytest.raises(TypeError):
            Range({"min": 0, "max": None})
        assert Range({"min": 0, "max": math.inf}).test(10 ** 9)


@pytest.mark.unit
class TestMapping:
    """Test keyed structures of arbitrary keys."""

    def test_keys_and_values(self):
        """Test every key and value."""
        scores = Mapping({"key": str, "value": int})
        assert scores.test({"a": 1, "b": 2})
        assert scores.test({})

    def test_independent_failures(self):
        """Test a bad key does not hide a bad value."""
        error = Mapping({"key": str, "value": int}).catch({1: "x"})
        assert error.count == 2
        assert [trace["kind"] for trace in error.traces] == ["illegal", "exception"]

    def test_not_a_mapping(self):
        """Test a non-mapping value."""
        assert not Mapping({"key": str, "value": int}).test([1])

    def test_bad_pattern(self):
        """Test key and value are required."""
        with pytest.raises(TypeError):
            Mapping({"key": str})


class Point:
    def __init__(self, x, y):
        self.x = x
        self.y = y


class SlotPoint:
    __slots__ = ("x", "y")

    def __init__(self, x, y):
        self.x = x
        self.y = y


class Circle:
    def __init__(self, radius):
        self._radius = radius

    @property
    def radius(self):
        return self._radius


@pytest.mark.unit
class TestShape:
    """Test duck-typed structural checks."""

    def test_instance(self):
        """Test attributes of an instance."""
        assert Shape({"x": int, "y": int}).test(Point(1, 2))
        assert not Shape({"x": int, "y": int}).test(Point(1, "2"))

    def test_extra_members(self):
        """Test extra members are never reported."""
        assert Shape({"x": int}).strict.test({"x": 1, "z": 2})
        assert Shape({"x": int}).strict.test(Point(1, 2))

    def test_sequence(self):
        """Test sequences are object-like."""
        assert Shape([int]).test([1, 2])

    def test_slots_and_properties(self):
        """Test members declared through slots or properties."""
        assert Shape({"x": int, "y": int}).test(SlotPoint(1, 2))
        assert not Shape({"x": int, "y": int}).test(SlotPoint(1, "2"))
        assert Shape({"radius": int}).test(Circle(3))
        assert not Shape({"radius": str}).test(Circle(3))

    def test_absent_member(self):
        """Test a declared member the instance lacks."""
        assert not Shape({"z": int}).test(Point(1, 2))
        assert Shape({"z": int}).catch(Point(1, 2)).traces[0]["kind"] == "missing"

    def test_not_object_like(self):
        """Test scalars are refused."""
        assert not Shape({"x": int}).test(5)


@pytest.mark.unit
class TestFactories:
    """Test create_type and the lower-case factories."""

    def test_create_type(self):
        """Test plain patterns are wrapped."""
        assert isinstance(create_type({"a": int}), Dict)
        assert isinstance(create_type([int]), List)
        assert type(create_type(int)) is Type
        existing = Type(int)
        assert create_type(existing) is existing

    def test_factories(self):
        """Test factories build their classes."""
        assert isinstance(dict_({"a": int}), Dict)
        assert isinstance(list_([int]), List)
        assert isinstance(tuple_([int]), Tuple)
        assert isinstance(enumerate_([int]), Enum)
        assert isinstance(range_({"min": 0, "max": 1}), Range)
        assert isinstance(mapping({"key": str, "value": int}), Mapping)
        assert isinstance(shape({"x": int}), Shape)
