"""Descriptor language compiler."""

import datetime
import json
import math
import numbers
import re
from collections import abc
from typing import Any, Optional

from ..core.rule import Rule
from ..core.type import Type
from ..core.utils import is_array, is_object
from ..rules.combinators import equal, ifexist, match, nonable, shouldnotmatch
from ..types.constructs import Dict, Enum, List, Mapping, Range, Tuple, create_type, enumerate_, tuple_
from ..types.prototypes import (
    Any as AnyValue, Finity, Float, Int, Natural, Negative, Nil, Null, Numeric, Positive,
    String8, String16, String32, String64, String128, Undefined, Zero,
)
from ..types.recursive import SelfRef
from . import inference

SELF = "__self__"

# Leading sigils of a text descriptor
RULES = {
    "&": nonable,
    "?": ifexist,
    "=": equal,
    "!": shouldnotmatch,
}

# Trailing sigils of a field name
KEY_RULES = {
    **RULES,
    "|": enumerate_,
    "*": tuple_,
}

DEFAULT_TYPES = {
    "string": str,
    "string8": String8,
    "string16": String16,
    "string32": String32,
    "string64": String64,
    "string128": String128,
    "number": numbers.Number,
    "boolean": bool,
    "null": Null,
    "undefined": Undefined,
    "none": Nil,
    "function": abc.Callable,
    "array": list,
    "object": dict,
    "numeric": Numeric,
    "int": Int,
    "float": Float,
    "negative": Negative,
    "positive": Positive,
    "zero": Zero,
    "natural": Natural,
    "any": AnyValue,
    "nan": math.nan,
    "infinity": math.inf,
    "finity": Finity,
    "date": datetime.date,
    "promise": abc.Awaitable,
    "error": Exception,
    "regexp": re.Pattern,
}

_RANGE_RE = re.compile(r"^(-?\d+(?:\.\d+)?)(<?)-(>?)(-?\d+(?:\.\d+)?)$")


def _split(text: str, separator: str) -> list:
    """Split on `separator` outside of brackets."""
    parts = []
    current = ""
    depth = 0

    for char in text:
        if char in "[({":
            depth += 1
        elif char in "])}":
            depth -= 1
            if depth < 0:
                raise ValueError(f"Unbalanced brackets in descriptor: {text!r}")

        if char == separator and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += char

    if depth != 0:
        raise ValueError(f"Unbalanced brackets in descriptor: {text!r}")

    parts.append(current.strip())
    return parts


def _split_key(key: str) -> tuple:
    """'weight?&' -> ('weight', ['?', '&'])"""
    end = len(key)
    while end > 1 and key[end - 1] in KEY_RULES:
        end -= 1
    sigils = list(key[end:])
    # the list-shaped sigils need the raw list, so they go first
    ordered = [s for s in sigils if s in "|*"] + [s for s in sigils if s not in "|*"]
    return key[:end], ordered


def _mentions(body: Any, name: str) -> bool:
    """Whether a descriptor refers to `name` anywhere in its text."""
    if is_object(body):
        return any(_mentions(value, name) for value in body.values())
    if is_array(body):
        return any(_mentions(value, name) for value in body)
    if isinstance(body, str):
        return re.search(rf"(?<![\w$]){re.escape(name)}(?![\w$])", body) is not None
    return False


class Parser:
    """
    Compiles descriptors into Type graphs.

    A descriptor is either a text pattern or a mapping of field names to
    descriptors.

    Text grammar:
        - leading sigils: "?" ifexist, "=" equal, "!" shouldnotmatch, "&" nonable
        - "a,b" must match both, "a|b" enum
        - "(a,b)" tuple, "[a|b]" list, "a[]" list of a, "[]" any list
        - "1-10" exclusive range, "1<->10" inclusive, "1<-10" / "1->10" half-open
        - "{k:v}" mapping
        - a type name, or else a JSON literal, or else the raw text

    Mapping descriptors:
        - "#field" keys hold comments, collected into `Type.comments`
        - trailing sigils on a field name ("name?", "tags|", "pair*") apply
          rules to the field, "|" and "*" build an enum or tuple from a list
        - "__def__" is a list of {"name", "def", "origin"?} entries defining
          named types for the rest of the descriptor; a def mentioning
          "__self__" or its own name is recursive

    Example:
        parser = Parser()
        book = parser.parse({"title": "string", "price": "0<-1000", "tags": "string[]"})
        book.test({"title": "a", "price": 10, "tags": ["x"]})  # True
    """

    def __init__(self, types: Optional[dict] = None):
        self.types = {**DEFAULT_TYPES, **(types or {})}

    def define(self, name: str, target: Any) -> "Parser":
        self.types[name] = target
        return self

    def parse(self, description: Any) -> Type:
        if isinstance(description, str):
            return create_type(self._parse_text(description))
        if is_object(description):
            return self._parse_fields(description)
        if is_array(description):
            return create_type(self._build(description, None, {}))
        return create_type(description)

    def _parse_fields(self, description: Any) -> Dict:
        target = dict(description)
        definitions = target.pop("__def__", None) or []

        types = dict(self.types)
        for entry in definitions:
            name = entry["name"]
            body = entry["def"]
            if entry.get("origin"):
                types[name] = body
            elif _mentions(body, SELF) or _mentions(body, name):
                types[name] = _self_ref(types, name, body)
            else:
                types[name] = Parser(types).parse(body)

        parser = self if not definitions else Parser(types)
        comments: dict = {}
        fields = {}

        for key, value in target.items():
            key = str(key)
            if key.startswith("#"):
                comments[key[1:]] = value
                continue

            prop, sigils = _split_key(key)
            if "|" in sigils or "*" in sigils:
                if not is_array(value):
                    raise ValueError(f"{key} should be a list, but receive {type(value).__name__}")
                pattern = [parser._build(item, f"{prop}[{index}]", comments) for index, item in enumerate(value)]
            else:
                pattern = parser._build(value, prop, comments)

            for sigil in sigils:
                pattern = KEY_RULES[sigil](pattern)
            fields[prop] = pattern

        result = Dict(fields)
        result.comments = comments
        return result

    def _build(self, value: Any, path: Optional[str], comments: dict) -> Any:
        if is_object(value):
            subtype = self._parse_fields(value)
            if path:
                for key, comment in subtype.comments.items():
                    comments[f"{path}.{key}"] = comment
            return subtype
        if is_array(value):
            return List([
                self._build(item, f"{path}[{index}]" if path else None, comments)
                for index, item in enumerate(value)
            ])
        if isinstance(value, str):
            return self._parse_text(value)
        return value

    def _parse_text(self, text: str) -> Any:
        text = text.strip()
        sigils = []
        while text and text[0] in RULES:
            sigils.append(text[0])
            text = text[1:]

        segments = [self._parse_segment(segment) for segment in _split(text, ",")]
        pattern = match(segments) if len(segments) > 1 else segments[0]

        for sigil in reversed(sigils):
            pattern = RULES[sigil](pattern)
        return pattern

    def _parse_segment(self, segment: str) -> Any:
        alternatives = [self._parse_alternative(item) for item in _split(segment, "|")]
        return Enum(alternatives) if len(alternatives) > 1 else alternatives[0]

    def _parse_alternative(self, item: str) -> Any:
        types = self.types

        if item.startswith("(") and item.endswith(")"):
            return Tuple([self._parse_text(member) for member in _split(item[1:-1], ",")])

        if item.startswith("[") and item.endswith("]"):
            inner = item[1:-1].strip()
            if not inner:
                return list
            return List([self._parse_text(member) for member in _split(inner, "|")])

        if item.endswith("[]"):
            inner = item[:-2].strip()
            return List([self._parse_text(inner)]) if inner else list

        matched = _RANGE_RE.match(item)
        if matched:
            low, min_bound, max_bound, high = matched.groups()
            return Range({
                "min": json.loads(low),
                "max": json.loads(high),
                "min_bound": bool(min_bound),
                "max_bound": bool(max_bound),
            })

        if item.startswith("{") and item.endswith("}"):
            members = _split(item[1:-1], ":")
            if len(members) == 2:
                key, value = members
                return Mapping({"key": self._parse_text(key), "value": self._parse_text(value)})

        if item in types:
            return types[item]

        try:
            return json.loads(item)
        except ValueError:
            return item

    def describe(self, type_: Any, array_style: Optional[str] = None, rule_style: bool = False) -> Any:
        """
        Render a Type graph back into a descriptor.

        Args:
            type_: Type, Rule or plain pattern to describe
            array_style: None for ["a", "b"], "bracket" for "[a|b]", "suffix" for "a[]|b[]"
            rule_style: Put rule sigils on field names ("name?") instead of values ("?string")

        Repeated nested structures are hoisted into "__def__" entries named $1, $2...

        Raises:
            ValueError: when definitions were hoisted but the top level is not
                a field mapping that could hold them
        """
        return _Describer(self.types, array_style, rule_style).run(type_)

    def guess(self, data: Any) -> Any:
        return inference.guess(data)

    def merge(self, exist: dict, data: Any) -> dict:
        return inference.merge(exist, data)

    def get_type(self, value: Any) -> Any:
        return inference.get_type(value)


def _self_ref(types: dict, name: str, body: Any) -> SelfRef:
    # `types` keeps growing while definitions are read, resolution sees them all
    return SelfRef(lambda ref: Parser({**types, name: ref, SELF: ref}).parse(body))


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


# Builtin markers without a name of their own in the type table
_BUILTIN_NAMES = {
    int: "int",
    float: "number",
}

_PREFIX_RULES = {
    "ifexist": "?",
    "equal": "=",
    "shouldnotmatch": "!",
    "nonable": "&",
    "nullable": "&",
}


class _Describer:
    """One describe pass: collects the generated definitions."""

    def __init__(self, types: dict, array_style: Optional[str], rule_style: bool):
        self.types = types
        self.array_style = array_style
        self.rule_style = rule_style
        self.definitions: list = []
        self.self_names: dict = {}

    def run(self, type_: Any) -> Any:
        description = self.build(type_)
        if not self.definitions:
            return description
        if not is_object(description):
            # only a mapping descriptor can carry the "__def__" table
            raise ValueError(
                f"can not describe {type(type_).__name__} without a field mapping, "
                f"it refers to generated definitions {[entry['name'] for entry in self.definitions]}"
            )
        return {"__def__": self.definitions, **description}

    def proto(self, value: Any) -> Optional[str]:
        for name, target in self.types.items():
            if target is value:
                return name
        if isinstance(value, type) and value in _BUILTIN_NAMES:
            return _BUILTIN_NAMES[value]
        if isinstance(value, str):
            return value
        return None

    def define(self, value: Any, origin: bool = False) -> Any:
        if not (is_object(value) or is_array(value)):
            return value
        for entry in self.definitions:
            if entry["def"] is not None and entry["def"] == value:
                return entry["name"]
        name = f"${len(self.definitions) + 1}"
        entry = {"name": name, "def": value}
        if origin:
            entry["origin"] = True
        self.definitions.append(entry)
        return name

    def inline(self, value: Any, origin: bool = False) -> str:
        """Text form of a built value, hoisting structures into definitions."""
        if is_array(value) and not origin and all(isinstance(item, str) for item in value):
            return "[" + "|".join(value) + "]"
        return _text(self.define(value, origin))

    def build_list(self, items: list) -> Any:
        if self.array_style == "suffix":
            return "|".join(f"{self.inline(item)}[]" for item in items)
        if self.array_style == "bracket":
            return "[" + "|".join(self.inline(item) for item in items) + "]"
        return list(items)

    def build(self, type_: Any) -> Any:
        proto = self.proto(type_)
        if proto is not None:
            return proto

        if isinstance(type_, Dict):
            pattern = type_.pattern
        elif is_object(type_):
            pattern = type_
        else:
            return self.create(type_)

        description = {}
        for key, value in pattern.items():
            rules: list = []
            sign = self.create(value, rules)
            # sigils were collected outermost first, field names list them innermost first
            description[f"{key}{''.join(reversed(rules))}"] = sign
        return description

    def create(self, value: Any, rules: Optional[list] = None) -> Any:
        proto = self.proto(value)
        if proto is not None:
            return proto

        rule_style = self.rule_style and rules is not None

        if isinstance(value, SelfRef):
            return self.create_self_ref(value)

        if isinstance(value, Dict):
            return self.build(value.pattern)

        if isinstance(value, Tuple):
            items = [self.create(item) for item in value.pattern]
            if rule_style:
                rules.append("*")
                return items
            return "(" + ",".join(self.inline(item) for item in items) + ")"

        if isinstance(value, List):
            items = [self.create(item) for item in value.pattern]
            if rule_style or self.array_style is None:
                return items
            return self.build_list(items)

        if isinstance(value, Enum):
            items = [self.create(item) for item in value.pattern]
            if rule_style:
                rules.append("|")
                return items
            return "|".join(self.inline(item) for item in items)

        if isinstance(value, Range):
            pattern = value.pattern
            low = "<" if pattern.get("min_bound", True) else ""
            high = ">" if pattern.get("max_bound", True) else ""
            return f"{_text(pattern['min'])}{low}-{high}{_text(pattern['max'])}"

        if isinstance(value, Mapping):
            key = self.inline(self.create(value.pattern["key"]))
            item = self.inline(self.create(value.pattern["value"]))
            return "{" + key + ":" + item + "}"

        if isinstance(value, Type):
            return self.create(value.pattern)

        if isinstance(value, Rule):
            return self.create_rule(value, rules, rule_style)

        if is_object(value):
            return self.build(value)

        if is_array(value):
            return self.build_list([self.create(item) for item in value])

        return value

    def create_rule(self, rule: Rule, rules: Optional[list], rule_style: bool) -> Any:
        name = rule.name
        pattern = rule.pattern

        if name in _PREFIX_RULES:
            sigil = _PREFIX_RULES[name]
            if rule_style:
                rules.append(sigil)
                return self.create(pattern, rules)
            inner = self.create(pattern)
            return sigil + self.inline(inner, origin=name == "equal")

        if name == "match":
            return ",".join(self.inline(self.create(item)) for item in pattern)

        if name in ("shouldexist", "shouldnotexist"):
            return "?" + self.inline(self.create(pattern))

        if name == "lambda":
            return "function"

        if name == "determine":
            if is_array(pattern):
                return "|".join(self.inline(self.create(item)) for item in pattern)
            return "any"

        if pattern is None:
            return "any"
        return self.create(pattern)

    def create_self_ref(self, ref: SelfRef) -> str:
        # recursive definitions refer to themselves by their own name
        if id(ref) in self.self_names:
            return self.self_names[id(ref)]

        entry = {"name": f"${len(self.definitions) + 1}", "def": None}
        self.definitions.append(entry)
        self.self_names[id(ref)] = entry["name"]

        entry["def"] = self.build(create_type(ref.pattern))
        return entry["name"]


# Singleton parser instance
_parser = Parser()


def parse(description: Any) -> Type:
    """Compile a descriptor with the default type table."""
    return _parser.parse(description)


def describe(type_: Any, array_style: Optional[str] = None, rule_style: bool = False) -> Any:
    return _parser.describe(type_, array_style=array_style, rule_style=rule_style)


def define(name: str, target: Any) -> Parser:
    """Add a named type to the default type table."""
    return _parser.define(name, target)
