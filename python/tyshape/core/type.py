"""Structural validator."""

import asyncio
import copy
import logging
from typing import Any, Callable, Optional

from .error import TyError
from .prototype import Prototype
from .rule import Rule
from .utils import NOTHING, is_array, is_object

logger = logging.getLogger(__name__)


def pattern_kind(pattern: Any) -> str:
    """
    Classify a pattern for dispatch.

    Returns one of "rule", "list", "dict", "type", "leaf" or "literal".
    """
    if isinstance(pattern, Rule):
        return "rule"
    if is_array(pattern):
        return "list"
    if is_object(pattern):
        return "dict"
    if isinstance(pattern, Type):
        return "type"
    if Prototype.is_(pattern).existing():
        return "leaf"
    return "literal"


class Type:
    """
    Validates values against a pattern by recursive descent.

    A pattern may be a registered marker (``str``, ``int``...), a Prototype,
    a class, a regular expression, a literal value, a list of alternatives,
    a mapping of fields, a Rule, or another Type.

    Example:
        person = Type({"name": str, "age": int})
        person.test({"name": "tomy", "age": 10})  # True
        person.assert_({"name": "tomy"})          # raises TyError: $.age is missing.
    """

    def __init__(self, pattern: Any):
        self.is_strict = False
        self.is_loose = False
        self.pattern = pattern
        self.name = "Type"
        self._msg: Optional[dict] = None

    def validate(self, value: Any, pattern: Any = NOTHING) -> Optional[TyError]:
        """
        Validate `value` against `pattern`, or the instance's own pattern.

        Never raises for a mismatch.

        Returns:
            None on success, a committed TyError otherwise
        """
        if pattern is NOTHING:
            pattern = self.pattern

        tyerr = TyError()
        _VALIDATORS[pattern_kind(pattern)](self, tyerr, value, pattern)
        tyerr.commit()
        return tyerr.error()

    def _validate_rule(self, tyerr: TyError, value: Any, rule: Rule) -> None:
        error = self._inherit(rule).catch([value], 0)
        if error:
            tyerr.add(error)

    def _validate_list(self, tyerr: TyError, value: Any, patterns: Any) -> None:
        if not is_array(value):
            tyerr.replace({"kind": "exception", "value": value, "name": "List", "pattern": patterns})
            return

        # rules may rewrite items in place
        items = value if isinstance(value, list) else list(value)
        for index, item in enumerate(items):
            errors = []
            for alternative in patterns:
                if isinstance(alternative, Rule):
                    error = self._inherit(alternative).catch(items, index)
                elif isinstance(alternative, Type):
                    error = self._inherit(alternative).catch(item)
                else:
                    error = self.validate(item, alternative)

                if not error:
                    errors = []
                    break
                errors.append(error)

            if errors:
                tyerr.add({
                    "kind": "notin",
                    "value": item,
                    "name": self.name,
                    "pattern": patterns,
                    "errors": errors,
                    "index": index,
                })

    def _validate_dict(self, tyerr: TyError, data: Any, patterns: Any) -> None:
        if not is_object(data):
            tyerr.replace({"kind": "exception", "value": data, "name": "Dict", "pattern": patterns})
            return

        # in strict mode the keys should be exactly the declared ones
        if self.is_strict:
            for key in data:
                if key not in patterns:
                    tyerr.add({"kind": "overflow", "key": key})

        for key, pattern in patterns.items():
            if not self.is_strict and self.is_loose and key not in data:
                continue

            if isinstance(pattern, Rule):
                error = self._inherit(pattern).catch(data, key)
                if not error:
                    continue
                # the rule may have created the key
                if key not in data:
                    tyerr.add({"kind": "missing", "key": key, "pattern": pattern})
                else:
                    tyerr.add({"error": error, "key": key})
            elif key not in data:
                tyerr.add({"kind": "missing", "key": key, "pattern": pattern})
            elif isinstance(pattern, Type):
                error = self._inherit(pattern).catch(data[key])
                if error:
                    tyerr.add({"error": error, "key": key})
            else:
                error = self.validate(data[key], pattern)
                if error:
                    tyerr.add({"error": error, "key": key})

    def _validate_type(self, tyerr: TyError, value: Any, pattern: "Type") -> None:
        pattern = self._inherit(pattern)
        error = pattern.catch(value)
        if error:
            tyerr.add({"error": error, "value": value, "name": pattern.name, "pattern": pattern})

    def _validate_leaf(self, tyerr: TyError, value: Any, pattern: Any) -> None:
        if Prototype.is_(pattern).typeof(value) is not True:
            tyerr.replace({"kind": "exception", "value": value, "pattern": pattern})

    def _validate_literal(self, tyerr: TyError, value: Any, pattern: Any) -> None:
        if not Prototype.is_(pattern).equal(value):
            tyerr.replace({"kind": "exception", "value": value, "name": "equal", "pattern": pattern})

    def _inherit(self, pattern: Any) -> Any:
        """Propagate strict/loose mode to a nested Type or Rule that declares none of its own."""
        if self.is_strict and not pattern.is_strict:
            return pattern.strict
        if not self.is_strict and self.is_loose and not pattern.is_strict and not pattern.is_loose:
            return pattern.loose
        return pattern

    def _decide(self, value: Any) -> Optional[TyError]:
        return self.validate(value, self.pattern)

    def catch(self, value: Any) -> Optional[TyError]:
        error = self._decide(value)
        if error and self._msg:
            error.translate(**self._msg)
        return error

    def assert_(self, value: Any) -> None:
        error = self.catch(value)
        if error:
            raise error

    def test(self, value: Any) -> bool:
        return not self.catch(value)

    async def track(self, value: Any) -> None:
        """Validate in the current turn of the event loop; raises the TyError."""
        error = self.catch(value)
        if error:
            raise error

    async def trace(self, value: Any) -> None:
        """Validate one turn of the event loop later; raises the TyError."""
        await asyncio.sleep(0)
        error = self.catch(value)
        if error:
            raise error

    def clone(self) -> "Type":
        ins = copy.copy(self)
        if ins.is_strict:
            ins.is_loose = False
        return ins

    def to_be_strict(self, mode: bool = True) -> "Type":
        self.is_strict = bool(mode)
        if mode:
            self.is_loose = False
        return self

    def to_be_loose(self, mode: bool = True) -> "Type":
        if self.is_strict:
            logger.warning("strict type %s can not change to be loose", self.name)
            return self
        self.is_loose = bool(mode)
        return self

    @property
    def strict(self) -> "Type":
        return self.clone().to_be_strict()

    @property
    def loose(self) -> "Type":
        return self.clone().to_be_loose()

    def with_(self, name: Optional[str] = None, strict: Optional[bool] = None,
              message: Optional[str] = None, prefix: Optional[str] = None,
              suffix: Optional[str] = None) -> "Type":
        """
        Configure the display name, strict mode and message override in place.

        Example:
            Type(int).with_(name="Age", message="age should be an integer")
        """
        if message or prefix or suffix:
            self._msg = {"message": message, "prefix": prefix, "suffix": suffix}
        else:
            self._msg = None
        if isinstance(name, str):
            self.name = name
        if strict is not None:
            self.to_be_strict(strict)
        return self

    def __repr__(self) -> str:
        return self.name


_VALIDATORS: dict[str, Callable[[Type, TyError, Any, Any], None]] = {
    "rule": Type._validate_rule,
    "list": Type._validate_list,
    "dict": Type._validate_dict,
    "type": Type._validate_type,
    "leaf": Type._validate_leaf,
    "literal": Type._validate_literal,
}
