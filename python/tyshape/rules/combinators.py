"""Rule combinators."""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

from ..core.error import TyError
from ..core.rule import Message, Rule
from ..core.utils import NOTHING, UNDEFINED, get_value, has_key, is_equal
from ..decorators.contract import contract, is_contracted
from ..types.constructs import Tuple, create_type
from ..types.prototypes import Any as AnyValue

logger = logging.getLogger(__name__)


def _fixed(pattern: Any) -> Callable[[Any, Any], Any]:
    return lambda data, key: pattern


def _assign(callback: Any, data: Any, key: Any) -> None:
    data[key] = callback(data, key) if callable(callback) else callback


def ifexist(pattern: Any) -> Rule:
    """
    Validate only when the key is present.

    Example:
        Dict({"age": ifexist(int)}).test({})  # True
    """
    return Rule(name="ifexist", pattern=pattern, shouldcheck=has_key, use=_fixed(pattern))


def determine(decide: Callable[[Any], Any], a: Any = NOTHING, b: Any = NOTHING) -> Rule:
    """
    Choose the pattern from the sibling data.

    With two patterns, `decide(data)` picks `a` when truthy and `b` otherwise.
    Without them, `decide(data)` returns the pattern itself.

    Example:
        Dict({
            "sex": str,
            "haul": determine(lambda data: data["sex"] == "M", Positive, 0),
        })
    """
    def use(data: Any, key: Any) -> Any:
        result = decide(data)
        if a is NOTHING and b is NOTHING:
            return result
        return a if result else b

    pattern = None if a is NOTHING and b is NOTHING else [a, b]
    rule = Rule(name="determine", pattern=pattern, use=use)
    rule.decide = decide
    return rule


class _Match(Rule):
    """Every pattern must match; reports the first failure."""

    def validate(self, data: Any, key: Any, pattern: Any = NOTHING) -> Optional[BaseException]:
        for item in self.pattern:
            error = self.check(item, data, key)
            if error:
                return self.make_error(error, data, key)
        return None


def match(patterns: list, message: Optional[Message] = None) -> Rule:
    return _Match(name="match", pattern=list(patterns), message=message)


class _ShouldMatch(Rule):
    """Positive or negative match with an optional custom message."""

    def __init__(self, name: str, pattern: Any, message: Optional[Message], negate: bool):
        super().__init__(name=name, pattern=pattern, message=message)
        self.negate = negate

    def matches(self, data: Any, key: Any) -> bool:
        pattern = self.pattern
        # plain functions are predicates, classes and prototypes are patterns
        if inspect.isfunction(pattern):
            return bool(pattern(get_value(data, key)))
        return self.check(pattern, data, key) is None

    def validate(self, data: Any, key: Any, pattern: Any = NOTHING) -> Optional[BaseException]:
        if self.matches(data, key) != self.negate:
            return None
        error = TyError({
            "kind": "unexcepted" if self.negate else "exception",
            "value": get_value(data, key),
            "pattern": self.pattern,
        })
        return self.make_error(error, data, key)


def shouldmatch(pattern: Any, message: Optional[Message] = None) -> Rule:
    return _ShouldMatch("shouldmatch", pattern, message, negate=False)


def shouldnotmatch(pattern: Any, message: Optional[Message] = None) -> Rule:
    return _ShouldMatch("shouldnotmatch", pattern, message, negate=True)


def ifnotmatch(pattern: Any, callback: Any) -> Rule:
    """
    Replace the value when it does not match.

    `callback` is called with ``(data, key)`` when callable, otherwise used as is.
    The container is modified in place.

    Example:
        data = {"name": None}
        Dict({"name": ifnotmatch(str, "")}).test(data)  # True, data["name"] == ""
    """
    return Rule(
        name="ifnotmatch",
        pattern=pattern,
        use=_fixed(pattern),
        override=lambda data, key: _assign(callback, data, key),
    )


class _IfMatch(Rule):
    """Replace the value when it is present and matches."""

    def __init__(self, pattern: Any, callback: Any):
        super().__init__(name="ifmatch", pattern=pattern)
        self.callback = callback
        self._overridden = False

    def prepare(self, data: Any, key: Any) -> None:
        self._overridden = False

    def shouldcheck(self, data: Any, key: Any) -> bool:
        return has_key(data, key)

    def validate(self, data: Any, key: Any, pattern: Any = NOTHING) -> Optional[BaseException]:
        if self._overridden:
            return None
        if self.check(self.pattern, data, key) is not None:
            return None
        # a match is what triggers the override
        return TyError({"kind": "unexcepted", "value": get_value(data, key), "pattern": self.pattern})

    def override(self, data: Any, key: Any) -> bool:
        _assign(self.callback, data, key)
        self._overridden = True
        return True

    def complete(self, data: Any, key: Any, error: Optional[BaseException]) -> Optional[BaseException]:
        self._overridden = False
        return error


def ifmatch(pattern: Any, callback: Any) -> Rule:
    """
    Example:
        Dict({"size": ifmatch(None, 10)})  # None becomes 10
    """
    return _IfMatch(pattern, callback)


def shouldexist(decide: Callable[[Any], Any], pattern: Any) -> Rule:
    """
    Require the key when `decide(data)` is truthy.

    A present key is always checked against `pattern`; an absent key is
    reported missing only when required.
    """
    rule = Rule(
        name="shouldexist",
        pattern=pattern,
        shouldcheck=lambda data, key: has_key(data, key) or bool(decide(data)),
        use=_fixed(pattern),
    )
    rule.decide = decide
    return rule


class _ShouldNotExist(Rule):
    """Forbid the key when `decide(data)` is truthy, otherwise check it if present."""

    def __init__(self, decide: Callable[[Any], Any], pattern: Any):
        super().__init__(name="shouldnotexist", pattern=pattern)
        self.decide = decide

    def shouldcheck(self, data: Any, key: Any) -> bool:
        return has_key(data, key)

    def validate(self, data: Any, key: Any, pattern: Any = NOTHING) -> Optional[BaseException]:
        if self.decide(data):
            return self.make_error(TyError({"kind": "overflow"}), data, key)
        return self.make_error(self.check(self.pattern, data, key), data, key)


def shouldnotexist(decide: Callable[[Any], Any], pattern: Any) -> Rule:
    return _ShouldNotExist(decide, pattern)


def instance(cls: type) -> Rule:
    """Strict instance-of check, bypassing the registry."""
    def validate(data: Any, key: Any) -> Optional[TyError]:
        value = get_value(data, key)
        if isinstance(value, cls):
            return None
        return TyError({"kind": "exception", "value": value, "name": "instance", "pattern": cls})

    return Rule(name="instance", pattern=cls, validate=validate)


def equal(pattern: Any) -> Rule:
    def validate(data: Any, key: Any) -> Optional[TyError]:
        value = get_value(data, key)
        if is_equal(value, pattern):
            return None
        return TyError({"kind": "exception", "value": value, "name": "equal", "pattern": pattern})

    return Rule(name="equal", pattern=pattern, validate=validate)


def nullable(pattern: Any) -> Rule:
    """None is accepted; anything else is checked against `pattern`."""
    return Rule(
        name="nullable",
        pattern=pattern,
        shouldcheck=lambda data, key: get_value(data, key) is not None,
        use=_fixed(pattern),
    )


def nonable(pattern: Any) -> Rule:
    """None and absent values are accepted; anything else is checked against `pattern`."""
    def shouldcheck(data: Any, key: Any) -> bool:
        value = get_value(data, key)
        return value is not None and value is not UNDEFINED

    return Rule(name="nonable", pattern=pattern, shouldcheck=shouldcheck, use=_fixed(pattern))


def lambda_(inputs: Any, output: Any = AnyValue) -> Rule:
    """
    Require a function and wrap it with a call-time contract.

    The function at ``data[key]`` is replaced in place by a wrapper asserting
    `inputs` against the positional arguments and `output` against the result
    on every call.

    Example:
        data = {"add": lambda x, y: x + y}
        Dict({"add": lambda_([int, int], int)}).assert_(data)
        data["add"](1, "2")  # raises TyError
    """
    input_type = inputs if isinstance(inputs, Tuple) else Tuple(list(inputs))
    output_type = create_type(output)

    def validate(data: Any, key: Any) -> Optional[TyError]:
        value = get_value(data, key)
        if is_contracted(value):
            return None
        return TyError({"kind": "exception", "value": value, "name": "lambda", "pattern": [input_type, output_type]})

    def override(data: Any, key: Any) -> None:
        value = get_value(data, key)
        if callable(value):
            data[key] = contract(input_type, output_type)(value)

    return Rule(name="lambda", pattern=[input_type, output_type], validate=validate, override=override)


async def _wait(awaitable: Any) -> Any:
    return await awaitable


class _Lazy(Rule):
    """Accepts everything until its pattern has been resolved."""

    def __init__(self, fn: Callable[[], Any]):
        super().__init__(name="lazy", pattern=None)
        self.fn = fn
        self.is_ready = False
        self._schedule()

    def _schedule(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            loop.call_soon(self._start, loop)
            return

        result = self.fn()
        if inspect.isawaitable(result):
            result = asyncio.run(_wait(result))
        self.resolve(result)

    def _start(self, loop: asyncio.AbstractEventLoop) -> None:
        try:
            result = self.fn()
        except Exception:
            logger.exception("failed to resolve lazy pattern")
            return

        if inspect.isawaitable(result):
            task = loop.create_task(_wait(result))
            task.add_done_callback(self._finish)
        else:
            self.resolve(result)

    def _finish(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("failed to resolve lazy pattern", exc_info=exc)
            return
        self.resolve(task.result())

    def resolve(self, pattern: Any) -> None:
        self.pattern = pattern
        self.is_ready = True
        logger.debug("resolved lazy pattern %r", pattern)

    def validate(self, data: Any, key: Any, pattern: Any = NOTHING) -> Optional[BaseException]:
        if not self.is_ready:
            return None
        return self.make_error(self.check(self.pattern, data, key), data, key)


def lazy(fn: Callable[[], Any]) -> Rule:
    """
    A rule whose pattern is produced later by `fn`.

    `fn` may return a pattern or an awaitable of one. Inside a running event
    loop it is called on the next loop iteration, so a `Type.trace` started in
    the same turn sees the resolved pattern; outside a loop it is resolved
    immediately.
    """
    return _Lazy(fn)
