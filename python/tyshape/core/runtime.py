"""Runtime validation engine."""

import logging
from typing import Any, Callable, Optional

from .error import TyError
from .type import Type

logger = logging.getLogger(__name__)

Listener = Callable[[TyError], Any]


class Runtime:
    """
    Validation facade over Type.

    Patterns given as text are descriptors and are compiled with the parser.
    Every error produced is passed to the bound listeners.

    Example:
        runtime = Runtime(silent=True)
        runtime.bind(lambda error: print(error.message))
        runtime.expect({"name": 1}, {"name": str})  # False, prints "$.name should match ..."
    """

    def __init__(self, *, silent: bool = False, optimize: bool = True):
        self.silent = silent
        self.optimize = optimize
        self._listeners: list[Listener] = []
        self._cache: dict[str, Type] = {}

    def bind(self, fn: Listener) -> "Runtime":
        if callable(fn) and fn not in self._listeners:
            self._listeners.append(fn)
        return self

    def unbind(self, fn: Listener) -> "Runtime":
        self._listeners = [item for item in self._listeners if item is not fn]
        return self

    def dispatch(self, error: TyError) -> None:
        for fn in list(self._listeners):
            fn(error)

    def create(self, pattern: Any) -> Type:
        """Turn a pattern or a descriptor into a Type."""
        if isinstance(pattern, str):
            if self.optimize and pattern in self._cache:
                return self._cache[pattern]

            # Import here to avoid circular dependency
            from ..parser.descriptor import parse

            compiled = parse(pattern)
            if self.optimize:
                self._cache[pattern] = compiled
            return compiled

        from ..types.constructs import create_type

        return create_type(pattern)

    def catch(self, value: Any, pattern: Any) -> Optional[TyError]:
        error = self.create(pattern).catch(value)
        if error:
            self.dispatch(error)
        return error

    def validate(self, value: Any, pattern: Any) -> bool:
        """Validate value against a pattern at runtime."""
        return self.catch(value, pattern) is None

    def expect(self, value: Any, pattern: Any) -> bool:
        """Like validate, but raises the TyError unless silent."""
        error = self.catch(value, pattern)
        if error and not self.silent:
            raise error
        return error is None

    def is_(self, arg: Any) -> "_Check":
        """
        Example:
            runtime.is_(int).typeof(10)  # True
            runtime.is_(10).of(int)      # True
        """
        return _Check(self, arg)

    async def track(self, value: Any, pattern: Any) -> None:
        try:
            await self.create(pattern).track(value)
        except TyError as error:
            self._report(error)

    async def trace(self, value: Any, pattern: Any) -> None:
        try:
            await self.create(pattern).trace(value)
        except TyError as error:
            self._report(error)

    def _report(self, error: TyError) -> None:
        self.dispatch(error)
        if not self.silent:
            raise error
        logger.debug("silenced validation error: %s", error.message)

    def clear_cache(self) -> None:
        self._cache.clear()


class _Check:
    def __init__(self, runtime: Runtime, arg: Any):
        self.runtime = runtime
        self.arg = arg

    def typeof(self, value: Any) -> bool:
        return self.runtime.validate(value, self.arg)

    def of(self, pattern: Any) -> bool:
        return self.runtime.validate(self.arg, pattern)


# Global runtime instance
_runtime = Runtime()
