"""Self-referencing patterns."""

from typing import Any, Callable, Optional

from ..core.error import TyError
from ..core.type import Type
from ..core.utils import NOTHING
from .constructs import create_type


class SelfRef(Type):
    """
    A pattern that refers to itself.

    `fn` receives the SelfRef and returns the pattern. It is called once, the
    first time the pattern is needed, and the result is memoized.

    Example:
        tree = SelfRef(lambda node: {"name": str, "children": [node]})
        tree.test({"name": "root", "children": [{"name": "leaf", "children": []}]})  # True
    """

    def __init__(self, fn: Callable[["SelfRef"], Any]):
        if not callable(fn):
            raise TypeError("[SelfRef]: pattern should be a function.")
        self.fn = fn
        self._resolving = False
        super().__init__(NOTHING)
        self.name = "SelfRef"

    @property
    def pattern(self) -> Any:
        if self._pattern is NOTHING:
            self.resolve()
        return self._pattern

    @pattern.setter
    def pattern(self, pattern: Any) -> None:
        self._pattern = pattern

    def resolve(self) -> Any:
        """Resolve and memoize the pattern."""
        if self._pattern is not NOTHING:
            return self._pattern
        if self._resolving:
            raise RecursionError(
                "[SelfRef]: pattern is read while it is being resolved, "
                "refer to the SelfRef itself instead of its pattern."
            )

        self._resolving = True
        try:
            self._pattern = self.fn(self)
        finally:
            self._resolving = False
        return self._pattern

    def clone(self) -> "SelfRef":
        # clones share the memoized pattern so fn still runs once
        if not self._resolving:
            self.resolve()
        return super().clone()

    def _decide(self, value: Any) -> Optional[TyError]:
        return self._inherit(create_type(self.pattern)).catch(value)


def selfref(fn: Callable[[SelfRef], Any]) -> SelfRef:
    return SelfRef(fn)
