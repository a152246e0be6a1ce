"""Function contracts checked at call time."""

import functools
import warnings
from typing import Any, Callable, TypeVar, cast

from ..core.type import Type
from ..types.constructs import Tuple, create_type
from ..types.prototypes import Any as AnyValue

F = TypeVar('F', bound=Callable[..., Any])


def contract(inputs: Any, output: Any = AnyValue, *, strict: bool = True) -> Callable[[F], F]:
    """
    Decorator asserting positional arguments and the return value on every call.

    Args:
        inputs: A Tuple, or a list of patterns for the positional arguments
        output: Pattern of the return value
        strict: Raise TyError on mismatch (vs warn)

    Example:
        @contract([int, int], int)
        def add(x, y):
            return x + y

        add(1, "2")  # raises TyError: $[1] should match `int`, but receive `"2"`.
    """
    input_type = inputs if isinstance(inputs, Tuple) else Tuple(list(inputs))
    output_type = create_type(output)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            _check(input_type, list(args), strict)
            result = func(*args, **kwargs)
            _check(output_type, result, strict)
            return result

        wrapper.__tyshape_contract__ = (input_type, output_type)
        return cast(F, wrapper)

    return decorator


def _check(type_: Type, value: Any, strict: bool) -> None:
    error = type_.catch(value)
    if not error:
        return
    if strict:
        raise error
    warnings.warn(error.message, RuntimeWarning, stacklevel=3)


def is_contracted(func: Any) -> bool:
    return callable(func) and hasattr(func, "__tyshape_contract__")
