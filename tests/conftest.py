"""Global pytest configuration for the tyshape test suite.

Fixtures here provide sample data and keep process-wide state (the leaf
marker registry and the error formatting knobs) isolated between tests.
"""

from typing import Generator

import pytest

from tyshape import Prototype, TyError


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "rules: tests rule combinators")
    config.addinivalue_line("markers", "parser: tests the descriptor parser")
    config.addinivalue_line("markers", "errors: tests error tracing and messages")
    config.addinivalue_line("markers", "deferred: tests track, trace and lazy patterns")


@pytest.fixture
def registry() -> Generator[type, None, None]:
    """Give a test the Prototype registry and restore it afterwards."""
    snapshot = Prototype._registry
    yield Prototype
    Prototype._registry = snapshot


@pytest.fixture(autouse=True)
def error_settings() -> Generator[None, None, None]:
    """Restore the TyError formatting knobs after every test."""
    saved = (
        TyError.should_hide_sensitive_data,
        TyError.should_break_long_message,
        TyError.key_path_prefix,
        TyError.default_messages,
    )
    yield
    (
        TyError.should_hide_sensitive_data,
        TyError.should_break_long_message,
        TyError.key_path_prefix,
        TyError.default_messages,
    ) = saved


@pytest.fixture
def book_data() -> dict:
    """A nested record used across the suite."""
    return {
        "name": "tomy",
        "age": 10,
        "books": [
            {"title": "Told Sad", "price": 12.5},
            {"title": "Yellow Sun", "price": 7.0},
        ],
    }
