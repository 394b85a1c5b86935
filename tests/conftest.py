# tests/conftest.py

from __future__ import annotations

import pytest

from mere import TaskRegistry


class CallCounter:
    """Wraps a function and records every call it receives."""

    def __init__(self, func):
        self.func = func
        self.calls: list[tuple] = []

    def __call__(self, *args):
        self.calls.append(args)
        return self.func(*args)


@pytest.fixture()
def registry() -> TaskRegistry:
    """A fresh registry per test, so bindings and policy never leak."""
    registry = TaskRegistry()
    registry.bind("inc", lambda x: x + 1)
    registry.bind("square", lambda x: x * x)
    registry.bind("double", lambda x: x * 2)
    return registry
