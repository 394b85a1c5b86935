"""
Mere - Named, composable tasks over plain functions.

A small library for wrapping functions into tasks with a fixed arity and
composing them: partial application, sequencing, memoization and
asyncio-friendly execution.

Quick Start:
    from mere import TaskRegistry

    registry = TaskRegistry()

    @registry.task
    def inc(x):
        return x + 1

    @registry.task
    def square(x):
        return x * x

    registry.handle("inc").make(1)               # 2
    registry.sequence("inc", "square").make(3)   # 16
    inc.partial(4).make()                        # 5

    # Inside a coroutine
    await registry.handle("square").promise(5)   # 25
"""

__version__ = "0.1.0"

from .config import ArgCheck, ArgCheckPolicy
from .exceptions import (
    ArityError,
    ConfigurationError,
    InvalidTaskError,
    MereError,
    NotBoundError,
)
from .serializer import CanonicalSerializer
from .task import Task, TaskHandle, TaskRegistry, TaskSequence, generate, get_sequence_task

NO_CHECK = ArgCheck.NO_CHECK
NOT_MORE = ArgCheck.NOT_MORE
NOT_LESS = ArgCheck.NOT_LESS
MUST_EQUAL = ArgCheck.MUST_EQUAL

__all__ = [
    "ArgCheck",
    "ArgCheckPolicy",
    "ArityError",
    "CanonicalSerializer",
    "ConfigurationError",
    "InvalidTaskError",
    "MereError",
    "NotBoundError",
    "Task",
    "TaskHandle",
    "TaskRegistry",
    "TaskSequence",
    "generate",
    "get_sequence_task",
    "NO_CHECK",
    "NOT_MORE",
    "NOT_LESS",
    "MUST_EQUAL",
]
