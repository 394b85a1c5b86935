"""Label and sequence wrappers exposing the task operations."""

import asyncio
from typing import TYPE_CHECKING, Any, Generator, Iterator, List, Optional, Sequence

from mere.task.core import Task, TaskRef, get_sequence_task
from mere.task.sequence import generate

if TYPE_CHECKING:
    from mere.task.register import TaskRegistry


class TaskHandle(TaskRef):
    """A label bound in a registry.

    Every operation looks the label up first, so a handle always reaches
    the task currently bound to it.
    """

    def __init__(self, label: str, registry: "TaskRegistry"):
        self.label = label
        self.registry = registry

    def __repr__(self) -> str:
        return f"TaskHandle({self.label!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TaskHandle):
            return NotImplemented
        return self.label == other.label and self.registry is other.registry

    def __hash__(self) -> int:
        return hash(self.label)

    @property
    def task(self) -> Task:
        return self.registry.resolve(self.label)

    def make(self, *args: Any) -> Any:
        return self.task.make(*args)

    def promise(self, *args: Any) -> "asyncio.Future[Any]":
        return self.task.promise(*args)

    def partial(self, *args: Any) -> Task:
        return self.task.partial(*args)

    def then(self, task: Any, *args: Any) -> Task:
        return self.task.then(task, *args)

    def memoize(self) -> Task:
        return self.task.memoize()


class TaskSequence(TaskRef):
    """An ordered sequence of tasks treated as one combined task.

    Elements can be tasks, handles, labels or nested sequences. The combined
    task is built on every access, so labels are resolved at call time.

    Example:
        registry.bind("inc", lambda x: x + 1)
        registry.bind("square", lambda x: x * x)

        TaskSequence(["inc", "square"], registry).make(3)  # 16
    """

    def __init__(self, elements: Sequence[Any], registry: Optional["TaskRegistry"] = None):
        self.elements: List[Any] = list(elements)
        self.registry = registry

    def __repr__(self) -> str:
        return f"TaskSequence({self.elements!r})"

    def __iter__(self) -> Iterator[Any]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def _combined(self, call_site: str) -> Task:
        return get_sequence_task(self.elements, call_site, self.registry)

    @property
    def task(self) -> Task:
        return self._combined("the task property")

    def make(self, *args: Any) -> Any:
        if not self.elements:
            return None
        return self._combined("make()").make(*args)

    def promise(self, *args: Any) -> "asyncio.Future[Any]":
        if not self.elements:
            future = asyncio.get_running_loop().create_future()
            future.set_result(None)
            return future
        return self._combined("promise()").promise(*args)

    def partial(self, *args: Any) -> Task:
        return self._combined("partial()").partial(*args)

    def then(self, task: Any, *args: Any) -> Task:
        return self._combined("then()").then(task, *args)

    def memoize(self) -> Task:
        return self._combined("memoize()").memoize()

    def generate(self, pass_args: bool = False) -> Generator[Any, Any, Any]:
        return generate(self.elements, pass_args, self.registry)


__all__ = [
    "TaskHandle",
    "TaskSequence",
]
