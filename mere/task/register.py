import logging
from typing import Any, Callable, Dict, Generator, Optional, Sequence, Union

from mere.config import ArgCheck, ArgCheckPolicy
from mere.exceptions import InvalidTaskError, NotBoundError
from mere.task.core import Task, TaskRef, get_sequence_task
from mere.task.handles import TaskHandle, TaskSequence
from mere.task.sequence import generate

_logger = logging.getLogger(__name__)


class TaskRegistry:
    """Maps labels to tasks and owns the argument checking policy.

    Example:
        registry = TaskRegistry()

        @registry.task
        def double(x):
            return x * 2

        registry.handle("double").make(5)  # 10
    """

    def __init__(self, policy: Optional[Union[ArgCheckPolicy, ArgCheck, int]] = None):
        if policy is None:
            policy = ArgCheckPolicy()
        elif not isinstance(policy, ArgCheckPolicy):
            policy = ArgCheckPolicy(policy)
        self.policy = policy
        self._registry: Dict[str, Task] = {}

    def __contains__(self, label: object) -> bool:
        return label in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    def register(self, label: str, task: Task) -> Task:
        if not isinstance(task, Task):
            raise InvalidTaskError(f"task expected for label '{label}', got {task!r}")
        if label in self._registry:
            _logger.debug(f"Label '{label}' rebound to {task!r}")
        self._registry[label] = task
        return task

    def resolve(self, label: str) -> Task:
        task = self._registry.get(label)
        if task is None:
            raise NotBoundError(f"Label '{label}' is not bound to a task.")
        return task

    def bind(self, label: str, target: Any) -> TaskHandle:
        """Bind a function, a task or a sequence of tasks to ``label``.

        Sequences are folded into one task at bind time.

        Raises:
            InvalidTaskError: If ``target`` is none of the accepted kinds.
        """
        match target:
            case Task():
                task = target
            case TaskSequence():
                task = get_sequence_task(target.elements, "binding", self)
            case TaskRef():
                task = target.task
            case list() | tuple():
                task = get_sequence_task(target, "binding", self)
            case _ if callable(target):
                task = Task(target, registry=self)
            case _:
                raise InvalidTaskError(
                    "task must be bound to a function, a task or a sequence of tasks"
                )

        self.register(label, task)
        return TaskHandle(label, self)

    def task(
        self,
        func: Optional[Callable] = None,
        *,
        name: Optional[str] = None,
        arity: Optional[int] = None,
    ) -> Any:
        """Decorator registering a function as a task under its name.

        Usable bare (``@registry.task``) or with options
        (``@registry.task(name="inc", arity=1)``). The decorated name
        refers to the resulting Task.
        """
        def decorator(fn: Callable) -> Task:
            task = Task(fn, arity, registry=self)
            self.register(name or fn.__name__, task)
            return task

        if func is not None:
            return decorator(func)
        return decorator

    def handle(self, label: str) -> TaskHandle:
        return TaskHandle(label, self)

    def sequence(self, *elements: Any) -> TaskSequence:
        return TaskSequence(elements, self)

    def generate(self, elements: Sequence[Any], pass_args: bool = False) -> Generator[Any, Any, Any]:
        return generate(elements, pass_args, self)

    def all(self) -> Dict[str, Task]:
        return self._registry
