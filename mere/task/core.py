import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

from mere.config import ArgCheckPolicy
from mere.exceptions import ArityError, InvalidTaskError, NotBoundError
from mere.serializer import CanonicalSerializer

if TYPE_CHECKING:
    from mere.task.register import TaskRegistry

_logger = logging.getLogger(__name__)

_serializer = CanonicalSerializer()


def infer_arity(func: Callable) -> int:
    """Count the positional parameters of ``func`` that have no default."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return 0

    positional = (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    )
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind not in positional or parameter.default is not parameter.empty:
            break
        count += 1
    return count


class TaskRef(ABC):
    """Anything that stands for a task: a label handle or a task sequence."""

    @property
    @abstractmethod
    def task(self) -> "Task": ...


class Task:
    """A named unit of work wrapping a plain function.

    A task has a fixed arity, consults an ``ArgCheckPolicy`` on every call and
    can optionally cache its results. ``partial`` and ``then`` derive new
    tasks; the original is never modified.

    Example:
        double = Task(lambda x: x * 2)
        inc = Task(lambda x: x + 1)

        double.then(inc).make(5)        # 11
        Task(pow).partial(2).make(10)   # 1024
    """

    def __init__(
        self,
        func: Optional[Callable],
        arity: Optional[int] = None,
        *,
        policy: Optional[ArgCheckPolicy] = None,
        registry: Optional["TaskRegistry"] = None,
    ):
        """Initialize the task.

        Args:
            func: The callable to wrap.
            arity: Number of positional arguments. Inferred from ``func`` if omitted.
            policy: Argument checking policy. Defaults to the registry's policy.
            registry: Registry used to resolve labels passed to ``then``.
        """
        if policy is None:
            policy = registry.policy if registry is not None else ArgCheckPolicy()
        if arity is None:
            arity = infer_arity(func) if func is not None else 0

        self.func = func
        self.registry = registry
        self.policy = policy
        self._arity = max(0, arity)
        self._memo: Optional[Dict[str, Any]] = None

    @property
    def arity(self) -> int:
        return self._arity

    @property
    def task(self) -> "Task":
        return self

    @property
    def memoized(self) -> bool:
        return self._memo is not None

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"Task({name}, arity={self._arity}, memoized={self.memoized})"

    def _derive(self, func: Callable, arity: int) -> "Task":
        return Task(func, arity, policy=self.policy, registry=self.registry)

    def _execute(self, *args: Any, check_arity: bool = False) -> Any:
        """Build the effective argument list and call the function."""
        if not callable(self.func):
            raise NotBoundError(f"task {self!r} is not bound to a function")
        if check_arity:
            self.policy.ensure(len(args), self._arity)

        limit = min(len(args), self._arity)
        effective: List[Any] = [resolve_argument(arg) for arg in args[:limit]]
        effective.extend([None] * (self._arity - limit))

        if self._memo is None:
            return self.func(*effective)

        key = _serializer.key(effective)
        if key is None:
            _logger.debug(f"{self!r} called with non-canonical arguments, cache skipped")
            return self.func(*effective)

        if key in self._memo:
            _logger.debug(f"{self!r} cache hit for {key}")
            return self._memo[key]

        result = self.func(*effective)
        self._memo[key] = result
        return result

    def make(self, *args: Any) -> Any:
        """Run the task synchronously and return its result.

        Raises:
            NotBoundError: If the task has no function.
            ArityError: If the argument count violates the policy.
        """
        return self._execute(*args, check_arity=True)

    def promise(self, *args: Any) -> "asyncio.Future[Any]":
        """Run the task and deliver its outcome through an asyncio Future.

        Must be called while an event loop is running. Any error raised by
        ``make`` rejects the future instead of propagating.
        """
        future = asyncio.get_running_loop().create_future()
        try:
            future.set_result(self.make(*args))
        except StopIteration as error:
            # Futures refuse StopIteration
            wrapped = RuntimeError(f"task {self!r} raised StopIteration")
            wrapped.__cause__ = error
            future.set_exception(wrapped)
        except Exception as error:
            future.set_exception(error)
        return future

    def partial(self, *args: Any) -> "Task":
        """Bind leading arguments and return a task expecting the rest."""
        if not self.policy.more_allowed and len(args) > self._arity:
            raise ArityError(f"too many arguments: given {len(args)}, expected {self._arity}")

        def bound(*rest: Any) -> Any:
            return self._execute(*args, *rest)

        return self._derive(bound, self._arity - len(args))

    def then(self, task: Any, *args: Any) -> "Task":
        """Chain ``task`` after this one.

        The result of this task becomes the first argument of ``task``,
        followed by ``args``. A None result is not forwarded.

        Raises:
            InvalidTaskError: If ``task`` does not resolve to a task.
            ArityError: If ``args`` violate the policy for ``task``.
        """
        second = resolve_element(task, self.registry, "then()")
        self.policy.ensure(len(args), second.arity)
        return self._chain(second, args)

    def _chain(self, second: "Task", args: Sequence[Any] = ()) -> "Task":
        def chained(*first_args: Any) -> Any:
            first_result = self._execute(*first_args)
            if first_result is None:
                return second._execute(*args)
            return second._execute(first_result, *args)

        return self._derive(chained, self._arity)

    def memoize(self) -> "Task":
        """Enable result caching. Calling it again keeps the existing cache."""
        if self._memo is None:
            self._memo = {}
        return self


def resolve_argument(arg: Any) -> Any:
    match arg:
        case Task():
            return arg.make()
        case TaskRef():
            return arg.task.make()
        case _:
            return arg


def resolve_element(element: Any, registry: Optional["TaskRegistry"], call_site: str) -> Task:
    """Turn a chain element (task, handle, label or nested sequence) into a Task."""
    match element:
        case Task():
            return element
        case TaskRef():
            return element.task
        case str() if registry is not None:
            if element not in registry:
                raise InvalidTaskError(f"label '{element}' is not bound, cannot call {call_site}")
            return registry.resolve(element)
        case list() | tuple():
            return get_sequence_task(element, call_site, registry)
        case _:
            raise InvalidTaskError(f"task expected to call {call_site}, got {element!r}")


def get_sequence_task(
    elements: Sequence[Any],
    call_site: str,
    registry: Optional["TaskRegistry"] = None,
) -> Task:
    """Fold an ordered sequence of tasks into one task with ``then``.

    Args:
        elements: Tasks, labels, handles or nested sequences.
        call_site: Operation name reported in errors.
        registry: Registry for label lookups and the policy of the result.

    Returns:
        The combined task. An empty sequence gives a task returning None.
    """
    if len(elements) == 0:
        return Task(lambda: None, 0, registry=registry)

    combined = _sequence_element(elements[0], registry, call_site)
    for element in elements[1:]:
        combined = combined._chain(_sequence_element(element, registry, call_site))
    return combined


def _sequence_element(element: Any, registry: Optional["TaskRegistry"], call_site: str) -> Task:
    try:
        return resolve_element(element, registry, call_site)
    except InvalidTaskError as error:
        raise InvalidTaskError(f"sequence must contain only tasks to call {call_site}") from error


__all__ = [
    "Task",
    "TaskRef",
    "get_sequence_task",
    "infer_arity",
    "resolve_argument",
    "resolve_element",
]
