"""Stepwise execution of task sequences."""

from typing import TYPE_CHECKING, Any, Generator, Optional, Sequence, Tuple

from mere.exceptions import InvalidTaskError
from mere.task.core import Task, resolve_element

if TYPE_CHECKING:
    from mere.task.register import TaskRegistry


def as_args(value: Any) -> Tuple[Any, ...]:
    """Normalize a value sent into a generator to an argument tuple."""
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


def generate(
    elements: Sequence[Any],
    pass_args: bool = False,
    registry: Optional["TaskRegistry"] = None,
) -> Generator[Any, Any, Any]:
    """Run a sequence of tasks one step at a time.

    The returned generator is already started. Every ``send(value)`` runs
    the next task with ``value`` as its arguments and yields the result.
    Once every task has run, the next ``send`` raises ``StopIteration``
    carrying the last result.

    Every result, the last one included, is yielded rather than returned
    from the final resume, so finishing takes one extra ``send``. A bare
    ``send(None)`` runs the next task with no arguments at all, not with a
    single None argument; send ``[None]`` for that.

    Args:
        elements: Tasks, labels, handles or nested sequences.
        pass_args: If True, each task also receives the previous result
            as its first argument.
        registry: Registry used to resolve labels.

    Raises:
        InvalidTaskError: If an element does not resolve to a task.

    Example:
        steps = generate([load, parse, render], pass_args=True)
        page = steps.send("index.md")
        steps.send(None)
        html = steps.send({"theme": "dark"})
    """
    try:
        tasks = [resolve_element(element, registry, "generate()") for element in elements]
    except InvalidTaskError as error:
        raise InvalidTaskError("sequence must contain only tasks to call generate()") from error

    steps = _run_steps(tasks, pass_args)
    next(steps)
    return steps


def _run_steps(tasks: Sequence[Task], pass_args: bool) -> Generator[Any, Any, Any]:
    result = None
    args = as_args((yield))

    for task in tasks:
        if pass_args and result is not None:
            result = task.make(result, *args)
        else:
            result = task.make(*args)
        args = as_args((yield result))

    return result


__all__ = [
    "as_args",
    "generate",
]
