"""Example application tasks for the mere CLI.

List them with:
    mere list -A examples.myapp.tasks

Run them with:
    mere run -A examples.myapp.tasks double -a 5
    mere run -A examples.myapp.tasks inc square -a 3
    mere run -A examples.myapp.tasks report -a '"weekly"' -a 42
"""

import time

from mere import TaskRegistry

registry = TaskRegistry()


@registry.task
def double(x: int) -> int:
    """Return the input doubled."""
    return x * 2


@registry.task
def inc(x: int) -> int:
    return x + 1


@registry.task
def square(x: int) -> int:
    return x * x


@registry.task
def slow_fib(n: int) -> int:
    """Naive Fibonacci, memoized below so repeated calls are instant."""
    time.sleep(0.01)
    if n < 2:
        return n
    return slow_fib.make(n - 1) + slow_fib.make(n - 2)


slow_fib.memoize()


@registry.task
def report(report_type: str, user_id: int) -> dict:
    """Simulate generating a report."""
    return {"report_type": report_type, "user_id": user_id, "status": "complete"}


registry.bind("inc_then_square", ["inc", "square"])
registry.bind("user_report", report.partial("user"))
