"""Execution and output helpers for the Mere CLI."""

import asyncio
from typing import Any, List, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.pretty import Pretty
from rich.table import Table

from mere import __version__
from mere.task import TaskRegistry, TaskSequence


def run_labels(
    registry: TaskRegistry,
    labels: Sequence[str],
    args: List[Any],
    use_promise: bool = False,
) -> Any:
    """Run one label, or the sequence of labels, with ``args``."""
    if len(labels) == 1:
        target: Any = registry.handle(labels[0])
    else:
        target = TaskSequence(labels, registry)

    if not use_promise:
        return target.make(*args)

    async def _await_promise() -> Any:
        return await target.promise(*args)

    return asyncio.run(_await_promise())


def print_result(labels: Sequence[str], result: Any, console: Console | None = None) -> None:
    console = console or Console()
    title = " → ".join(labels)
    console.print(Panel(Pretty(result), title=f"[bold blue]{title}[/bold blue]", border_style="blue"))


def print_tasks(registry: TaskRegistry, console: Console | None = None) -> None:
    console = console or Console()

    table = Table(title=f"Mere {__version__} - Registered Tasks", border_style="dim")
    table.add_column("Label", style="cyan")
    table.add_column("Arity", justify="right")
    table.add_column("Memoized", style="green")
    table.add_column("Function", style="dim")

    for label, task in sorted(registry.all().items()):
        table.add_row(
            label,
            str(task.arity),
            "yes" if task.memoized else "no",
            getattr(task.func, "__qualname__", repr(task.func)),
        )

    table.caption = f"policy: {registry.policy.mode.name}"
    console.print(table)


__all__ = [
    "print_result",
    "print_tasks",
    "run_labels",
]
