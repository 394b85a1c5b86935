import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Tuple

import click

from mere.cli.runner import print_result, print_tasks, run_labels
from mere.config import ArgCheck
from mere.exceptions import MereError
from mere.task import TaskRegistry


def _load_app_module(module_path: str) -> Any:
    """Load an application module that defines tasks.

    Args:
        module_path: Either a Python module path (e.g., 'myapp.tasks')
                     or a file path (e.g., 'myapp/tasks.py').
    """
    # Add current directory to path if not present
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    if module_path.endswith(".py"):
        # File path - convert to module path
        module_path = module_path.removesuffix(".py").replace("/", ".").replace("\\", ".")
        if module_path.startswith("."):
            module_path = module_path[1:]

    return importlib.import_module(module_path)


def _load_registry(app: str) -> TaskRegistry:
    """Find the TaskRegistry referenced by 'module[:attribute]'."""
    module_path, _, attribute = app.partition(":")
    try:
        module = _load_app_module(module_path)
    except ImportError as e:
        raise click.ClickException(f"Failed to load app module '{module_path}': {e}") from None

    registry = getattr(module, attribute or "registry", None)
    if not isinstance(registry, TaskRegistry):
        raise click.ClickException(
            f"'{attribute or 'registry'}' in '{module_path}' is not a TaskRegistry"
        )
    return registry


def _parse_arg(raw: str) -> Any:
    """Parse a command line argument as JSON, keeping plain strings as they are."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Mere - Composable tasks for Python"""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@cli.command()
@click.option(
    "-A", "--app",
    required=True,
    help="Module holding the registry (e.g., 'myapp.tasks' or 'myapp.tasks:registry')"
)
@click.option(
    "-a", "--arg",
    "args",
    multiple=True,
    help="Argument passed to the first task, parsed as JSON when possible"
)
@click.option(
    "--arg-check",
    type=click.Choice([mode.name for mode in ArgCheck], case_sensitive=False),
    envvar="MERE_ARG_CHECK",
    default=None,
    help="Argument count checking mode"
)
@click.option(
    "--promise",
    "use_promise",
    is_flag=True,
    help="Run through promise() inside an event loop"
)
@click.argument("labels", nargs=-1, required=True)
def run(
    app: str,
    args: Tuple[str, ...],
    arg_check: Optional[str],
    use_promise: bool,
    labels: Tuple[str, ...],
) -> None:
    """Run a task, or a sequence of tasks, by label.

    Examples:

        # Run one task
        mere run -A myapp.tasks double -a 5

        # Run a sequence, each result feeding the next task
        mere run -A myapp.tasks inc square -a 3

        # Exact argument counts only
        mere run -A myapp.tasks --arg-check must_equal double -a 5
    """
    registry = _load_registry(app)
    if arg_check:
        registry.policy.mode = ArgCheck[arg_check.upper()]

    try:
        result = run_labels(registry, labels, [_parse_arg(arg) for arg in args], use_promise)
    except MereError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}") from None

    print_result(labels, result)


@cli.command(name="list")
@click.option(
    "-A", "--app",
    required=True,
    help="Module holding the registry (e.g., 'myapp.tasks' or 'myapp.tasks:registry')"
)
def list_tasks(app: str) -> None:
    """List the tasks bound in the registry."""
    print_tasks(_load_registry(app))


if __name__ == "__main__":
    cli()
