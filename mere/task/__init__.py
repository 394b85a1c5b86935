from .core import Task, TaskRef, get_sequence_task
from .handles import TaskHandle, TaskSequence
from .register import TaskRegistry
from .sequence import generate

__all__ = [
    "Task",
    "TaskRef",
    "TaskHandle",
    "TaskSequence",
    "TaskRegistry",
    "get_sequence_task",
    "generate",
]
