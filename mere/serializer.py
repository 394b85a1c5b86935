"""Canonical encoding of argument lists, used as memoization keys."""

import json
import logging
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Sequence, Set

_logger = logging.getLogger(__name__)


def _type_name(obj: Any) -> str:
    return f"{type(obj).__module__}.{type(obj).__qualname__}"


class CanonicalSerializer:
    """JSON-based canonical encoder for effective argument lists.

    Two argument lists produce the same string only if they are structurally
    equal and built from the same container types. Every container and every
    non-JSON value is wrapped in a type tag before ``json.dumps`` runs, so a
    tuple never matches a list, an int dict key never matches a str key, and
    a user dict never looks like one of the tags. Besides plain JSON scalars
    the encoder understands lists, tuples, dicts, sets, datetimes, enums,
    dataclass instances and any object exposing a ``__canonical__()`` method
    that returns encodable data.

    Values it cannot encode deterministically (arbitrary objects, callables,
    circular structures) are rejected instead of being encoded by identity
    or ``repr``. Memoized tasks skip the cache for such argument lists.

    Example:
        class Point:
            def __init__(self, x, y):
                self.x, self.y = x, y

            def __canonical__(self):
                return [self.x, self.y]
    """

    def encode(self, values: Sequence[Any]) -> str:
        """Encode an argument list to its canonical string.

        Args:
            values: The effective argument list.

        Returns:
            The canonical JSON string.

        Raises:
            TypeError: If a value has no canonical encoding.
            ValueError: If the values contain a circular reference.
        """
        return self._dumps([self._tag(value, set()) for value in values])

    def key(self, values: Sequence[Any]) -> Optional[str]:
        """Return the canonical key of ``values``, or None if they cannot be encoded."""
        try:
            return self.encode(values)
        except (TypeError, ValueError) as error:
            _logger.debug(f"Arguments have no canonical encoding: {error}")
            return None

    @staticmethod
    def _dumps(data: Any) -> str:
        return json.dumps(data, separators=(",", ":"), allow_nan=True)

    def _tag(self, obj: Any, active: Set[int]) -> Any:
        """Convert ``obj`` to JSON data where every non-scalar carries a type tag."""
        if obj is None or isinstance(obj, bool):
            return obj
        if hasattr(obj, "__canonical__"):
            return {"__canonical__": _type_name(obj), "value": self._nested(obj, obj.__canonical__(), active)}
        if isinstance(obj, Enum):
            return {"__enum__": f"{_type_name(obj)}.{obj.name}"}
        if type(obj) in (int, float, str):
            return obj
        if isinstance(obj, datetime):
            return {"__datetime__": obj.isoformat()}
        if isinstance(obj, date):
            return {"__date__": obj.isoformat()}

        if id(obj) in active:
            raise ValueError("Circular reference detected")
        active.add(id(obj))
        try:
            if type(obj) is list:
                return {"__list__": [self._tag(item, active) for item in obj]}
            if type(obj) is tuple:
                return {"__tuple__": [self._tag(item, active) for item in obj]}
            if type(obj) is dict:
                items = [
                    [self._dumps(self._tag(key, active)), self._tag(value, active)]
                    for key, value in obj.items()
                ]
                return {"__dict__": sorted(items, key=lambda item: item[0])}
            if type(obj) in (set, frozenset):
                members = sorted(self._dumps(self._tag(item, active)) for item in obj)
                return {f"__{type(obj).__name__}__": members}
            if is_dataclass(obj) and not isinstance(obj, type):
                return {
                    "__dataclass__": _type_name(obj),
                    "fields": [[f.name, self._tag(getattr(obj, f.name), active)] for f in fields(obj)],
                }
        finally:
            active.discard(id(obj))

        raise TypeError(f"Object of type {type(obj).__name__} has no canonical encoding")

    def _nested(self, owner: Any, value: Any, active: Set[int]) -> Any:
        if id(owner) in active:
            raise ValueError("Circular reference detected")
        active.add(id(owner))
        try:
            return self._tag(value, active)
        finally:
            active.discard(id(owner))


__all__ = ["CanonicalSerializer"]
