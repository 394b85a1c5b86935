"""Argument count checking policy."""

from enum import IntEnum
from typing import Union

from mere.exceptions import ArityError, ConfigurationError


class ArgCheck(IntEnum):
    NO_CHECK = 0
    NOT_MORE = 1
    NOT_LESS = 2
    MUST_EQUAL = 3


# mode -> (fewer_allowed, more_allowed)
_MODE_FLAGS = {
    ArgCheck.NO_CHECK: (True, True),
    ArgCheck.NOT_MORE: (True, False),
    ArgCheck.NOT_LESS: (False, True),
    ArgCheck.MUST_EQUAL: (False, False),
}


class ArgCheckPolicy:
    """How tasks react when called with a different number of arguments
    than they declare.

    The policy is stored as two independent flags and exposed as the
    four-valued ``ArgCheck`` mode. One policy object is shared by every
    task created through the same registry, so changing the mode affects
    all of them at once.

    Example:
        policy = ArgCheckPolicy()
        policy.mode = ArgCheck.MUST_EQUAL
        policy.ensure(1, 2)  # raises ArityError
    """

    def __init__(self, mode: Union[ArgCheck, int] = ArgCheck.NOT_MORE):
        self.fewer_allowed = True
        self.more_allowed = False
        self.mode = mode

    @property
    def mode(self) -> ArgCheck:
        """The checking mode derived from the two flags."""
        for mode, flags in _MODE_FLAGS.items():
            if flags == (self.fewer_allowed, self.more_allowed):
                return mode
        raise ConfigurationError(
            f"inconsistent flags: fewer_allowed={self.fewer_allowed}, more_allowed={self.more_allowed}"
        )

    @mode.setter
    def mode(self, value: Union[ArgCheck, int]) -> None:
        if isinstance(value, bool):
            raise ConfigurationError(f"invalid argument checking mode: {value!r} (use ArgCheck)")
        try:
            mode = ArgCheck(value)
        except ValueError:
            raise ConfigurationError(
                f"invalid argument checking mode: {value!r} (use ArgCheck)"
            ) from None
        self.fewer_allowed, self.more_allowed = _MODE_FLAGS[mode]

    def ensure(self, given: int, expected: int) -> None:
        """Raise ArityError if ``given`` arguments are not acceptable for ``expected``."""
        if not self.fewer_allowed and given < expected:
            raise ArityError(f"too few arguments: given {given}, expected {expected}")

        if not self.more_allowed and given > expected:
            raise ArityError(f"too many arguments: given {given}, expected {expected}")

    def __repr__(self) -> str:
        return f"ArgCheckPolicy(mode={self.mode.name})"


__all__ = [
    "ArgCheck",
    "ArgCheckPolicy",
]
