"""
Exceptions raised by the reactor simulator.

Both kinds are local and synchronous. They derive from the matching
builtin so that callers catching ``ValueError`` or ``RuntimeError``
keep working.
"""


class ReactorError(Exception):
    """Base class for all reactor simulator errors."""


class InvalidArgumentError(ReactorError, ValueError):
    """A value was supplied outside its declared domain."""


class ControlRodNotFoundError(InvalidArgumentError, KeyError):
    """No control rod with the requested id exists."""

    def __init__(self, rod_id: str):
        self.rod_id = rod_id
        super().__init__(f"Control rod not found: {rod_id}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InvalidStateError(ReactorError, RuntimeError):
    """The operation is not legal in the current status."""
