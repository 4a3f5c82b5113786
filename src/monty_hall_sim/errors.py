"""Exception hierarchy for Monty Hall SimLab."""


class MontyHallError(ValueError):
    """Base class for all validation failures raised by the simulator."""


class OutOfRangeError(MontyHallError):
    """A door index is not one of 1, 2 or 3."""


class InvalidArgumentError(MontyHallError):
    """An argument has the wrong type or value (trial counts, strategies, config)."""


class InvalidStateError(MontyHallError):
    """A precondition that earlier steps should have guaranteed does not hold."""
