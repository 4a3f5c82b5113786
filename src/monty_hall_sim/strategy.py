"""Contestant strategies and the final-pick decision."""

from enum import Enum
from typing import Union

from .doors import DOORS, validate_door
from .errors import InvalidArgumentError, InvalidStateError


class Strategy(Enum):
    """What the contestant does once the host has opened a goat door."""
    STAY = "stay"
    SWITCH = "switch"

    @classmethod
    def parse(cls, value: Union["Strategy", str]) -> "Strategy":
        """Accept a member or its name/value in any case ("stay", "SWITCH")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        valid = ", ".join(s.value for s in cls)
        raise InvalidArgumentError(f"Unknown strategy {value!r}. Valid strategies: {valid}")


def change_door(strategy: Union[Strategy, str], opened_door: int, initial_pick: int) -> int:
    """Resolve the contestant's final pick.

    Args:
        strategy: STAY keeps the initial pick, SWITCH takes the other closed door
        opened_door: Door the host opened
        initial_pick: Contestant's first pick

    Returns:
        Final pick in {1, 2, 3}

    Raises:
        OutOfRangeError: If either door is not 1, 2 or 3
        InvalidStateError: If the host opened the contestant's own door
        InvalidArgumentError: If ``strategy`` is not a known strategy
    """
    strategy = Strategy.parse(strategy)
    opened_door = validate_door(opened_door, "opened_door")
    initial_pick = validate_door(initial_pick, "initial_pick")
    if opened_door == initial_pick:
        raise InvalidStateError(
            f"Host cannot open the contestant's pick (door {initial_pick})"
        )

    if strategy is Strategy.STAY:
        return initial_pick
    if strategy is Strategy.SWITCH:
        (remaining,) = [d for d in DOORS if d not in (opened_door, initial_pick)]
        return remaining
    raise InvalidArgumentError(f"Unhandled strategy: {strategy}")
