"""Door set-up, the contestant's first pick and the host's reveal.

Doors are numbered 1, 2 and 3 everywhere in the public API. All random
draws go through an explicit ``numpy.random.Generator`` so runs can be
seeded and parallelised without touching global state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InvalidStateError, OutOfRangeError

DOORS: Tuple[int, ...] = (1, 2, 3)


class DoorContent(Enum):
    """What is hidden behind a door."""
    CAR = "car"
    GOAT = "goat"


_CONTENTS = (DoorContent.CAR, DoorContent.GOAT, DoorContent.GOAT)


def validate_door(door, name: str = "door") -> int:
    """Return ``door`` as a plain int, or raise if it is not 1, 2 or 3.

    Args:
        door: Candidate door index (Python or numpy integer)
        name: Argument name used in the error message

    Raises:
        OutOfRangeError: If ``door`` is not an integer in {1, 2, 3}
    """
    if isinstance(door, bool) or not isinstance(door, (int, np.integer)):
        raise OutOfRangeError(f"{name} must be an integer in {DOORS}, got {door!r}")
    if int(door) not in DOORS:
        raise OutOfRangeError(f"{name} must be one of {DOORS}, got {door}")
    return int(door)


@dataclass(frozen=True)
class Game:
    """Contents of the three doors, in door order."""
    contents: Tuple[DoorContent, DoorContent, DoorContent]

    def __post_init__(self):
        try:
            contents = tuple(DoorContent(c) for c in self.contents)
        except ValueError as e:
            raise InvalidStateError(f"Unknown door content in {self.contents!r}") from e
        if len(contents) != len(DOORS) or sorted(c.value for c in contents) != ["car", "goat", "goat"]:
            raise InvalidStateError(
                f"A game needs exactly one car and two goats, got {[c.value for c in contents]}"
            )
        object.__setattr__(self, "contents", contents)

    def content_at(self, door: int) -> DoorContent:
        """Content behind a 1-based door index."""
        return self.contents[validate_door(door) - 1]

    def __getitem__(self, door: int) -> DoorContent:
        return self.content_at(door)

    def __iter__(self):
        return iter(self.contents)

    def __len__(self) -> int:
        return len(self.contents)

    @property
    def car_door(self) -> int:
        return self.contents.index(DoorContent.CAR) + 1

    @property
    def goat_doors(self) -> Tuple[int, int]:
        return tuple(d for d in DOORS if self.contents[d - 1] is DoorContent.GOAT)

    def __str__(self) -> str:
        return "[" + ", ".join(c.value for c in self.contents) + "]"


def as_game(game) -> Game:
    """Return ``game`` as a Game, building one from a plain sequence of contents."""
    if isinstance(game, Game):
        return game
    if isinstance(game, (str, bytes)):
        raise InvalidStateError(f"A game is a sequence of three door contents, got {game!r}")
    try:
        return Game(tuple(game))
    except TypeError as e:
        raise InvalidStateError(f"A game is a sequence of three door contents, got {game!r}") from e


def ensure_rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    if rng is None:
        return np.random.default_rng()
    return rng


def create_game(rng: Optional[np.random.Generator] = None) -> Game:
    """Place one car and two goats behind the doors uniformly at random."""
    rng = ensure_rng(rng)
    order = rng.permutation(len(_CONTENTS))
    return Game(tuple(_CONTENTS[i] for i in order))


def select_door(rng: Optional[np.random.Generator] = None) -> int:
    """Contestant's initial, uninformed pick."""
    rng = ensure_rng(rng)
    return int(rng.integers(1, len(DOORS) + 1))


def open_goat_door(
    game: Union[Game, Sequence],
    initial_pick: int,
    rng: Optional[np.random.Generator] = None,
) -> int:
    """Choose the door the host opens after the contestant's first pick.

    If the contestant is holding the car, both other doors hide goats and the
    host opens one of them at random. Otherwise exactly one other door hides
    a goat and the host must open that one; no random draw is consumed.

    Args:
        game: The realized door contents, as a Game or a sequence like
            ["car", "goat", "goat"]
        initial_pick: Contestant's first pick (1-3)
        rng: Random generator used only when the pick holds the car

    Returns:
        The opened door, never ``initial_pick`` and always a goat

    Raises:
        OutOfRangeError: If ``initial_pick`` is not a valid door
        InvalidStateError: If ``game`` is not three valid door contents
    """
    game = as_game(game)
    initial_pick = validate_door(initial_pick, "initial_pick")

    if game.content_at(initial_pick) is DoorContent.CAR:
        candidates = [d for d in DOORS if d != initial_pick]
        rng = ensure_rng(rng)
        return candidates[int(rng.integers(len(candidates)))]

    # Contestant holds a goat: the host's hand is forced.
    car_door = game.car_door
    (opened,) = [d for d in DOORS if d != initial_pick and d != car_door]
    return opened
