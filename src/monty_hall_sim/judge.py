"""Win/lose judgement for a final pick."""

from enum import Enum
from typing import Sequence, Union

from .doors import DoorContent, Game, as_game, validate_door


class Outcome(Enum):
    """Result of one game for one strategy."""
    WIN = "WIN"
    LOSE = "LOSE"


def determine_winner(final_pick: int, game: Union[Game, Sequence]) -> Outcome:
    """WIN if the car is behind ``final_pick``, LOSE otherwise."""
    game = as_game(game)
    final_pick = validate_door(final_pick, "final_pick")
    if game.content_at(final_pick) is DoorContent.CAR:
        return Outcome.WIN
    return Outcome.LOSE
