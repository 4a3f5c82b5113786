"""Monty Hall SimLab - stay vs switch simulation of the Monty Hall problem."""

__version__ = "0.1.0"

from .config import SimulationConfig
from .doors import DOORS, DoorContent, Game, create_game, open_goat_door, select_door
from .errors import InvalidArgumentError, InvalidStateError, MontyHallError, OutOfRangeError
from .judge import Outcome, determine_winner
from .metrics import THEORETICAL_WIN_RATES, proportion_table, summarize_batch
from .simulation import (
    GameResult,
    MontyHallSimulator,
    SimulationBatch,
    Trial,
    play_game,
    play_n_games,
    play_trial,
    simulate_n_games,
)
from .strategy import Strategy, change_door

__all__ = [
    "DOORS",
    "DoorContent",
    "Game",
    "GameResult",
    "InvalidArgumentError",
    "InvalidStateError",
    "MontyHallError",
    "MontyHallSimulator",
    "Outcome",
    "OutOfRangeError",
    "SimulationBatch",
    "SimulationConfig",
    "Strategy",
    "THEORETICAL_WIN_RATES",
    "Trial",
    "change_door",
    "create_game",
    "determine_winner",
    "open_goat_door",
    "play_game",
    "play_n_games",
    "play_trial",
    "proportion_table",
    "select_door",
    "simulate_n_games",
    "summarize_batch",
]
