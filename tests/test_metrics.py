"""Tests for win-rate summaries and proportion tables."""

import math

import numpy as np
import pandas as pd
import pytest

from monty_hall_sim.doors import Game
from monty_hall_sim.errors import InvalidArgumentError
from monty_hall_sim.judge import Outcome
from monty_hall_sim.metrics import THEORETICAL_WIN_RATES, proportion_table, summarize_batch
from monty_hall_sim.simulation import SimulationBatch, Trial, play_n_games, simulate_n_games
from monty_hall_sim.strategy import Strategy

GAME = Game(("car", "goat", "goat"))


def make_trial(strategy: Strategy, won: bool) -> Trial:
    """Build a trial on [car, goat, goat] that wins or loses as requested."""
    if strategy is Strategy.STAY:
        initial_pick, opened_door, final_pick = (1, 2, 1) if won else (2, 3, 2)
    else:
        initial_pick, opened_door, final_pick = (2, 3, 1) if won else (1, 2, 3)
    return Trial(
        game=GAME,
        initial_pick=initial_pick,
        opened_door=opened_door,
        final_pick=final_pick,
        strategy=strategy,
        outcome=Outcome.WIN if won else Outcome.LOSE,
    )


def test_summarize_batch_basic():
    batch = SimulationBatch([make_trial(Strategy.STAY, w) for w in (True, False, False, True)])
    summary = summarize_batch(batch)

    assert set(summary) == {"stay"}
    stats = summary["stay"]
    assert stats["n_trials"] == 4
    assert stats["wins"] == 2
    assert stats["win_rate"] == 0.5
    assert stats["std"] == pytest.approx(np.std([1, 0, 0, 1], ddof=1))
    assert stats["stderr"] == pytest.approx(stats["std"] / 2)
    # 0.5 +/- 1.96 * 0.289 runs past both ends of [0, 1]
    assert stats["ci_low"] == 0.0
    assert stats["ci_high"] == 1.0
    assert stats["expected"] == pytest.approx(1 / 3)


def test_summarize_batch_mixed_strategies():
    trials = [make_trial(Strategy.SWITCH, True)] * 3 + [make_trial(Strategy.STAY, False)] * 3
    summary = summarize_batch(SimulationBatch(trials))

    assert list(summary) == ["switch", "stay"]
    assert summary["switch"]["win_rate"] == 1.0
    assert summary["switch"]["std"] == 0.0
    assert summary["stay"]["win_rate"] == 0.0


def test_summarize_single_trial():
    summary = summarize_batch(SimulationBatch([make_trial(Strategy.SWITCH, True)]))
    assert summary["switch"]["std"] == 0.0
    assert summary["switch"]["stderr"] == 0.0
    assert summary["switch"]["ci_low"] == summary["switch"]["ci_high"] == 1.0


def test_confidence_interval_width():
    batch = simulate_n_games(2000, Strategy.SWITCH, rng=np.random.default_rng(0))
    narrow = summarize_batch(batch, confidence=0.80)["switch"]
    wide = summarize_batch(batch, confidence=0.99)["switch"]

    assert wide["ci_low"] < narrow["ci_low"] < narrow["win_rate"]
    assert narrow["win_rate"] < narrow["ci_high"] < wide["ci_high"]
    half_width = narrow["ci_high"] - narrow["win_rate"]
    assert half_width == pytest.approx(1.2815515655 * narrow["stderr"])


@pytest.mark.parametrize("confidence", [0, 1, 1.5, -0.2])
def test_invalid_confidence(confidence):
    batch = SimulationBatch([make_trial(Strategy.STAY, True)])
    with pytest.raises(InvalidArgumentError):
        summarize_batch(batch, confidence=confidence)


def test_summarize_empty_batch():
    assert summarize_batch(SimulationBatch([])) == {}


def test_theoretical_rates():
    assert THEORETICAL_WIN_RATES[Strategy.STAY] + THEORETICAL_WIN_RATES[Strategy.SWITCH] == pytest.approx(1.0)


def test_proportion_table_rows():
    frame = pd.DataFrame({
        "strategy": ["stay"] * 3 + ["switch"] * 3,
        "outcome": ["WIN", "LOSE", "LOSE", "WIN", "WIN", "LOSE"],
    })
    table = proportion_table(frame)

    assert list(table.columns) == ["LOSE", "WIN"]
    assert list(table.index) == ["stay", "switch"]
    assert table.loc["stay", "WIN"] == 0.33
    assert table.loc["stay", "LOSE"] == 0.67
    assert table.loc["switch", "WIN"] == 0.67


def test_proportion_table_fills_missing_outcome():
    frame = pd.DataFrame({"strategy": ["switch", "switch"], "outcome": ["WIN", "WIN"]})
    table = proportion_table(frame)

    assert list(table.columns) == ["LOSE", "WIN"]
    assert table.loc["switch", "LOSE"] == 0.0
    assert table.loc["switch", "WIN"] == 1.0


def test_proportion_table_decimals():
    frame = pd.DataFrame({"strategy": ["stay"] * 3, "outcome": ["WIN", "LOSE", "LOSE"]})
    assert proportion_table(frame, decimals=3).loc["stay", "WIN"] == 0.333


def test_proportion_table_from_play_n_games():
    table = proportion_table(play_n_games(2000, rng=np.random.default_rng(42)))

    assert math.isclose(table.loc["switch", "WIN"], 2 / 3, abs_tol=0.05)
    assert math.isclose(table.loc["stay", "WIN"], 1 / 3, abs_tol=0.05)
    # Correlated games: one strategy's win is the other's loss
    assert table.loc["stay", "WIN"] == pytest.approx(table.loc["switch", "LOSE"])


def test_proportion_table_missing_columns():
    with pytest.raises(InvalidArgumentError, match="missing columns"):
        proportion_table(pd.DataFrame({"strategy": ["stay"]}))
