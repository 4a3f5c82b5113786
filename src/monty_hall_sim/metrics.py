"""Win-rate summaries and the strategy/outcome proportion table."""

import math
from statistics import NormalDist
from typing import Dict

import numpy as np
import pandas as pd

from .errors import InvalidArgumentError
from .judge import Outcome
from .simulation import SimulationBatch
from .strategy import Strategy

THEORETICAL_WIN_RATES: Dict[Strategy, float] = {
    Strategy.STAY: 1 / 3,
    Strategy.SWITCH: 2 / 3,
}


def summarize_batch(batch: SimulationBatch, confidence: float = 0.95) -> Dict[str, Dict[str, float]]:
    """Compute win-rate statistics for every strategy in a batch.

    Args:
        batch: Trials to summarize (may mix strategies)
        confidence: Coverage of the normal-approximation interval, in (0, 1)

    Returns:
        Dictionary keyed by strategy value ("stay", "switch") with:
        - n_trials, wins: counts
        - win_rate: fraction of trials won
        - std: sample standard deviation of the 0/1 outcomes (ddof=1)
        - stderr: standard error of the win rate
        - ci_low, ci_high: win_rate -/+ z * stderr, clipped to [0, 1]
        - expected: the analytical win rate for the strategy
    """
    if not 0 < confidence < 1:
        raise InvalidArgumentError(f"confidence must be in (0, 1), got {confidence}")
    z_critical = NormalDist().inv_cdf(0.5 + confidence / 2)

    summary = {}
    for strategy in batch.strategies:
        wins = batch.for_strategy(strategy).wins
        n = len(wins)
        win_rate = float(np.mean(wins))
        std = float(np.std(wins, ddof=1)) if n > 1 else 0.0
        stderr = std / math.sqrt(n)
        summary[strategy.value] = {
            "n_trials": n,
            "wins": int(wins.sum()),
            "win_rate": win_rate,
            "std": std,
            "stderr": stderr,
            "ci_low": max(0.0, win_rate - z_critical * stderr),
            "ci_high": min(1.0, win_rate + z_critical * stderr),
            "expected": THEORETICAL_WIN_RATES[strategy],
        }
    return summary


def proportion_table(frame: pd.DataFrame, decimals: int = 2) -> pd.DataFrame:
    """Row proportions of outcome by strategy.

    Args:
        frame: Any frame with ``strategy`` and ``outcome`` columns, such as
            ``SimulationBatch.to_frame()`` or ``play_n_games()``
        decimals: Rounding applied to the proportions

    Returns:
        DataFrame indexed by strategy with one column per outcome
    """
    missing = {"strategy", "outcome"} - set(frame.columns)
    if missing:
        raise InvalidArgumentError(f"frame is missing columns: {sorted(missing)}")

    table = pd.crosstab(frame["strategy"], frame["outcome"], normalize="index")
    table = table.reindex(columns=[o.value for o in (Outcome.LOSE, Outcome.WIN)], fill_value=0.0)
    table.columns.name = "outcome"
    return table.round(decimals)
