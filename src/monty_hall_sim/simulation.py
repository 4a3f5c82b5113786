"""Trial composition, batch simulation and the seeded parallel runner."""

import logging
import multiprocessing as mp
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from tqdm import tqdm

from .config import SimulationConfig
from .doors import Game, ensure_rng, create_game, open_goat_door, select_door
from .errors import InvalidArgumentError
from .judge import Outcome, determine_winner
from .strategy import Strategy, change_door

logger = logging.getLogger(__name__)

_STRATEGY_ORDER = tuple(Strategy)


@dataclass(frozen=True)
class Trial:
    """One full game played under a single strategy."""
    game: Game
    initial_pick: int
    opened_door: int
    final_pick: int
    strategy: Strategy
    outcome: Outcome

    @property
    def won(self) -> bool:
        return self.outcome is Outcome.WIN

    def to_dict(self) -> Dict[str, object]:
        return {
            "strategy": self.strategy.value,
            "game": str(self.game),
            "car_door": self.game.car_door,
            "initial_pick": self.initial_pick,
            "opened_door": self.opened_door,
            "final_pick": self.final_pick,
            "outcome": self.outcome.value,
            "win": int(self.won),
        }


@dataclass(frozen=True)
class GameResult:
    """One game with both strategies judged against the same doors."""
    game: Game
    initial_pick: int
    opened_door: int
    results: Mapping[Strategy, Outcome]

    def __post_init__(self):
        object.__setattr__(self, "results", MappingProxyType(dict(self.results)))


@dataclass(frozen=True)
class SimulationBatch:
    """Ordered, read-only collection of trials with win-rate statistics."""
    trials: Tuple[Trial, ...]

    def __post_init__(self):
        object.__setattr__(self, "trials", tuple(self.trials))

    def __len__(self) -> int:
        return len(self.trials)

    def __iter__(self) -> Iterator[Trial]:
        return iter(self.trials)

    @property
    def n_trials(self) -> int:
        return len(self.trials)

    @property
    def wins(self) -> np.ndarray:
        """Per-trial outcomes as 1 (win) / 0 (lose)."""
        return np.fromiter((t.won for t in self.trials), dtype=np.int64, count=len(self.trials))

    @property
    def win_rate(self) -> float:
        """Fraction of trials won, across every strategy in the batch."""
        if not self.trials:
            return float("nan")
        return float(self.wins.mean())

    @property
    def strategies(self) -> Tuple[Strategy, ...]:
        """Strategies present in the batch, in order of first appearance."""
        return tuple(dict.fromkeys(t.strategy for t in self.trials))

    def for_strategy(self, strategy: Union[Strategy, str]) -> "SimulationBatch":
        strategy = Strategy.parse(strategy)
        return SimulationBatch(tuple(t for t in self.trials if t.strategy is strategy))

    def win_rates(self) -> Dict[Strategy, float]:
        return {s: self.for_strategy(s).win_rate for s in self.strategies}

    def to_frame(self) -> pd.DataFrame:
        """One row per trial, in trial order."""
        columns = [
            "strategy", "game", "car_door", "initial_pick",
            "opened_door", "final_pick", "outcome", "win",
        ]
        return pd.DataFrame([t.to_dict() for t in self.trials], columns=columns)

    @classmethod
    def concat(cls, batches: Iterable["SimulationBatch"]) -> "SimulationBatch":
        """Merge batches by concatenation, preserving order."""
        trials: List[Trial] = []
        for batch in batches:
            trials.extend(batch.trials)
        return cls(tuple(trials))


def _validate_n(n) -> int:
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n <= 0:
        raise InvalidArgumentError(f"n must be a positive integer, got {n!r}")
    return int(n)


def _finish_trial(game: Game, initial_pick: int, opened_door: int, strategy: Strategy) -> Trial:
    final_pick = change_door(strategy, opened_door, initial_pick)
    return Trial(
        game=game,
        initial_pick=initial_pick,
        opened_door=opened_door,
        final_pick=final_pick,
        strategy=strategy,
        outcome=determine_winner(final_pick, game),
    )


def play_trial(
    strategy: Union[Strategy, str],
    rng: Optional[np.random.Generator] = None,
) -> Trial:
    """Play one independent game under ``strategy``."""
    strategy = Strategy.parse(strategy)
    rng = ensure_rng(rng)
    game = create_game(rng)
    initial_pick = select_door(rng)
    opened_door = open_goat_door(game, initial_pick, rng)
    return _finish_trial(game, initial_pick, opened_door, strategy)


def play_game(rng: Optional[np.random.Generator] = None) -> GameResult:
    """Play one game and judge both strategies on the same doors.

    The stay and switch outcomes are correlated observations of a single
    game: exactly one of them wins.
    """
    rng = ensure_rng(rng)
    game = create_game(rng)
    initial_pick = select_door(rng)
    opened_door = open_goat_door(game, initial_pick, rng)
    results = {
        strategy: _finish_trial(game, initial_pick, opened_door, strategy).outcome
        for strategy in _STRATEGY_ORDER
    }
    return GameResult(game, initial_pick, opened_door, results)


def simulate_n_games(
    n: int,
    strategy: Union[Strategy, str],
    rng: Optional[np.random.Generator] = None,
) -> SimulationBatch:
    """Run ``n`` independent trials under one strategy.

    Args:
        n: Number of trials, a positive integer
        strategy: Strategy applied in every trial
        rng: Random generator; each trial takes fresh draws from it

    Returns:
        SimulationBatch with ``n`` trials in play order

    Raises:
        InvalidArgumentError: If ``n`` is not a positive integer or the
            strategy is unknown
    """
    n = _validate_n(n)
    strategy = Strategy.parse(strategy)
    rng = ensure_rng(rng)
    return SimulationBatch(tuple(play_trial(strategy, rng) for _ in range(n)))


def play_n_games(n: int = 100, rng: Optional[np.random.Generator] = None) -> pd.DataFrame:
    """Play ``n`` games, judging both strategies on each one.

    Returns:
        DataFrame with columns ``game_id``, ``strategy``, ``outcome``; two
        rows per game (stay then switch)
    """
    n = _validate_n(n)
    rng = ensure_rng(rng)
    rows = []
    for game_id in range(n):
        result = play_game(rng)
        for strategy, outcome in result.results.items():
            rows.append({"game_id": game_id, "strategy": strategy.value, "outcome": outcome.value})
    return pd.DataFrame(rows, columns=["game_id", "strategy", "outcome"])


def _run_trial_batch(
    trial_seeds: Sequence[int],
    strategy: Strategy,
) -> List[Trial]:
    """Play one trial per seed.

    This function must be at module level to be picklable for worker processes.
    """
    return [play_trial(strategy, np.random.default_rng(seed)) for seed in trial_seeds]


class MontyHallSimulator:
    """Seeded batch runner with optional process-parallel execution.

    Every trial gets its own generator spawned from ``config.base_seed``, so
    a run gives the same trials whatever ``n_jobs`` is.
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        """Initialize the simulator.

        Args:
            config: Run configuration; defaults to ``SimulationConfig()``
        """
        self.config = config if config is not None else SimulationConfig()

    def run(self, strategy: Union[Strategy, str]) -> SimulationBatch:
        """Run ``config.n_trials`` independent trials under one strategy."""
        strategy = Strategy.parse(strategy)
        start_time = time.time()
        logger.info(
            f"Simulating {self.config.n_trials} trials for strategy '{strategy.value}' "
            f"(n_jobs={self.config.n_jobs}, base_seed={self.config.base_seed})"
        )

        trial_seeds = self._generate_trial_seeds(strategy)
        if self.config.n_jobs == 1:
            trials = self._run_sequential(trial_seeds, strategy)
        else:
            trials = self._run_parallel(trial_seeds, strategy)

        batch = SimulationBatch(tuple(trials))
        logger.info(
            f"Strategy '{strategy.value}': win rate {batch.win_rate:.4f} "
            f"over {batch.n_trials} trials in {time.time() - start_time:.2f}s"
        )
        return batch

    def run_all(self) -> SimulationBatch:
        """Run every configured strategy and concatenate the batches."""
        return SimulationBatch.concat(self.run(s) for s in self.config.strategies)

    def _run_sequential(
        self,
        trial_seeds: List[int],
        strategy: Strategy,
    ) -> List[Trial]:
        iterator = trial_seeds
        if self.config.show_progress:
            iterator = tqdm(trial_seeds, desc=f"Simulating '{strategy.value}'")
        return _run_trial_batch(iterator, strategy)

    def _run_parallel(
        self,
        trial_seeds: List[int],
        strategy: Strategy,
    ) -> List[Trial]:
        # Contiguous chunks keep the merged result in trial order
        seed_batches = []
        start_idx = 0
        for batch_size in self._calculate_batch_sizes():
            if batch_size > 0:
                seed_batches.append(trial_seeds[start_idx:start_idx + batch_size])
                start_idx += batch_size
        logger.debug(f"Split {len(trial_seeds)} trials into {len(seed_batches)} worker batches")

        # Use spawn method on all platforms for consistency
        ctx = mp.get_context("spawn")
        batch_results: List[Optional[List[Trial]]] = [None] * len(seed_batches)

        with ProcessPoolExecutor(max_workers=len(seed_batches), mp_context=ctx) as executor:
            future_to_batch = {
                executor.submit(_run_trial_batch, seed_batch, strategy): i
                for i, seed_batch in enumerate(seed_batches)
            }
            for future in as_completed(future_to_batch):
                batch_results[future_to_batch[future]] = future.result()

        results: List[Trial] = []
        for batch_result in batch_results:
            results.extend(batch_result)
        return results

    def _generate_trial_seeds(self, strategy: Strategy) -> List[int]:
        """Generate one seed per trial; each strategy gets its own independent stream."""
        root = np.random.SeedSequence(self.config.base_seed)
        strategy_seq = root.spawn(len(_STRATEGY_ORDER))[_STRATEGY_ORDER.index(strategy)]
        return [
            int(seq.generate_state(1, dtype=np.uint64)[0])
            for seq in strategy_seq.spawn(self.config.n_trials)
        ]

    def _calculate_batch_sizes(self) -> List[int]:
        """Calculate batch sizes for workers to ensure near-equal distribution."""
        base_size = self.config.n_trials // self.config.n_jobs
        remainder = self.config.n_trials % self.config.n_jobs

        batch_sizes = [base_size] * self.config.n_jobs
        for i in range(remainder):
            batch_sizes[i] += 1
        return batch_sizes
