#!/usr/bin/env python3
"""Quickstart example for Monty Hall SimLab.

Plays a single game step by step, then compares both strategies over a
seeded batch. Also serves as a smoke test.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np

from monty_hall_sim import (
    MontyHallSimulator,
    SimulationConfig,
    Strategy,
    change_door,
    create_game,
    determine_winner,
    open_goat_door,
    proportion_table,
    select_door,
    summarize_batch,
)


def main() -> None:
    """Walk through one game and one batch run."""
    print("Monty Hall SimLab Quickstart Example")
    print("=" * 40)

    rng = np.random.default_rng(42)
    game = create_game(rng)
    initial_pick = select_door(rng)
    opened_door = open_goat_door(game, initial_pick, rng)

    print(f"Doors: {game}")
    print(f"Contestant picks door {initial_pick}, host opens door {opened_door}")
    for strategy in Strategy:
        final_pick = change_door(strategy, opened_door, initial_pick)
        outcome = determine_winner(final_pick, game)
        print(f"  {strategy.value:<6} -> door {final_pick}: {outcome.value}")
    print()

    config = SimulationConfig(n_trials=2000, base_seed=42)
    batch = MontyHallSimulator(config).run_all()

    print(f"{config.n_trials} trials per strategy, seed {config.base_seed}")
    print(proportion_table(batch.to_frame()).to_string())
    print()

    summary = summarize_batch(batch)
    for strategy, stats in summary.items():
        print(
            f"{strategy:<6} | win rate {stats['win_rate']:.3f} | "
            f"95% CI [{stats['ci_low']:.3f}, {stats['ci_high']:.3f}] | "
            f"expected {stats['expected']:.3f}"
        )

    assert summary["switch"]["win_rate"] > summary["stay"]["win_rate"]
    print()
    print("✓ Switching beats staying")


if __name__ == "__main__":
    main()
