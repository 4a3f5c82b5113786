"""Command Line Interface for Monty Hall SimLab."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import SimulationConfig
from .metrics import proportion_table, summarize_batch
from .simulation import MontyHallSimulator


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration.

    Args:
        verbose: Enable verbose logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="monty-hall-sim",
        description="Monty Hall stay-vs-switch simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compare both strategies over 2000 seeded trials each
  monty-hall-sim --n-trials 2000 --seed 42

  # Only the switch strategy, spread over 4 worker processes
  monty-hall-sim --strategy switch --n-trials 100000 --n-jobs 4

  # Generate sample config
  monty-hall-sim --generate-config monty_hall.toml
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file (TOML or YAML)"
    )
    parser.add_argument(
        "--n-trials", "-n",
        type=int,
        help="Number of trials per strategy"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducibility"
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        help="Number of worker processes (-1 for all CPUs)"
    )
    parser.add_argument(
        "--strategy",
        dest="strategies",
        action="append",
        choices=["stay", "switch"],
        help="Strategy to simulate; repeat for several (default: both)"
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar (sequential runs only)"
    )

    parser.add_argument(
        "--generate-config",
        type=Path,
        help="Generate sample configuration file and exit"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def generate_sample_config(config_path: Path) -> None:
    """Write a sample configuration file to ``config_path``."""
    config_content = """# Monty Hall SimLab configuration

n_trials = 10000            # Trials per strategy
base_seed = 42              # Random seed for reproducibility
n_jobs = 1                  # Worker processes (or set MONTY_HALL_SIM_N_JOBS env var)
show_progress = false
strategies = ["stay", "switch"]
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(config_content)

    print(f"Sample configuration generated: {config_path}")


def build_config(args: argparse.Namespace) -> SimulationConfig:
    """Merge the config file (if any) with command line overrides."""
    if args.config:
        config_data = SimulationConfig.from_file(args.config).to_dict()
    else:
        config_data = {}

    if args.n_trials is not None:
        config_data["n_trials"] = args.n_trials
    if args.seed is not None:
        config_data["base_seed"] = args.seed
    if args.n_jobs is not None:
        config_data["n_jobs"] = args.n_jobs
    if args.strategies:
        config_data["strategies"] = args.strategies
    if args.progress:
        config_data["show_progress"] = True

    return SimulationConfig.from_dict(config_data)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        if args.generate_config:
            generate_sample_config(args.generate_config)
            return 0

        config = build_config(args)
        logger.info(f"Simulation configuration: {config}")

        batch = MontyHallSimulator(config).run_all()

        print("\nWin proportions by strategy:")
        print(proportion_table(batch.to_frame()).to_string())

        print("\nSummary:")
        for strategy, stats in summarize_batch(batch).items():
            print(
                f"  {strategy:<7} win rate {stats['win_rate']:.3f} "
                f"(95% CI {stats['ci_low']:.3f}-{stats['ci_high']:.3f}, "
                f"expected {stats['expected']:.3f}, n={stats['n_trials']})"
            )

        return 0

    except KeyboardInterrupt:
        logger.info("Simulation interrupted by user")
        return 1
    except Exception as e:
        logger.error(f"Simulation failed: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
