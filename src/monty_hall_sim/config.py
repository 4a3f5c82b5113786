"""Configuration handling for Monty Hall SimLab."""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

try:
    import yaml
    YAML_AVAILABLE = True
except ImportError:
    YAML_AVAILABLE = False

from .errors import InvalidArgumentError
from .strategy import Strategy

N_JOBS_ENV_VAR = "MONTY_HALL_SIM_N_JOBS"


@dataclass
class SimulationConfig:
    """Configuration for Monty Hall batch runs.

    Attributes:
        n_trials: Number of trials per strategy
        n_jobs: Number of worker processes. Unset means $MONTY_HALL_SIM_N_JOBS, else 1.
            Set to -1 to use all CPUs.
        base_seed: Base random seed for reproducible results (optional)
        show_progress: Whether to show a progress bar (auto-disabled when n_jobs > 1)
        strategies: Strategies to simulate, as Strategy members or their names
    """
    n_trials: int = 10000
    n_jobs: Optional[int] = None
    base_seed: Optional[int] = None
    show_progress: bool = False
    strategies: List[Strategy] = field(
        default_factory=lambda: [Strategy.STAY, Strategy.SWITCH]
    )

    def __post_init__(self):
        """Validate values and apply environment overrides."""
        if isinstance(self.n_trials, bool) or not isinstance(self.n_trials, (int, np.integer)) or self.n_trials <= 0:
            raise InvalidArgumentError(f"n_trials must be a positive integer, got {self.n_trials!r}")
        self.n_trials = int(self.n_trials)

        if self.base_seed is not None and (
            isinstance(self.base_seed, bool) or not isinstance(self.base_seed, int) or self.base_seed < 0
        ):
            raise InvalidArgumentError(f"base_seed must be a non-negative integer, got {self.base_seed!r}")

        if not self.strategies:
            raise InvalidArgumentError("At least one strategy must be configured")
        strategies = [Strategy.parse(s) for s in self.strategies]
        duplicates = sorted({s.value for s in strategies if strategies.count(s) > 1})
        if duplicates:
            raise InvalidArgumentError(f"Strategies listed more than once: {duplicates}")
        self.strategies = strategies

        # Environment only fills in n_jobs when it was not set explicitly
        if self.n_jobs is None:
            self.n_jobs = 1
            env_n_jobs = os.environ.get(N_JOBS_ENV_VAR)
            if env_n_jobs is not None:
                try:
                    self.n_jobs = int(env_n_jobs)
                except ValueError:
                    # Invalid environment variable, keep default
                    pass

        if isinstance(self.n_jobs, bool) or not isinstance(self.n_jobs, (int, np.integer)):
            raise InvalidArgumentError(f"n_jobs must be an integer, got {self.n_jobs!r}")

        self.n_jobs = int(self.n_jobs)
        if self.n_jobs == -1:
            self.n_jobs = os.cpu_count() or 1

        max_cpus = os.cpu_count() or 1
        self.n_jobs = max(1, min(self.n_jobs, max_cpus))

        # Progress bars interleave badly across worker processes
        if self.n_jobs != 1:
            self.show_progress = False

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "SimulationConfig":
        """Load configuration from a TOML or YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            SimulationConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            InvalidArgumentError: If unsupported file format or invalid configuration
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix.lower() == ".toml":
            with open(config_path, "rb") as f:
                config_data = tomllib.load(f)
        elif config_path.suffix.lower() in [".yaml", ".yml"]:
            if not YAML_AVAILABLE:
                raise InvalidArgumentError(
                    "YAML support not available. Install with: pip install monty-hall-simlab[yaml]"
                )
            with open(config_path, "r") as f:
                config_data = yaml.safe_load(f)
            if config_data is None:
                config_data = {}
        else:
            raise InvalidArgumentError(
                f"Unsupported configuration file format: {config_path.suffix}. "
                "Supported formats: .toml, .yaml, .yml"
            )

        if not isinstance(config_data, dict):
            raise InvalidArgumentError(
                f"Configuration in {config_path} must be a mapping, got {type(config_data).__name__}"
            )

        # Settings may live at the top level or under a [simulation] table
        simulation_section = config_data.pop("simulation", None) or {}
        if not isinstance(simulation_section, dict):
            raise InvalidArgumentError(
                f"[simulation] section in {config_path} must be a mapping, "
                f"got {type(simulation_section).__name__}"
            )
        config_data.update(simulation_section)

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "SimulationConfig":
        """Create configuration from dictionary.

        Raises:
            InvalidArgumentError: If the dictionary contains unknown keys
        """
        known = {"n_trials", "n_jobs", "base_seed", "show_progress", "strategies"}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            raise InvalidArgumentError(f"Unknown configuration keys: {unknown}")
        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a plain dictionary."""
        return {
            "n_trials": self.n_trials,
            "n_jobs": self.n_jobs,
            "base_seed": self.base_seed,
            "show_progress": self.show_progress,
            "strategies": [s.value for s in self.strategies],
        }
