"""
Configuration for the Monte Carlo move scorer.

This module defines the simulation budget used by the machine player: how
many random rollouts it may run per decision and how much wall-clock time
it may spend on them.
"""
from dataclasses import dataclass, fields

from quarto_ai.core.constants import DEFAULT_SIMULATIONS, DEFAULT_TIME_LIMIT


@dataclass
class ScorerConfig:
    """
    Budget parameters for Monte Carlo scoring.

    The budget is split evenly across the candidate decisions at each choice
    point. Each candidate gets a slice of the rollouts and a slice of the
    time limit.
    """
    simulations: int = DEFAULT_SIMULATIONS
    """Total number of rollouts per decision"""

    time_limit: float = DEFAULT_TIME_LIMIT
    """Nominal wall-clock budget per decision, in seconds"""

    min_rollouts_per_slice: int = 1
    """Floor on the rollouts given to each candidate"""

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.simulations <= 0:
            raise ValueError("simulations must be positive")

        if self.time_limit <= 0:
            raise ValueError("time_limit must be positive")

        if self.min_rollouts_per_slice <= 0:
            raise ValueError("min_rollouts_per_slice must be positive")

    def rollouts_per_slice(self, slices: int) -> int:
        """
        Get the number of rollouts each candidate may run.

        Args:
            slices: Number of candidates sharing the budget

        Returns:
            Rollouts per candidate
        """
        return max(self.min_rollouts_per_slice, self.simulations // max(1, slices))

    def time_per_slice(self, slices: int) -> float:
        """Get the wall-clock budget of each candidate, in seconds."""
        return self.time_limit / max(1, slices)

    @classmethod
    def default(cls) -> 'ScorerConfig':
        """
        Get the default configuration.

        Returns:
            Default ScorerConfig object
        """
        return cls()

    @classmethod
    def fast(cls) -> 'ScorerConfig':
        """
        Get a configuration optimized for speed (fewer rollouts).

        Returns:
            Fast ScorerConfig object
        """
        return cls(simulations=1000, time_limit=0.25)

    @classmethod
    def strong(cls) -> 'ScorerConfig':
        """
        Get a configuration that trades latency for better estimates.

        Returns:
            Strong ScorerConfig object
        """
        return cls(simulations=50000, time_limit=5.0)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'ScorerConfig':
        """
        Create a configuration from a dictionary.

        Args:
            config_dict: Dictionary of configuration parameters

        Returns:
            ScorerConfig object
        """
        # Filter out any keys that aren't valid parameters
        names = {f.name for f in fields(cls)}
        valid_params = {k: v for k, v in config_dict.items() if k in names}
        return cls(**valid_params)

    def to_dict(self) -> dict:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary of configuration parameters
        """
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
        }

    def __str__(self) -> str:
        params = [f"{name}={value}" for name, value in self.to_dict().items()]
        return f"ScorerConfig({', '.join(params)})"
