from abc import ABC, abstractmethod
from enum import Enum

from loguru import logger
import numpy as np


class SelectionMode(Enum):
    """Selection modes for parent choosing."""

    RANDOM = "random"
    FITNESS_PROPORTIONAL = "fitness_proportional"
    TOURNAMENT = "tournament"


class ParentSelector(ABC):
    """Abstract base class for picking parent indices from an evaluated population."""

    @abstractmethod
    def select(
        self, fitness: np.ndarray, size: int, rng: np.random.Generator
    ) -> np.ndarray:
        """Draw parent indices.

        Args:
            fitness: Fitness values aligned by index with the population
            size: Number of independent draws
            rng: Random source used for every draw

        Returns:
            Integer array of length ``size`` with indices into ``fitness``
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RandomParentSelector(ParentSelector):
    """Uniform selection, ignores fitness."""

    def select(
        self, fitness: np.ndarray, size: int, rng: np.random.Generator
    ) -> np.ndarray:
        if len(fitness) == 0:
            raise ValueError("Cannot select parents from an empty population")
        return rng.integers(0, len(fitness), size=size)


class FitnessProportionalSelector(ParentSelector):
    """Roulette-wheel selection over fitness values.

    Negative and NaN fitness weigh zero. If every weight is zero, or all
    weights are equal, the draw is uniform. If any agent has ``+inf``
    fitness, the draw is uniform over those agents only.
    """

    def probabilities(self, fitness: np.ndarray) -> np.ndarray:
        fitness = np.asarray(fitness, dtype=float)
        n = len(fitness)
        if n == 0:
            raise ValueError("Cannot select parents from an empty population")

        infinite = np.isposinf(fitness)
        if infinite.any():
            weights = infinite.astype(float)
        else:
            weights = np.where(np.isnan(fitness), 0.0, np.clip(fitness, 0.0, None))

        peak = weights.max()
        if peak > 0.0:
            # keeps the sum finite for fitness near float max
            weights = weights / peak
        total = weights.sum()
        if total <= 0.0 or np.all(weights == weights[0]):
            logger.debug(
                "[FitnessProportionalSelector] Degenerate weights over {} agents, selecting uniformly",
                n,
            )
            return np.full(n, 1.0 / n)
        return weights / total

    def select(
        self, fitness: np.ndarray, size: int, rng: np.random.Generator
    ) -> np.ndarray:
        probs = self.probabilities(fitness)
        return rng.choice(len(probs), size=size, p=probs)


class TournamentSelector(ParentSelector):
    """Picks the fittest of ``tournament_size`` uniformly sampled agents."""

    def __init__(self, tournament_size: int = 3):
        if tournament_size < 1:
            raise ValueError(
                f"tournament_size must be at least 1, got {tournament_size}"
            )
        self.tournament_size = tournament_size

    def select(
        self, fitness: np.ndarray, size: int, rng: np.random.Generator
    ) -> np.ndarray:
        fitness = np.asarray(fitness, dtype=float)
        if len(fitness) == 0:
            raise ValueError("Cannot select parents from an empty population")
        contenders = rng.integers(0, len(fitness), size=(size, self.tournament_size))
        # NaN loses every comparison
        scores = np.where(np.isnan(fitness), -np.inf, fitness)[contenders]
        winners = np.argmax(scores, axis=1)
        return contenders[np.arange(size), winners]

    def __repr__(self) -> str:
        return f"TournamentSelector(tournament_size={self.tournament_size})"


def build_parent_selector(mode: SelectionMode | str, **kwargs) -> ParentSelector:
    """Create a selector from its mode name (used by config files)."""
    mode = SelectionMode(mode)
    if mode is SelectionMode.RANDOM:
        return RandomParentSelector()
    if mode is SelectionMode.TOURNAMENT:
        return TournamentSelector(**kwargs)
    return FitnessProportionalSelector()
