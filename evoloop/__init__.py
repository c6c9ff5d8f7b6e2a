"""evoloop – generational genetic algorithm over caller-defined agents."""

from evoloop.evolution.engine import (
    EngineMetrics,
    GenerationStats,
    GeneticAlgorithm,
    GeneticConfig,
    get_best,
)
from evoloop.evolution.selectors import (
    FitnessProportionalSelector,
    ParentSelector,
    RandomParentSelector,
    SelectionMode,
    TournamentSelector,
    build_parent_selector,
)
from evoloop.exceptions import EmptyPopulationError, EvoLoopError, EvolutionError

__all__ = [
    "GeneticAlgorithm",
    "GeneticConfig",
    "EngineMetrics",
    "GenerationStats",
    "get_best",
    "ParentSelector",
    "FitnessProportionalSelector",
    "RandomParentSelector",
    "TournamentSelector",
    "SelectionMode",
    "build_parent_selector",
    "EvoLoopError",
    "EvolutionError",
    "EmptyPopulationError",
]
