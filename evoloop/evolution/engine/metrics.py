from __future__ import annotations

from pydantic import BaseModel, Field


class GenerationStats(BaseModel):
    """Fitness summary of one generation."""

    generation: int
    best: float
    mean: float
    worst: float


class EngineMetrics(BaseModel):
    """Counters collected over a single run."""

    total_generations: int = Field(
        default=0, description="Total number of generation transitions run"
    )
    fitness_evaluations: int = Field(
        default=0, description="Total number of fitness calls made by the engine"
    )
    crossovers: int = Field(default=0, description="Slots produced by crossover")
    mutations: int = Field(default=0, description="Slots passed through mutation")
    copies: int = Field(default=0, description="Slots copied from a single parent")
    elites_carried: int = Field(
        default=0, description="Agents carried unchanged by elitism"
    )
    history: list[GenerationStats] = Field(default_factory=list)

    def record_generation(self, generation: int, fitness: list[float]) -> GenerationStats:
        """Append best/mean/worst of an evaluated generation to the history."""
        stats = GenerationStats(
            generation=generation,
            best=max(fitness),
            mean=sum(fitness) / len(fitness),
            worst=min(fitness),
        )
        self.history.append(stats)
        return stats

    def record_transition_metrics(
        self, crossovers: int, mutations: int, copies: int, elites: int
    ) -> None:
        """Record slot counts from one transition."""
        self.crossovers += crossovers
        self.mutations += mutations
        self.copies += copies
        self.elites_carried += elites
        self.total_generations += 1
