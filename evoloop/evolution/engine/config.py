from __future__ import annotations

from typing import Callable, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from evoloop.evolution.selectors import FitnessProportionalSelector, ParentSelector

AgentT = TypeVar("AgentT")


class GeneticConfig(BaseModel, Generic[AgentT]):
    """Configuration for a GeneticAlgorithm run.

    The four operator callables are treated as black boxes: the engine never
    retries them or inspects what they return. They may be called from
    several engines at once, in which case they must be thread-safe.
    """

    population: int = Field(
        default=100, ge=1, description="Number of agents per generation"
    )
    max_generation: int = Field(
        default=1000,
        ge=0,
        description="Number of generation transitions performed by a run",
    )
    pc: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Probability of crossover per slot"
    )
    pm: float = Field(
        default=0.1, ge=0.0, le=1.0, description="Probability of mutation per slot"
    )
    get_random_agent: Callable[[], AgentT] = Field(
        description="Produces one agent for generation 0"
    )
    f_fitness: Callable[[AgentT], float] = Field(
        description="Evaluates an agent (this algorithm maximises it)"
    )
    f_mutate: Callable[[AgentT], AgentT] = Field(
        description="Returns a mutated version of an agent"
    )
    f_offspring: Callable[[AgentT, AgentT], AgentT] = Field(
        description="Crosses two agents over into an offspring"
    )
    elitism: int = Field(
        default=0,
        ge=0,
        description="Top agents copied unchanged into the next generation (0 = off)",
    )
    parent_selector: ParentSelector = Field(
        default_factory=FitnessProportionalSelector
    )
    seed: int | None = Field(
        default=None,
        description="Seed for the engine random source when none is injected",
    )
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @model_validator(mode="after")
    def validate_elitism(self):
        if self.elitism > self.population:
            raise ValueError(
                f"elitism ({self.elitism}) cannot exceed population ({self.population})"
            )
        return self
