from __future__ import annotations

import copy
from typing import Callable, Generic, Iterator, Sequence, TypeVar

from loguru import logger
import numpy as np

from evoloop.evolution.engine.config import GeneticConfig
from evoloop.evolution.engine.metrics import EngineMetrics
from evoloop.exceptions import EmptyPopulationError

__all__ = ["GeneticAlgorithm", "get_best"]

AgentT = TypeVar("AgentT")


def get_best(population: Sequence[AgentT], f_fitness: Callable[[AgentT], float]) -> int:
    """Return the index of the fittest agent.

    Every agent is evaluated once. On ties the lowest index wins.

    Raises:
        EmptyPopulationError: if ``population`` is empty
    """
    if len(population) == 0:
        raise EmptyPopulationError("Cannot pick the best agent of an empty population")

    best_i = 0
    f_best = f_fitness(population[0])
    for i in range(1, len(population)):
        f_x = f_fitness(population[i])
        if f_x > f_best:
            best_i, f_best = i, f_x
    return best_i


class GeneticAlgorithm(Generic[AgentT]):
    """
    Generational genetic algorithm over caller-defined agents:
    - Generation 0 comes from ``get_random_agent``.
    - Each transition evaluates fitness once, selects parents with the
      configured selector, then per slot crosses over with probability ``pc``
      and mutates with probability ``pm``.
    - Exactly ``max_generation`` transitions per run, no early exit.

    The random source is a ``numpy.random.Generator``; pass one in (or set
    ``config.seed``) for reproducible selection and Bernoulli draws.
    Randomness inside the caller's operators is not covered.
    """

    def __init__(
        self,
        config: GeneticConfig[AgentT],
        rng: np.random.Generator | None = None,
    ):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.metrics = EngineMetrics()

        logger.info(
            "[GeneticAlgorithm] Init | population={}, max_generation={}, pc={}, pm={}, elitism={}, selector={}",
            config.population,
            config.max_generation,
            config.pc,
            config.pm,
            config.elitism,
            config.parent_selector,
        )

    def initial_population(self) -> list[AgentT]:
        """Build generation 0 with exactly ``population`` sequential generator calls."""
        return [self.config.get_random_agent() for _ in range(self.config.population)]

    def evaluate(self, population: Sequence[AgentT]) -> np.ndarray:
        """Call ``f_fitness`` once per agent; returns a float array aligned by index."""
        fitness = np.array(
            [float(self.config.f_fitness(agent)) for agent in population], dtype=float
        )
        self.metrics.fitness_evaluations += len(population)
        return fitness

    def step(self, population: Sequence[AgentT]) -> list[AgentT]:
        """Produce the next generation from ``population``.

        The input is left untouched; the result is a new list of the same
        length. Operator exceptions propagate unchanged.
        """
        n = len(population)
        if n == 0:
            raise EmptyPopulationError("Cannot evolve an empty population")

        cfg = self.config
        fitness = self.evaluate(population)
        stats = self.metrics.record_generation(
            self.metrics.total_generations, fitness.tolist()
        )

        next_population: list[AgentT] = []

        n_elites = min(cfg.elitism, n)
        if n_elites:
            # stable sort keeps first-occurrence order among equal fitness
            ranked = np.where(np.isnan(fitness), -np.inf, fitness)
            order = np.argsort(-ranked, kind="stable")
            for i in order[:n_elites]:
                next_population.append(copy.deepcopy(population[i]))

        slots = n - n_elites
        do_crossover = self.rng.random(slots) < cfg.pc
        do_mutate = self.rng.random(slots) < cfg.pm
        first = cfg.parent_selector.select(fitness, slots, self.rng)
        second = iter(
            cfg.parent_selector.select(fitness, int(do_crossover.sum()), self.rng)
        )

        for slot in range(slots):
            parent = population[first[slot]]
            if do_crossover[slot]:
                candidate = cfg.f_offspring(parent, population[next(second)])
            else:
                candidate = copy.deepcopy(parent)
            if do_mutate[slot]:
                candidate = cfg.f_mutate(candidate)
            next_population.append(candidate)

        crossovers = int(do_crossover.sum())
        mutations = int(do_mutate.sum())
        self.metrics.record_transition_metrics(
            crossovers=crossovers,
            mutations=mutations,
            copies=slots - crossovers,
            elites=n_elites,
        )
        logger.debug(
            "[GeneticAlgorithm] Generation {} | best={:.6g}, mean={:.6g}, worst={:.6g}, crossovers={}, mutations={}",
            stats.generation,
            stats.best,
            stats.mean,
            stats.worst,
            crossovers,
            mutations,
        )
        return next_population

    def evolve(self) -> Iterator[list[AgentT]]:
        """Yield generations 0..max_generation in order.

        Metrics are reset when iteration starts.
        """
        self.metrics = EngineMetrics()
        population = self.initial_population()
        yield population
        for _ in range(self.config.max_generation):
            population = self.step(population)
            yield population

    def run(self) -> list[AgentT]:
        """Run all ``max_generation`` transitions and return the final population."""
        logger.info("[GeneticAlgorithm] Start")
        population: list[AgentT] = []
        for population in self.evolve():
            pass
        logger.info(
            "[GeneticAlgorithm] Done | generations={}, fitness_evaluations={}, crossovers={}, mutations={}",
            self.metrics.total_generations,
            self.metrics.fitness_evaluations,
            self.metrics.crossovers,
            self.metrics.mutations,
        )
        return population

    def get_best(self, population: Sequence[AgentT]) -> int:
        """Index of the fittest agent of ``population`` (lowest index on ties)."""
        return get_best(population, self.config.f_fitness)

    def best_agent(self, population: Sequence[AgentT]) -> tuple[int, AgentT, float]:
        """Return ``(index, agent, fitness)`` of the fittest agent."""
        index = self.get_best(population)
        agent = population[index]
        return index, agent, float(self.config.f_fitness(agent))
