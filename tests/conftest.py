import itertools

import pytest

from evoloop.evolution.engine import GeneticConfig


@pytest.fixture
def make_config():
    """Factory for small float-agent configs; keyword overrides win."""

    def _make(**overrides) -> GeneticConfig:
        counter = itertools.count()
        params = dict(
            population=10,
            max_generation=5,
            pc=0.5,
            pm=0.5,
            get_random_agent=lambda: float(next(counter)),
            f_fitness=lambda a: a,
            f_mutate=lambda a: a + 1.0,
            f_offspring=lambda a, b: (a + b) / 2.0,
            seed=0,
        )
        params.update(overrides)
        return GeneticConfig(**params)

    return _make
