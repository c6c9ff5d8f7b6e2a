"""Maximise ``5 - x**2`` over real numbers; the optimum is x = 0."""

import numpy as np

LOW, HIGH = -5.0, 5.0
STEP = 0.01

_rng = np.random.default_rng()


def reseed(seed: int | None) -> None:
    global _rng
    _rng = np.random.default_rng(seed)


def random_agent() -> float:
    return float(_rng.uniform(LOW, HIGH))


def fitness(x: float) -> float:
    return 5.0 - x * x


def mutate(x: float) -> float:
    return x + float(_rng.uniform(-STEP, STEP))


def offspring(a: float, b: float) -> float:
    return (a + b) / 2.0
