"""OneMax: maximise the number of ones in a fixed-length bit string."""

import numpy as np

LENGTH = 32

_rng = np.random.default_rng()


def reseed(seed: int | None) -> None:
    global _rng
    _rng = np.random.default_rng(seed)


def random_agent() -> tuple[int, ...]:
    return tuple(int(b) for b in _rng.integers(0, 2, size=LENGTH))


def fitness(bits: tuple[int, ...]) -> float:
    return float(sum(bits))


def mutate(bits: tuple[int, ...]) -> tuple[int, ...]:
    i = int(_rng.integers(0, len(bits)))
    return bits[:i] + (1 - bits[i],) + bits[i + 1 :]


def offspring(a: tuple[int, ...], b: tuple[int, ...]) -> tuple[int, ...]:
    # one-point crossover
    cut = int(_rng.integers(1, len(a)))
    return a[:cut] + b[cut:]
