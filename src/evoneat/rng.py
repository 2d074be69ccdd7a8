"""
NEAT Random Number Module

Single source of randomness for the engine. Every mutation, selection and
crossover draw goes through the generator held here, so seeding it once
makes a complete run reproducible (given a deterministic evaluator).

The generator is only used from single-threaded phases of the evolution
loop; it is not meant to be shared with fitness evaluators.
"""

import string
from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")

_UID_CHARACTERS = string.ascii_lowercase + string.ascii_uppercase + string.digits

_generator: np.random.Generator = np.random.default_rng()


def seed(value: int | None = None) -> None:
    """
    Replace the engine generator with a freshly seeded one.

    Parameters:
        value: the seed; None draws fresh entropy from the OS
    """
    global _generator
    _generator = np.random.default_rng(value)


def randrange() -> float:
    """Uniform draw in [0, 1)."""
    return float(_generator.random())


def uniform(low: float, high: float) -> float:
    return float(_generator.uniform(low, high))


def normal(mean: float, stdev: float) -> float:
    return float(_generator.normal(mean, stdev))


def randint(n: int) -> int:
    """Uniform integer in [0, n)."""
    return int(_generator.integers(n))


def choice(sequence: Sequence[T]) -> T:
    return sequence[randint(len(sequence))]


def uid(size: int = 8) -> str:
    """Random alphanumeric tag, used to label genomes."""
    return ''.join(_UID_CHARACTERS[randint(len(_UID_CHARACTERS))] for _ in range(size))
