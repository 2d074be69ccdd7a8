"""
NEAT Errors Module

Exceptions raised by the engine. All of them derive from NeatError, and
each one also derives from the builtin exception a caller would naturally
catch for that kind of failure.

Classes:
    NeatError:       Root of the hierarchy
    InvalidConfig:   Missing, unknown or ill-typed configuration value
    ShapeMismatch:   Feed-forward input length differs from the number of inputs
    CorruptSnapshot: JSON snapshot is missing fields or references unknown nodes
    EmptyPopulation: Reproduction with no species left and no reset allowed
    NumericalError:  A node produced NaN during inference
"""


class NeatError(Exception):
    pass


class InvalidConfig(NeatError, ValueError):
    pass


class ShapeMismatch(NeatError, ValueError):
    pass


class CorruptSnapshot(NeatError, ValueError):
    pass


class EmptyPopulation(NeatError, RuntimeError):
    pass


class NumericalError(NeatError, ArithmeticError):
    pass
