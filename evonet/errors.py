"""Exception taxonomy for configuration and evaluation failures."""

from __future__ import annotations


class EvonetError(ValueError):
    """Base class for every error raised by the evolution engine."""


class InvalidTopologyError(EvonetError):
    """Layer shape is empty or contains a non-positive layer size."""


class InvalidPopulationSizeError(EvonetError):
    """Population size is not a positive even integer."""


class InvalidPercentageError(EvonetError):
    """A generation percentage exceeds 1, is negative, or the total exceeds 1."""


class InvalidInputError(EvonetError):
    """Number of inputs does not match the size of the input layer."""


class LengthMismatchError(EvonetError):
    """Flattened vector length does not match the network topology."""


class EmptyElitePoolError(EvonetError):
    """Mutation or breeding was requested without any kept networks."""


__all__ = [
    "EmptyElitePoolError",
    "EvonetError",
    "InvalidInputError",
    "InvalidPercentageError",
    "InvalidPopulationSizeError",
    "InvalidTopologyError",
    "LengthMismatchError",
]
