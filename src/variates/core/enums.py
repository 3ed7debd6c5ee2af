from enum import Enum


class DistributionType(str, Enum):
    """Enumerate the supported types of probability distributions."""

    POISSON = "poisson"
    BERNOULLI = "bernoulli"
    GEOMETRIC = "geometric"
    FINITE = "finite"
