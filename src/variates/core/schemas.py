import math
from typing import Union

from pydantic import Field, BaseModel, ConfigDict, model_validator

from src.variates.core.enums import DistributionType

PROBABILITY_SUM_TOLERANCE = 1e-9


class PoissonParams(BaseModel):
    """Represent parameters for a Poisson distribution.

    The rate is deliberately unconstrained: any value is forwarded to the
    generator and a non-positive rate only fails once sampling starts.
    """

    model_config = ConfigDict(frozen=True)

    distribution: DistributionType = DistributionType.POISSON
    rate: float = Field(..., description="Rate (lambda)")


class BernoulliParams(BaseModel):
    """Represent parameters for a Bernoulli distribution."""

    model_config = ConfigDict(frozen=True)

    distribution: DistributionType = DistributionType.BERNOULLI
    p: float = Field(..., ge=0, le=1, description="Success probability")


class GeometricParams(BaseModel):
    """Represent parameters for a geometric distribution."""

    model_config = ConfigDict(frozen=True)

    distribution: DistributionType = DistributionType.GEOMETRIC
    p: float = Field(..., ge=0, le=1, description="Success probability")


class FiniteParams(BaseModel):
    """Represent parameters for a finite discrete distribution.

    Attributes:
        distribution: Type identifier.
        values: Outcome values (at least one).
        probabilities: Probability of each outcome, same length as values.

    Examples:
        >>> params = FiniteParams(
        ...     values=[1, 2, 3],
        ...     probabilities=[0.3, 0.3, 0.4],
        ... )
    """

    model_config = ConfigDict(frozen=True)

    distribution: DistributionType = DistributionType.FINITE
    values: list[float] = Field(
        ..., min_length=1, description="Outcome values"
    )
    probabilities: list[float] = Field(
        ..., min_length=1, description="Outcome probabilities"
    )

    @model_validator(mode="after")
    def validate_probabilities(self):
        """Validate the probability vector against the outcome values."""
        if len(self.probabilities) != len(self.values):
            raise ValueError(
                f"Expected {len(self.values)} probabilities, "
                f"got {len(self.probabilities)}"
            )

        if not all(0 <= p <= 1 for p in self.probabilities):
            raise ValueError("Every probability must lie in [0, 1]")

        total = sum(self.probabilities)
        if not abs(total - 1) < PROBABILITY_SUM_TOLERANCE:
            raise ValueError(f"Probabilities must sum to 1, got {total!r}")

        return self

    @property
    def expected_value(self) -> float:
        """Probability-weighted mean of the outcome values."""
        return math.fsum(
            v * p for v, p in zip(self.values, self.probabilities)
        )


DistributionParams = Union[
    PoissonParams,
    BernoulliParams,
    GeometricParams,
    FiniteParams,
]


class MeanEstimate(BaseModel):
    """Hold the Monte Carlo estimate of a generator's mean."""

    sample_count: int
    mean: float
    variance: float
    std: float


class HarnessResult(BaseModel):
    """Represent one row of the smoke harness report."""

    label: str
    distribution: DistributionType
    nominal: float | None = Field(
        None, description="Parameter value, or expected value for finite sets"
    )
    theoretical_mean: float | None = None
    empirical_mean: float | None = None
    sample_count: int = 0
    rejected: bool = False
