"""Random variate generators for discrete distributions.

This module provides the generator hierarchy, the registry that maps each
distribution type to its generator, and the factory that validates
construction requests before any generator is built.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import numpy as np
from pydantic import BaseModel, ValidationError
from scipy import stats as scipy_stats

from src.variates.core.enums import DistributionType
from src.variates.core.schemas import (
    BernoulliParams,
    DistributionParams,
    FiniteParams,
    GeometricParams,
    PoissonParams,
)

logger = logging.getLogger(__name__)


class RandomVariateGenerator(ABC):
    """Abstract base class for random variate generators.

    Every instance owns a private ``numpy.random.Generator``. Sampling is
    stateful: each call to :meth:`generate` advances that stream, so a
    single instance must not be shared between threads. Distinct instances
    are independent.

    Concrete generators trust their constructor arguments. Validation is
    the job of :class:`GeneratorFactory`.

    Attributes:
        params_model: Pydantic model describing the constructor parameters.
        param_fields: Names of the positional factory arguments, in order.
    """

    params_model: ClassVar[type[BaseModel]]
    param_fields: ClassVar[tuple[str, ...]]

    def __init__(self, rng: np.random.Generator | None = None):
        """Initialize the generator.

        Args:
            rng: Random number generator. A freshly seeded one is created
                when omitted.
        """
        self._rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    @abstractmethod
    def from_params(
        cls, params: Any, rng: np.random.Generator | None = None
    ) -> "RandomVariateGenerator":
        """Build a generator from a validated parameter model."""

    @abstractmethod
    def generate(self) -> float:
        """Draw the next variate, advancing the internal stream.

        Returns:
            A single sample from the configured distribution.
        """

    def generate_batch(self, size: int) -> list[float]:
        """Draw several variates in sequence.

        Args:
            size: Number of variates to draw.

        Returns:
            List of ``size`` samples.

        Raises:
            ValueError: If size is not positive.
        """
        if size <= 0:
            raise ValueError(f"Size must be positive, got {size}")
        return [self.generate() for _ in range(size)]

    @abstractmethod
    def get_mean(self) -> float:
        """Return the theoretical mean of the distribution."""

    @abstractmethod
    def get_variance(self) -> float:
        """Return the theoretical variance of the distribution."""

    @abstractmethod
    def get_params(self) -> dict:
        """Return the distribution parameters."""


class PoissonGenerator(RandomVariateGenerator):
    """Poisson distribution, counts with mean ``rate``.

    The rate is never range-checked. A negative or NaN rate makes numpy
    raise ``ValueError`` on the first draw; keeping it positive is the
    caller's responsibility.
    """

    params_model = PoissonParams
    param_fields = ("rate",)

    def __init__(self, rate: float, rng: np.random.Generator | None = None):
        super().__init__(rng)
        self.rate = rate

    @classmethod
    def from_params(cls, params: PoissonParams, rng=None) -> "PoissonGenerator":
        return cls(rate=params.rate, rng=rng)

    def generate(self) -> float:
        return float(self._rng.poisson(self.rate))

    def get_mean(self) -> float:
        return float(scipy_stats.poisson(self.rate).mean())

    def get_variance(self) -> float:
        return float(scipy_stats.poisson(self.rate).var())

    def get_params(self) -> dict:
        return {"rate": self.rate}

    def __repr__(self) -> str:
        return f"PoissonGenerator(rate={self.rate})"


class BernoulliGenerator(RandomVariateGenerator):
    """Bernoulli distribution: 1.0 with probability ``p``, otherwise 0.0."""

    params_model = BernoulliParams
    param_fields = ("p",)

    def __init__(self, p: float, rng: np.random.Generator | None = None):
        super().__init__(rng)
        self.p = p

    @classmethod
    def from_params(
        cls, params: BernoulliParams, rng=None
    ) -> "BernoulliGenerator":
        return cls(p=params.p, rng=rng)

    def generate(self) -> float:
        return 1.0 if self._rng.random() < self.p else 0.0

    def get_mean(self) -> float:
        return float(self.p)

    def get_variance(self) -> float:
        return self.p * (1 - self.p)

    def get_params(self) -> dict:
        return {"p": self.p}

    def __repr__(self) -> str:
        return f"BernoulliGenerator(p={self.p})"


class GeometricGenerator(RandomVariateGenerator):
    """Geometric distribution counting failures before the first success.

    The support is {0, 1, 2, ...} and the mean is (1 - p) / p. With
    ``p == 0`` a success never happens and every draw is ``inf``.
    """

    params_model = GeometricParams
    param_fields = ("p",)

    def __init__(self, p: float, rng: np.random.Generator | None = None):
        super().__init__(rng)
        self.p = p

    @classmethod
    def from_params(
        cls, params: GeometricParams, rng=None
    ) -> "GeometricGenerator":
        return cls(p=params.p, rng=rng)

    def generate(self) -> float:
        if self.p == 0:
            return float("inf")
        # numpy counts trials up to and including the success
        return float(self._rng.geometric(self.p) - 1)

    def get_mean(self) -> float:
        if self.p == 0:
            return float("inf")
        return (1 - self.p) / self.p

    def get_variance(self) -> float:
        if self.p == 0:
            return float("inf")
        return (1 - self.p) / self.p**2

    def get_params(self) -> dict:
        return {"p": self.p}

    def __repr__(self) -> str:
        return f"GeometricGenerator(p={self.p})"


class FiniteGenerator(RandomVariateGenerator):
    """Distribution over an explicit list of outcome values.

    A uniform draw ``u`` in [0, 1) is mapped to ``values[i]`` where
    ``cumulative[i - 1] < u <= cumulative[i]`` and ``cumulative[-1] = 0``.
    A draw that matches no interval (``u == 0``, or ``u`` above a table
    total that rounds just below 1) returns the last value.

    Attributes:
        values: Outcome values.
        probabilities: Outcome probabilities.
    """

    params_model = FiniteParams
    param_fields = ("values", "probabilities")

    def __init__(
        self,
        values: list[float],
        probabilities: list[float],
        rng: np.random.Generator | None = None,
    ):
        super().__init__(rng)
        self.values = list(values)
        self.probabilities = list(probabilities)

        cumulative = np.cumsum(np.asarray(self.probabilities, dtype=float))
        cumulative.flags.writeable = False
        self._cumulative = cumulative

    @classmethod
    def from_params(cls, params: FiniteParams, rng=None) -> "FiniteGenerator":
        return cls(
            values=params.values,
            probabilities=params.probabilities,
            rng=rng,
        )

    @property
    def cumulative(self) -> np.ndarray:
        """Read-only prefix sums of the probabilities."""
        return self._cumulative

    def generate(self) -> float:
        return self._lookup(self._rng.random())

    def _lookup(self, u: float) -> float:
        """Map a uniform draw onto an outcome value."""
        index = int(np.searchsorted(self._cumulative, u, side="left"))
        if u > 0 and index < len(self.values):
            return float(self.values[index])
        return float(self.values[-1])

    def get_mean(self) -> float:
        return float(np.dot(self.values, self.probabilities))

    def get_variance(self) -> float:
        values = np.asarray(self.values, dtype=float)
        mean = self.get_mean()
        return float(np.dot((values - mean) ** 2, self.probabilities))

    def get_params(self) -> dict:
        return {
            "values": list(self.values),
            "probabilities": list(self.probabilities),
            "support_size": len(self.values),
        }

    def __repr__(self) -> str:
        return f"FiniteGenerator(support_size={len(self.values)})"


GENERATORS: dict[DistributionType, type[RandomVariateGenerator]] = {
    DistributionType.POISSON: PoissonGenerator,
    DistributionType.BERNOULLI: BernoulliGenerator,
    DistributionType.GEOMETRIC: GeometricGenerator,
    DistributionType.FINITE: FiniteGenerator,
}


def get_generator(
    params: DistributionParams, rng: np.random.Generator | None = None
) -> RandomVariateGenerator:
    """Create a random variate generator based on distribution parameters.

    Args:
        params: Validated distribution parameters.
        rng: Optional random number generator handed to the new instance.

    Returns:
        A generator for the specified distribution.

    Raises:
        NotImplementedError: If the distribution type is not supported.

    Example:
        >>> from src.variates.core.schemas import PoissonParams
        >>> generator = get_generator(PoissonParams(rate=2.0))
        >>> sample = generator.generate()
    """
    generator_cls = GENERATORS.get(params.distribution)
    if generator_cls is None:
        raise NotImplementedError(
            f"Distribution '{params.distribution}' is not supported."
        )
    return generator_cls.from_params(params, rng=rng)


def _coerce_argument(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.tolist()
    return value


class GeneratorFactory:
    """Single validated entry point for building generators.

    Invalid requests are an expected outcome, not a failure: every
    rejection returns ``None`` and the caller decides what to do with it.
    The factory is stateless and safe to share.

    Example:
        >>> factory = GeneratorFactory()
        >>> factory.create_generator("bernoulli", 0.3) is not None
        True
        >>> factory.create_generator("bernoulli", 1.5) is None
        True
        >>> gen = factory.create_generator("finite", [1, 2], [0.5, 0.5])
    """

    def create_generator(
        self,
        name: str | DistributionType,
        *params: Any,
        rng: np.random.Generator | None = None,
    ) -> RandomVariateGenerator | None:
        """Validate a request by name and build the matching generator.

        Scalar distributions take one argument (``poisson`` the rate,
        ``bernoulli`` and ``geometric`` the success probability).
        ``finite`` takes the outcome values and their probabilities.

        Args:
            name: Distribution name, matched exactly.
            *params: Positional distribution parameters.
            rng: Optional random number generator for the new instance.

        Returns:
            The generator, or None if the request was rejected.
        """
        try:
            kind = DistributionType(name)
        except ValueError:
            logger.debug("Rejected unknown distribution name %r", name)
            return None

        generator_cls = GENERATORS[kind]
        if len(params) != len(generator_cls.param_fields):
            logger.debug(
                "Rejected %s request: expected %d parameters, got %d",
                kind.value,
                len(generator_cls.param_fields),
                len(params),
            )
            return None

        fields = {
            field: _coerce_argument(value)
            for field, value in zip(generator_cls.param_fields, params)
        }
        try:
            validated = generator_cls.params_model(**fields)
        except ValidationError as exc:
            logger.debug(
                "Rejected %s request with %d validation error(s): %s",
                kind.value,
                exc.error_count(),
                [error["msg"] for error in exc.errors()],
            )
            return None

        return self.create(validated, rng=rng)

    def create(
        self,
        params: DistributionParams,
        rng: np.random.Generator | None = None,
    ) -> RandomVariateGenerator:
        """Build a generator from an already validated parameter model."""
        generator = get_generator(params, rng=rng)
        logger.debug("Created %r", generator)
        return generator
