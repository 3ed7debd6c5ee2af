from dataclasses import dataclass
import logging
import math

from src.variates.core.distributions import RandomVariateGenerator
from src.variates.core.schemas import MeanEstimate

logger = logging.getLogger(__name__)


@dataclass
class RunningStatistics:
    """Accumulate sample mean and variance without storing samples"""

    # Welford's online algorithm for mean/variance
    _count: int = 0
    _mean: float = 0.0
    _m2: float = 0.0

    # Running sum, used for the mean once a sample is inf or nan
    _total: float = 0.0

    def record(self, value: float) -> None:
        """Fold one sample into the running mean and variance"""
        self._count += 1
        self._total += value
        if not math.isfinite(self._total):
            return

        delta = value - self._mean
        self._mean += delta / self._count
        delta2 = value - self._mean
        self._m2 += delta * delta2

    @property
    def count(self) -> int:
        return self._count

    @property
    def mean(self) -> float:
        """Get the arithmetic mean of the recorded samples"""
        if not math.isfinite(self._total):
            return self._total / self._count
        return self._mean

    @property
    def variance(self) -> float:
        """Get the sample variance of the recorded samples"""
        if self._count < 2:
            return 0.0
        if not math.isfinite(self._total):
            return math.inf if math.isinf(self._total) else math.nan
        return self._m2 / (self._count - 1)

    @property
    def std(self) -> float:
        """Get the sample standard deviation of the recorded samples"""
        return math.sqrt(self.variance)

    def to_estimate(self) -> MeanEstimate:
        return MeanEstimate(
            sample_count=self._count,
            mean=self.mean,
            variance=self.variance,
            std=self.std,
        )


def estimate_mean(
    generator: RandomVariateGenerator, sample_count: int
) -> MeanEstimate:
    """Estimate a generator's mean by drawing ``sample_count`` variates.

    Args:
        generator: Generator to sample. Its stream advances by
            ``sample_count`` draws.
        sample_count: Number of draws to average.

    Returns:
        MeanEstimate with the arithmetic mean and sample spread.

    Raises:
        ValueError: If sample_count is not positive.
    """
    if sample_count <= 0:
        raise ValueError(
            f"Sample count must be positive, got {sample_count}"
        )

    stats = RunningStatistics()
    for _ in range(sample_count):
        stats.record(generator.generate())

    logger.debug(
        "Estimated mean of %r over %d samples: %.6f",
        generator,
        sample_count,
        stats.mean,
    )
    return stats.to_estimate()
