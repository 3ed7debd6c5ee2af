"""Smoke harness comparing empirical and theoretical means.

Each case asks the factory for a generator, draws a fixed number of variates
and records the arithmetic mean next to the theoretical one. Cases the
factory rejects are reported and skipped.
"""

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
from pydantic import ValidationError

from src.variates.core.distributions import GeneratorFactory
from src.variates.core.enums import DistributionType
from src.variates.core.schemas import FiniteParams, HarnessResult
from src.variates.core.statistics import estimate_mean

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HarnessCase:
    """One factory request exercised by the harness."""

    distribution: DistributionType
    params: tuple[Any, ...]

    @property
    def label(self) -> str:
        return self.distribution.value.capitalize()

    @property
    def nominal(self) -> float | None:
        """Value printed next to the label.

        The scalar parameter for Poisson, Bernoulli and geometric cases, the
        expected value for finite cases. None when the finite parameters are
        not a valid distribution.
        """
        if self.distribution != DistributionType.FINITE:
            return float(self.params[0])
        values, probabilities = self.params
        try:
            params = FiniteParams(values=values, probabilities=probabilities)
        except ValidationError:
            return None
        return params.expected_value


def _cases(
    distribution: DistributionType, *param_sets: tuple[Any, ...]
) -> list[HarnessCase]:
    return [HarnessCase(distribution, params) for params in param_sets]


DEFAULT_CASES: tuple[HarnessCase, ...] = (
    *_cases(DistributionType.POISSON, (1,), (3.58,), (5,), (8,)),
    *_cases(DistributionType.BERNOULLI, (0,), (1,), (0.58,), (0.83,)),
    *_cases(DistributionType.GEOMETRIC, (1,), (0.58,), (0.83,), (0.35,)),
    *_cases(
        DistributionType.FINITE,
        ([1, 2, 3], [0.3, 0.3, 0.4]),
        ([1, 2], [0.3, 0.3, 0.4]),
        ([], []),
        (
            [1, -1, 2, -2, 3, -3, 4, -4, 5, -5],
            [0.1] * 10,
        ),
    ),
)


def run_case(
    case: HarnessCase,
    sample_count: int,
    rng: np.random.Generator | None = None,
    factory: GeneratorFactory | None = None,
) -> HarnessResult:
    """Run a single harness case.

    Args:
        case: Factory request to exercise.
        sample_count: Number of variates averaged.
        rng: Random number generator handed to the generator.
        factory: Factory to use, a new one when omitted.

    Returns:
        HarnessResult for the case; ``rejected`` is set when the factory
        returned no generator.
    """
    factory = factory or GeneratorFactory()
    generator = factory.create_generator(
        case.distribution, *case.params, rng=rng
    )

    if generator is None:
        logger.warning(
            "Factory rejected %s case with params %s",
            case.distribution.value,
            case.params,
        )
        return HarnessResult(
            label=case.label,
            distribution=case.distribution,
            nominal=case.nominal,
            rejected=True,
        )

    estimate = estimate_mean(generator, sample_count)
    return HarnessResult(
        label=case.label,
        distribution=case.distribution,
        nominal=case.nominal,
        theoretical_mean=generator.get_mean(),
        empirical_mean=estimate.mean,
        sample_count=estimate.sample_count,
    )


def run_harness(
    sample_count: int = 100_000,
    seed: int | None = None,
    cases: Sequence[HarnessCase] = DEFAULT_CASES,
) -> list[HarnessResult]:
    """Run every case and collect the results.

    Each generator gets its own child stream spawned from one
    ``SeedSequence``, so a fixed seed reproduces the whole report.

    Args:
        sample_count: Number of variates averaged per case.
        seed: Root seed. None draws fresh entropy.
        cases: Cases to run, the built-in table by default.

    Returns:
        One HarnessResult per case, in order.
    """
    logger.info(
        "Running %d harness cases with %d samples each (seed=%s)",
        len(cases),
        sample_count,
        seed,
    )

    factory = GeneratorFactory()
    child_seeds = np.random.SeedSequence(seed).spawn(len(cases))

    results = []
    for case, child_seed in zip(cases, child_seeds):
        result = run_case(
            case,
            sample_count,
            rng=np.random.default_rng(child_seed),
            factory=factory,
        )
        results.append(result)

    rejected = sum(1 for r in results if r.rejected)
    logger.info(
        "Harness complete: %d sampled, %d rejected",
        len(results) - rejected,
        rejected,
    )
    return results


def format_result(result: HarnessResult) -> str:
    """Human-friendly report lines for one harness result."""
    if result.rejected:
        return f"{result.label}: rejected by factory"

    nominal = (
        f"{result.nominal:g}" if result.nominal is not None else "n/a"
    )
    return (
        f"{result.label} mean: {nominal}\n"
        f"Theoretical: {result.theoretical_mean:.6f}\n"
        f"Computed: {result.empirical_mean:.6f}"
    )

