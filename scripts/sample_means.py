"""Sampling harness script.

This script draws a large number of variates from every built-in harness
case and prints the computed mean next to the theoretical one. It is a
quick smoke test for the generators and the factory's validation rules.

Usage:
    python scripts/sample_means.py
    VARIATES_SEED=42 VARIATES_SAMPLE_COUNT=10000 python scripts/sample_means.py
"""

import uuid

from src.config import get_settings
from src.core.logging import bind_run_context, configure_logging
from src.variates.core.enums import DistributionType
from src.variates.harness import format_result, run_harness


def print_section(title: str) -> None:
    """Print a formatted section header.

    Args:
        title: Section title to display.
    """
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print("=" * 60)


def main() -> int:
    """Run the harness and print one section per distribution type."""
    configure_logging()
    settings = get_settings().harness
    bind_run_context(run_id=uuid.uuid4().hex, seed=settings.seed)

    results = run_harness(
        sample_count=settings.sample_count, seed=settings.seed
    )

    for distribution in DistributionType:
        section = [r for r in results if r.distribution == distribution]
        if not section:
            continue
        print_section(f"{distribution.value.capitalize()} generators")
        for result in section:
            print(format_result(result))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
