"""
The verifying factory.

The factory does not just construct a PowerCalculator - it checks it
against the exponentiation contract before releasing it.

Flow:
  1. Caller requests a calculator for a result range.
  2. Factory builds the implementation.
  3. Factory runs the contract (reference values, error conditions,
     algebraic properties) against it.
  4. If verification passes  -> return the calculator.
     If verification fails   -> raise, never hand out a broken instance.

Small ranges are checked exhaustively over every base in the range and
every exponent in ``spec.exponent_domain``.  Large ranges fall back to
edge values plus random samples (hypothesis extends this in the tests).
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Iterable

from integer_power.bounds import Bounds, INT32
from integer_power.power import PowerCalculator
from integer_power.spec import PowerSpec, build_spec

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of verifying one check."""

    check_name: str
    passed: bool
    counterexample: tuple | None = None
    detail: str = ""
    tests_run: int = 0

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        ce = f"  counterexample={self.counterexample}" if self.counterexample else ""
        detail = f"  {self.detail}" if self.detail else ""
        return f"[{status}] {self.check_name} ({self.tests_run} tests){ce}{detail}"


@dataclass
class VerificationReport:
    """Aggregate result of verifying the contract for one range."""

    bounds: Bounds
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def tests_run(self) -> int:
        return sum(r.tests_run for r in self.results)

    def summary(self) -> str:
        lines = [f"--- power over {self.bounds} ---"]
        for r in self.results:
            lines.append(f"  {r}")
        status = "ALL PASSED" if self.passed else "FAILED"
        lines.append(f"  => {status}")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when an implementation fails its contract."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"Verification failed:\n{report.summary()}")


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class PowerFactory:
    """
    Produces PowerCalculator instances that are checked against the contract.
    """

    EXHAUSTIVE_THRESHOLD = 256  # max range width for brute-force check
    SAMPLE_COUNT = 2_000

    @classmethod
    def create(
        cls,
        bounds: Bounds,
        build: Callable[[Bounds], PowerCalculator] = PowerCalculator,
    ) -> PowerCalculator:
        """Build, verify, and return a calculator for ``bounds``.

        ``build`` is the constructor under test; swapping it lets the tests
        feed a deliberately broken implementation through the factory.
        """
        calc = build(bounds)
        report = cls.verify(calc, build_spec(bounds))
        if not report.passed:
            logger.error("verification failed for %s", bounds)
            raise VerificationError(report)
        logger.info(
            "verified power over %s (%d checks)", bounds, report.tests_run
        )
        return calc

    @classmethod
    def verify(cls, calc: PowerCalculator, spec: PowerSpec) -> VerificationReport:
        report = VerificationReport(bounds=spec.bounds)
        inputs = list(cls._inputs(spec))

        report.results.append(cls._verify_values(calc, spec, inputs))
        report.results.append(cls._verify_errors(calc, spec, inputs))
        for prop in spec.properties:
            report.results.append(cls._verify_property(calc, prop, inputs))
        return report

    # -- internal ---------------------------------------------------------

    @classmethod
    def _inputs(cls, spec: PowerSpec) -> Iterable[tuple[int, int]]:
        if spec.bounds.width <= cls.EXHAUSTIVE_THRESHOLD:
            return itertools.product(
                spec.bounds.all_values(), spec.exponents.all_values()
            )
        return _generate_samples(spec, count=cls.SAMPLE_COUNT)

    @staticmethod
    def _verify_values(
        calc: PowerCalculator, spec: PowerSpec, inputs: list[tuple[int, int]]
    ) -> VerificationResult:
        tests_run = 0
        for base, exponent in inputs:
            if spec.expected_error(base, exponent) is not None:
                continue
            tests_run += 1
            expected = spec.expected(base, exponent)
            try:
                actual = calc.power(base, exponent)
            except ArithmeticError as e:
                return VerificationResult(
                    "reference_values", False, (base, exponent),
                    f"expected {expected}, raised {type(e).__name__}", tests_run,
                )
            if actual != expected:
                return VerificationResult(
                    "reference_values", False, (base, exponent),
                    f"expected {expected}, got {actual}", tests_run,
                )
        return VerificationResult("reference_values", True, tests_run=tests_run)

    @staticmethod
    def _verify_errors(
        calc: PowerCalculator, spec: PowerSpec, inputs: list[tuple[int, int]]
    ) -> VerificationResult:
        tests_run = 0
        for base, exponent in inputs:
            exc_type = spec.expected_error(base, exponent)
            if exc_type is None:
                continue
            tests_run += 1
            try:
                result = calc.power(base, exponent)
            except ArithmeticError as e:
                # Exact type: PowerOverflowError is also an ExponentiationError.
                if type(e) is exc_type:
                    continue
                return VerificationResult(
                    "error_conditions", False, (base, exponent),
                    f"expected {exc_type.__name__}, raised {type(e).__name__}",
                    tests_run,
                )
            return VerificationResult(
                "error_conditions", False, (base, exponent),
                f"expected {exc_type.__name__}, got {result}", tests_run,
            )
        return VerificationResult("error_conditions", True, tests_run=tests_run)

    @staticmethod
    def _verify_property(
        calc: PowerCalculator, prop, inputs: list[tuple[int, int]]
    ) -> VerificationResult:
        tests_run = 0
        for base, exponent in inputs:
            tests_run += 1
            try:
                holds = prop.check(calc, base, exponent)
            except ArithmeticError as e:
                return VerificationResult(
                    prop.name, False, (base, exponent),
                    f"raised {type(e).__name__}: {e}", tests_run,
                )
            if not holds:
                return VerificationResult(
                    prop.name, False, (base, exponent), prop.description, tests_run,
                )
        return VerificationResult(prop.name, True, tests_run=tests_run)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _generate_samples(spec: PowerSpec, count: int) -> list[tuple[int, int]]:
    """Generate edge-case + random samples for large ranges.

    Bases are drawn from the 32-bit operand range (clipped to the result
    range); exponents from the interesting exponent domain.
    """
    lo = max(spec.bounds.lo, INT32.lo)
    hi = min(spec.bounds.hi, INT32.hi)
    exp = spec.exponents

    edge_bases = [lo, lo + 1, -3, -2, -1, 0, 1, 2, 3, hi - 1, hi]
    edge_exponents = [exp.lo, -3, -2, -1, 0, 1, 2, 3, 63, 64, exp.hi]
    edge_bases = [b for b in edge_bases if lo <= b <= hi]
    edge_exponents = [e for e in edge_exponents if exp.contains(e)]

    samples = list(itertools.product(edge_bases, edge_exponents))

    rng = random.Random(0)
    while len(samples) < count:
        samples.append((rng.randint(lo, hi), rng.randint(exp.lo, exp.hi)))

    return samples
