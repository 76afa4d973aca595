"""Counterexample search - discovers gaps in the implementation or the tests.

This module runs independently of the test suite.  Over small result
ranges it exhaustively searches every (base, exponent) pair for:

1. Value violations: inputs where ``power`` does not return the value the
   edge-case table or the naive reference prescribes.
2. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception).
3. Property violations: algebraic relationships that fail for some input.
4. Overflow primitive violations: ``will_multiply_overflow`` disagreeing
   with the exact product for some operand pair.

Run directly::

    python -m integer_power.validation.counterexample_search
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from integer_power.bounds import Bounds, SMALL, TINY
from integer_power.logging_config import setup_logging
from integer_power.power import PowerCalculator
from integer_power.spec import PowerSpec, build_spec

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found.")
        return "\n".join(lines)


def _domain(spec: PowerSpec):
    for base in spec.bounds.all_values():
        for exponent in spec.exponents.all_values():
            yield base, exponent


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_value_violations(
    calc: PowerCalculator,
    spec: PowerSpec,
) -> tuple[list[Counterexample], int]:
    """Compare every error-free result with the prescribed value."""
    cxs: list[Counterexample] = []
    checks = 0

    for base, exponent in _domain(spec):
        if spec.expected_error(base, exponent) is not None:
            continue
        checks += 1
        expected = spec.expected(base, exponent)
        rule = spec.rule_for(base, exponent)
        source = rule.name if rule else "naive reference"
        try:
            result = calc.power(base, exponent)
        except ArithmeticError as e:
            cxs.append(Counterexample(
                category="unexpected_error",
                inputs=(base, exponent),
                expected=str(expected),
                actual=f"{type(e).__name__}: {e}",
                description=f"Raised where {source} prescribes a value",
            ))
            continue
        if result != expected:
            cxs.append(Counterexample(
                category="value_violation",
                inputs=(base, exponent),
                expected=str(expected),
                actual=str(result),
                description=f"Disagrees with {source}",
            ))

    return cxs, checks


def search_error_condition_violations(
    calc: PowerCalculator,
    spec: PowerSpec,
) -> tuple[list[Counterexample], int]:
    """Verify every error condition triggers exactly the right exception."""
    cxs: list[Counterexample] = []
    checks = 0

    for base, exponent in _domain(spec):
        for ec in spec.error_conditions:
            if not ec.trigger(base, exponent):
                continue
            checks += 1
            try:
                result = calc.power(base, exponent)
                cxs.append(Counterexample(
                    category="missing_error",
                    inputs=(base, exponent),
                    expected=ec.exception.__name__,
                    actual=f"result={result}",
                    description=(
                        f"Error condition '{ec.name}' should have "
                        f"triggered but didn't"
                    ),
                ))
            except ArithmeticError as e:
                if type(e) is not ec.exception:
                    cxs.append(Counterexample(
                        category="wrong_error",
                        inputs=(base, exponent),
                        expected=ec.exception.__name__,
                        actual=f"{type(e).__name__}: {e}",
                        description=f"Wrong exception type for '{ec.name}'",
                    ))

    return cxs, checks


def search_property_violations(
    calc: PowerCalculator,
    spec: PowerSpec,
) -> tuple[list[Counterexample], int]:
    """Exhaustively check every algebraic property."""
    cxs: list[Counterexample] = []
    checks = 0

    for prop in spec.properties:
        for base, exponent in _domain(spec):
            checks += 1
            try:
                holds = prop.check(calc, base, exponent)
            except ArithmeticError as e:
                cxs.append(Counterexample(
                    category="property_error",
                    inputs=(base, exponent),
                    expected=prop.description,
                    actual=f"{type(e).__name__}: {e}",
                    description=f"Property '{prop.name}' raised",
                ))
                continue
            if not holds:
                cxs.append(Counterexample(
                    category="property_violation",
                    inputs=(base, exponent),
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


def search_overflow_check_violations(
    calc: PowerCalculator,
    spec: PowerSpec,
) -> tuple[list[Counterexample], int]:
    """Compare the overflow primitive with the exact product."""
    cxs: list[Counterexample] = []
    checks = 0

    for a in spec.bounds.all_values():
        for b in spec.bounds.all_values():
            checks += 1
            predicted = calc.will_multiply_overflow(a, b)
            actual = not spec.bounds.contains(a * b)
            if predicted != actual:
                cxs.append(Counterexample(
                    category="overflow_check_violation",
                    inputs=(a, b),
                    expected=f"overflow={actual}",
                    actual=f"overflow={predicted}",
                    description=f"product {a * b} vs bounds {spec.bounds}",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(bounds: Bounds) -> SearchReport:
    """Run the complete counterexample search for one result range."""
    calc = PowerCalculator(bounds)
    spec = build_spec(bounds)
    report = SearchReport()

    for search_fn in (
        search_value_violations,
        search_error_condition_violations,
        search_property_violations,
        search_overflow_check_violations,
    ):
        cxs, checks = search_fn(calc, spec)
        report.counterexamples.extend(cxs)
        report.checks_run += checks
        logger.debug("%s: %d checks, %d counterexamples",
                     search_fn.__name__, checks, len(cxs))

    return report


def main() -> None:
    """Run the counterexample search across several result ranges."""
    setup_logging()
    configs = [
        ("TINY   [-8, 7]", TINY),
        ("SMALL  [-128, 127]", SMALL),
        ("SYM    [-100, 100]", Bounds(-100, 100)),
    ]

    all_passed = True
    for name, bounds in configs:
        print(f"\n--- Configuration: {name} ---")
        report = run_search(bounds)
        print(report.summary())
        if not report.passed:
            logger.error("counterexamples found for %s", bounds)
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL CONFIGURATIONS PASSED")
    else:
        print("SOME CONFIGURATIONS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
