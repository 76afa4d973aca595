"""Contract for integer exponentiation.

The contract for ``power(base, exponent)`` is expressed as data:

- edge-case rules: the ordered table of special cases, first match wins
- error conditions: which inputs must raise which exception
- algebraic properties: relationships that must hold for every input
- branches: every decision point that white-box tests must cover

Validation tools (the factory, the counterexample search, the
conformance tests) iterate over it instead of hard-coding expectations.

Layers
------
EdgeCaseRule     one row of the precedence table
ErrorCondition   input predicate plus the exception it must raise
AlgebraicProperty  predicate over (calc, base, exponent)
BranchSpec       decision point in power.py
PowerSpec        the full contract for one result range
build_spec()     constructs a PowerSpec for a given range
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from integer_power.bounds import Bounds
from integer_power.power import ExponentiationError, PowerOverflowError


# ---------------------------------------------------------------------------
# Spec building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EdgeCaseRule:
    """A special case resolved before the general algorithm runs.

    ``expected`` is None for rules whose outcome is an error.
    """

    name: str
    description: str
    applies: Callable[[int, int], bool]
    expected: Callable[[int, int], int] | None


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[[int, int], bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class BranchSpec:
    """A decision point in the implementation that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str      # which function this belongs to


@dataclass(frozen=True)
class PowerSpec:
    """Complete contract for ``power`` over one result range."""

    bounds: Bounds
    exponents: Bounds
    rules: list[EdgeCaseRule]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]
    branches: list[BranchSpec]

    def rule_for(self, base: int, exponent: int) -> EdgeCaseRule | None:
        """First edge-case rule that applies, or None for the general case."""
        for rule in self.rules:
            if rule.applies(base, exponent):
                return rule
        return None

    def expected(self, base: int, exponent: int) -> int:
        """The exact mathematical result the contract prescribes.

        When ``should_overflow`` is true the returned value is only
        guaranteed to lie outside the range; the implementation must raise.
        """
        rule = self.rule_for(base, exponent)
        if rule is None:
            limit = max(-self.bounds.lo, self.bounds.hi)
            return naive_power(base, exponent, limit=limit)
        if rule.expected is None:
            raise ValueError(f"rule '{rule.name}' prescribes an error")
        return rule.expected(base, exponent)

    def should_overflow(self, base: int, exponent: int) -> bool:
        rule = self.rule_for(base, exponent)
        if rule is not None:
            return (
                rule.expected is not None
                and not self.bounds.contains(rule.expected(base, exponent))
            )
        limit = max(-self.bounds.lo, self.bounds.hi)
        return not self.bounds.contains(naive_power(base, exponent, limit=limit))

    def expected_error(self, base: int, exponent: int) -> type | None:
        for ec in self.error_conditions:
            if ec.trigger(base, exponent):
                return ec.exception
        return None

    def branch_ids(self, operation: str | None = None) -> list[str]:
        return [
            b.id for b in self.branches
            if operation is None or b.operation == operation
        ]


# ---------------------------------------------------------------------------
# Helpers used inside the rule predicates
# ---------------------------------------------------------------------------

def naive_power(base: int, exponent: int, limit: int | None = None) -> int:
    """Reference ``base ** exponent`` for ``exponent >= 0`` by repeated
    multiplication.

    With ``limit`` set, multiplication stops as soon as the magnitude passes
    it; the returned value is then only guaranteed to be out of range, not
    exact.
    """
    if exponent < 0:
        raise ValueError("naive_power needs a non-negative exponent")
    if base in (-1, 0, 1):
        return base ** exponent
    result = 1
    for _ in range(exponent):
        result *= base
        if limit is not None and abs(result) > limit:
            break
    return result


def exponent_domain(bounds: Bounds) -> Bounds:
    """Exponents worth checking for a result range.

    Past ``bit_length + 1`` every base with ``|base| >= 2`` overflows, and the
    bases -1, 0, 1 only depend on sign and parity.  Doubling the width keeps
    a margin on both sides.
    """
    bits = max(-bounds.lo, bounds.hi).bit_length()
    reach = 2 * (bits + 1)
    return Bounds(lo=-reach, hi=reach)


# ---------------------------------------------------------------------------
# Spec builder
# ---------------------------------------------------------------------------

def build_spec(bounds: Bounds) -> PowerSpec:
    """Construct the full exponentiation contract for a result range."""

    rules = [
        EdgeCaseRule(
            "EXP-ZERO",
            "Any base to the power 0 is 1 (0 ** 0 == 1 by convention)",
            lambda b, e: e == 0,
            lambda b, e: 1,
        ),
        EdgeCaseRule(
            "EXP-ONE",
            "Any base to the power 1 is the base",
            lambda b, e: e == 1,
            lambda b, e: b,
        ),
        EdgeCaseRule(
            "BASE-ONE",
            "1 to any power is 1, including negative powers",
            lambda b, e: b == 1,
            lambda b, e: 1,
        ),
        EdgeCaseRule(
            "BASE-ZERO-POS",
            "0 to a positive power is 0",
            lambda b, e: b == 0 and e > 0,
            lambda b, e: 0,
        ),
        EdgeCaseRule(
            "BASE-ZERO-NEG",
            "0 to a negative power is a division by zero",
            lambda b, e: b == 0 and e < 0,
            None,
        ),
        EdgeCaseRule(
            "NEG-EXP-MINUS-ONE",
            "-1 to a negative power alternates on parity",
            lambda b, e: b == -1 and e < 0,
            lambda b, e: 1 if e % 2 == 0 else -1,
        ),
        EdgeCaseRule(
            "NEG-EXP-TRUNCATE",
            "|base| > 1 to a negative power truncates to 0",
            lambda b, e: e < 0,
            lambda b, e: 0,
        ),
    ]

    def _overflows(b: int, e: int) -> bool:
        for rule in rules:
            if rule.applies(b, e):
                # Only EXP-ONE can prescribe a value outside the range.
                return rule.expected is not None and not bounds.contains(
                    rule.expected(b, e)
                )
        limit = max(-bounds.lo, bounds.hi)
        return not bounds.contains(naive_power(b, e, limit=limit))

    def _errors(b: int, e: int) -> bool:
        return (b == 0 and e < 0) or _overflows(b, e)

    error_conditions = [
        ErrorCondition(
            "division_by_zero",
            "ExponentiationError when base is 0 and exponent is negative",
            lambda b, e: b == 0 and e < 0,
            ExponentiationError,
        ),
        ErrorCondition(
            "overflow",
            "PowerOverflowError when the exact power is outside bounds",
            _overflows,
            PowerOverflowError,
        ),
    ]

    properties = [
        AlgebraicProperty(
            "zero_exponent", "power(b, 0) == 1",
            lambda calc, b, _: calc.power(b, 0) == 1,
        ),
        AlgebraicProperty(
            "unit_exponent", "power(b, 1) == b",
            lambda calc, b, _: calc.power(b, 1) == b,
        ),
        AlgebraicProperty(
            "unit_base", "power(1, e) == 1",
            lambda calc, _, e: calc.power(1, e) == 1,
        ),
        AlgebraicProperty(
            "zero_base", "power(0, e) == 0 for e > 0",
            lambda calc, _, e: e <= 0 or calc.power(0, e) == 0,
        ),
        AlgebraicProperty(
            "minus_one_negative_exponent",
            "power(-1, e) == 1 for even e < 0, -1 for odd e < 0",
            lambda calc, _, e: (
                e >= 0 or calc.power(-1, e) == (1 if e % 2 == 0 else -1)
            ),
        ),
        AlgebraicProperty(
            "negative_exponent_truncates",
            "power(b, e) == 0 for b not in {-1, 0, 1} and e < 0",
            lambda calc, b, e: (
                e >= 0 or b in (-1, 0, 1) or calc.power(b, e) == 0
            ),
        ),
        AlgebraicProperty(
            "even_exponent_non_negative",
            "power(b, e) >= 0 for b < 0 and even e > 0 without overflow",
            lambda calc, b, e: (
                b >= 0 or e <= 0 or e % 2 == 1 or _overflows(b, e)
                or calc.power(b, e) >= 0
            ),
        ),
        AlgebraicProperty(
            "odd_exponent_preserves_sign",
            "power(b, e) < 0 for b < 0 and odd e > 0 without overflow",
            lambda calc, b, e: (
                b >= 0 or e <= 0 or e % 2 == 0 or _overflows(b, e)
                or calc.power(b, e) < 0
            ),
        ),
        AlgebraicProperty(
            "matches_naive",
            "power(b, e) equals repeated multiplication for e > 1 without overflow",
            lambda calc, b, e: (
                e <= 1 or _overflows(b, e)
                or calc.power(b, e) == naive_power(b, e)
            ),
        ),
        AlgebraicProperty(
            "no_false_overflow",
            "power(b, e) returns a value in bounds whenever no error is prescribed",
            lambda calc, b, e: _errors(b, e) or bounds.contains(calc.power(b, e)),
        ),
    ]

    branches = [
        # power()
        BranchSpec("EXP-ZERO", "Exponent is 0", "exponent == 0", "power"),
        BranchSpec("EXP-ONE", "Exponent is 1", "exponent == 1", "power"),
        BranchSpec(
            "EXP-ONE-OVERFLOW", "Exponent is 1, base outside the range",
            "exponent == 1 and not bounds.contains(base)", "power",
        ),
        BranchSpec("BASE-ONE", "Base is 1", "base == 1", "power"),
        BranchSpec(
            "BASE-ZERO-POS", "Zero base, positive exponent",
            "base == 0 and exponent > 0", "power",
        ),
        BranchSpec(
            "BASE-ZERO-NEG", "Zero base, negative exponent raises",
            "base == 0 and exponent < 0", "power",
        ),
        BranchSpec(
            "NEG-EXP-MINUS-ONE", "Base -1, negative exponent",
            "base == -1 and exponent < 0", "power",
        ),
        BranchSpec(
            "NEG-EXP-TRUNCATE", "|base| > 1, negative exponent",
            "abs(base) > 1 and exponent < 0", "power",
        ),
        BranchSpec(
            "SQUARING", "General case, exponentiation by squaring",
            "exponent > 1 and base not in (0, 1)", "power",
        ),
        # _power_by_squaring()
        BranchSpec(
            "SQ-BASE-OVERFLOW", "Base itself is outside the range",
            "not bounds.contains(base)", "squaring",
        ),
        BranchSpec(
            "SQ-RESULT-OVERFLOW", "Accumulating multiply would overflow",
            "will_multiply_overflow(result, current_base)", "squaring",
        ),
        BranchSpec(
            "SQ-INTERMEDIATE-OVERFLOW", "Squaring the running base would overflow",
            "will_multiply_overflow(current_base, current_base)", "squaring",
        ),
        BranchSpec(
            "SQ-DONE", "Loop finished, result in bounds",
            "current_exponent == 0", "squaring",
        ),
        # will_multiply_overflow()
        BranchSpec("MUL-ZERO", "An operand is zero", "a == 0 or b == 0", "overflow"),
        BranchSpec(
            "MUL-OVERFLOW", "Product magnitude exceeds the sign's limit",
            "abs(a) > limit // abs(b)", "overflow",
        ),
        BranchSpec(
            "MUL-OK", "Product fits", "abs(a) <= limit // abs(b)", "overflow",
        ),
    ]

    return PowerSpec(
        bounds=bounds,
        exponents=exponent_domain(bounds),
        rules=rules,
        error_conditions=error_conditions,
        properties=properties,
        branches=branches,
    )
