"""White-box tests for integer exponentiation.

Each test class targets specific decision branches documented in the
contract (see ``BranchSpec`` ids in spec.py).  A coverage matrix at the
bottom of this file records which test covers which branch, and a test
checks that the matrix and the contract agree.

Naming convention
-----------------
test_<branch_id_lowercase>_<scenario>
"""
from __future__ import annotations

import pytest

from integer_power.bounds import Bounds, INT32, INT64, TINY
from integer_power.power import (
    DIVISION_BY_ZERO_MESSAGE,
    ErrorKind,
    ExponentiationError,
    PowerCalculator,
    PowerOverflowError,
    power,
    will_multiply_overflow,
)
from integer_power.spec import build_spec

MIN64 = INT64.lo
MAX64 = INT64.hi


# ===================================================================
# EDGE CASES  (EXP-ZERO, EXP-ONE, BASE-ONE, BASE-ZERO-POS, BASE-ZERO-NEG)
# ===================================================================

class TestExponentZero:

    def test_exp_zero_positive_base(self):
        """Branch: EXP-ZERO - any base to the power 0 is 1."""
        assert power(5, 0) == 1

    def test_exp_zero_negative_base(self):
        assert power(-10, 0) == 1

    def test_exp_zero_zero_base(self):
        """0 ** 0 is 1 by convention, checked before the zero-base rules."""
        assert power(0, 0) == 1

    def test_exp_zero_extreme_bases(self):
        assert power(MIN64, 0) == 1
        assert power(MAX64, 0) == 1


class TestExponentOne:

    def test_exp_one_returns_base(self):
        """Branch: EXP-ONE - any base to the power 1 is the base."""
        assert power(7, 1) == 7
        assert power(-3, 1) == -3

    def test_exp_one_zero_base(self):
        assert power(0, 1) == 0

    def test_exp_one_extreme_bases(self):
        assert power(MIN64, 1) == MIN64
        assert power(MAX64, 1) == MAX64


class TestBaseOne:

    def test_base_one_positive_exponent(self):
        """Branch: BASE-ONE - 1 to any power is 1."""
        assert power(1, 100) == 1

    def test_base_one_negative_exponent(self):
        assert power(1, -5) == 1

    def test_base_one_extreme_exponents(self):
        assert power(1, INT32.hi) == 1
        assert power(1, INT32.lo) == 1


class TestBaseZero:

    def test_base_zero_pos(self):
        """Branch: BASE-ZERO-POS - 0 to a positive power is 0."""
        assert power(0, 5) == 0
        assert power(0, INT32.hi) == 0

    def test_base_zero_neg_raises(self):
        """Branch: BASE-ZERO-NEG - 0 to a negative power is a division by zero."""
        with pytest.raises(ExponentiationError) as info:
            power(0, -2)
        assert str(info.value) == DIVISION_BY_ZERO_MESSAGE
        assert info.value.message == DIVISION_BY_ZERO_MESSAGE

    def test_base_zero_neg_kind(self):
        with pytest.raises(ExponentiationError) as info:
            power(0, -1)
        assert info.value.kind is ErrorKind.INVALID_OPERATION
        assert not isinstance(info.value, PowerOverflowError)

    def test_base_zero_neg_is_arithmetic_error(self):
        with pytest.raises(ArithmeticError):
            power(0, INT32.lo)


# ===================================================================
# NEGATIVE EXPONENTS  (NEG-EXP-MINUS-ONE, NEG-EXP-TRUNCATE)
# ===================================================================

class TestNegativeExponent:

    def test_neg_exp_minus_one_even(self):
        """Branch: NEG-EXP-MINUS-ONE - even negative exponent gives 1."""
        assert power(-1, -2) == 1

    def test_neg_exp_minus_one_odd(self):
        """Branch: NEG-EXP-MINUS-ONE - odd negative exponent gives -1."""
        assert power(-1, -3) == -1

    def test_neg_exp_minus_one_extremes(self):
        assert power(-1, INT32.lo) == 1       # -2**31 is even
        assert power(-1, INT32.lo + 1) == -1

    def test_neg_exp_truncate_positive_base(self):
        """Branch: NEG-EXP-TRUNCATE - 2 ** -3 truncates to 0."""
        assert power(2, -3) == 0

    def test_neg_exp_truncate_negative_base(self):
        """Branch: NEG-EXP-TRUNCATE - (-4) ** -2 truncates to 0."""
        assert power(-4, -2) == 0

    def test_neg_exp_truncate_odd_negative(self):
        """The true value -1/8 also truncates toward zero."""
        assert power(-2, -3) == 0

    def test_neg_exp_truncate_extremes(self):
        assert power(MIN64, -1) == 0
        assert power(MAX64, INT32.lo) == 0


# ===================================================================
# SQUARING  (SQUARING, SQ-DONE)
# ===================================================================

class TestSquaring:

    def test_squaring_positive(self):
        """Branch: SQUARING / SQ-DONE - results within range."""
        assert power(2, 10) == 1024
        assert power(3, 5) == 243

    def test_squaring_negative_base_even_exponent(self):
        assert power(-2, 4) == 16
        assert power(-10, 2) == 100

    def test_squaring_negative_base_odd_exponent(self):
        assert power(-2, 3) == -8
        assert power(-1, 99) == -1

    def test_squaring_minus_one_large_exponent(self):
        assert power(-1, INT32.hi) == -1
        assert power(-1, INT32.hi - 1) == 1

    def test_squaring_largest_power_of_two(self):
        assert power(2, 62) == 2**62

    def test_squaring_reaches_min_exactly(self):
        """(-2) ** 63 is exactly the minimum value and must not overflow."""
        assert power(-2, 63) == MIN64

    def test_squaring_near_boundary(self):
        assert power(3, 39) == 3**39
        assert power(-3, 39) == -(3**39)
        assert power(3037000499, 2) == 3037000499**2

    def test_squaring_int32_max_squared_fits(self):
        """(2**31 - 1) ** 2 is below 2**63 - 1."""
        assert power(INT32.hi, 2) == 4_611_686_014_132_420_609

    def test_squaring_int32_min_squared_fits(self):
        assert power(INT32.lo, 2) == 2**62

    def test_squaring_moderate_base_fits(self):
        assert power(30370005, 2) == 922_337_203_700_025


# ===================================================================
# OVERFLOW  (SQ-RESULT-OVERFLOW, SQ-INTERMEDIATE-OVERFLOW)
# ===================================================================

class TestOverflow:

    def test_sq_result_overflow_power_of_two(self):
        """Branch: SQ-RESULT-OVERFLOW - 2 ** 63 fails on the final multiply."""
        with pytest.raises(PowerOverflowError) as info:
            power(2, 63)
        assert info.value.intermediate is False
        assert info.value.message.startswith("Result exceeds")

    def test_sq_result_overflow_int32_max_cubed(self):
        with pytest.raises(PowerOverflowError) as info:
            power(INT32.hi, 3)
        assert info.value.intermediate is False

    def test_sq_result_overflow_just_past_boundary(self):
        with pytest.raises(PowerOverflowError):
            power(3, 40)
        with pytest.raises(PowerOverflowError):
            power(-2, 65)

    def test_sq_intermediate_overflow(self):
        """Branch: SQ-INTERMEDIATE-OVERFLOW - 99999 ** 4 fails while squaring."""
        with pytest.raises(PowerOverflowError) as info:
            power(99999, 4)
        assert info.value.intermediate is True
        assert info.value.message.startswith("Intermediate value exceeds")

    def test_sq_intermediate_overflow_power_of_two(self):
        """65536 ** 4 == 2 ** 64: the second squaring overflows."""
        with pytest.raises(PowerOverflowError) as info:
            power(65536, 4)
        assert info.value.intermediate is True

    def test_sq_intermediate_overflow_above_sqrt_max(self):
        """3037000500 is the first integer whose square exceeds 2**63 - 1."""
        with pytest.raises(PowerOverflowError) as info:
            power(3037000500, 2)
        assert info.value.intermediate is True

    def test_sq_intermediate_overflow_min_base(self):
        with pytest.raises(PowerOverflowError):
            power(MIN64, 2)

    def test_overflow_kind_and_hierarchy(self):
        with pytest.raises(PowerOverflowError) as info:
            power(INT32.hi, 5)
        err = info.value
        assert err.kind is ErrorKind.OVERFLOW
        assert isinstance(err, ExponentiationError)
        assert isinstance(err, OverflowError)

    def test_overflow_message_names_range(self):
        with pytest.raises(PowerOverflowError, match=r"\[-8, 7\]"):
            power(2, 3, TINY)


# ===================================================================
# OVERFLOW PRIMITIVE  (MUL-ZERO, MUL-OVERFLOW, MUL-OK)
# ===================================================================

class TestWillMultiplyOverflow:

    @pytest.mark.parametrize("a, b", [
        (0, 0), (0, MIN64), (MIN64, 0), (MAX64, 0),
    ])
    def test_mul_zero(self, a, b):
        """Branch: MUL-ZERO - a zero operand never overflows."""
        assert will_multiply_overflow(a, b) is False

    @pytest.mark.parametrize("a, b", [
        (MIN64, -1), (-1, MIN64),
        (MAX64, 2), (MIN64, 2), (MIN64, MIN64),
        (2**62, 2), (-(2**62), -2), (3037000500, 3037000500),
    ])
    def test_mul_overflow(self, a, b):
        """Branch: MUL-OVERFLOW."""
        assert will_multiply_overflow(a, b) is True

    @pytest.mark.parametrize("a, b", [
        (MIN64, 1), (1, MIN64), (MAX64, -1), (MAX64, 1),
        (-(2**62), 2), (2**62, -2), (-1, -1),
        (3037000499, 3037000499), (2**31, 2**31),
    ])
    def test_mul_ok(self, a, b):
        """Branch: MUL-OK - products that land exactly on or inside the range."""
        assert will_multiply_overflow(a, b) is False

    def test_matches_exact_product_exhaustively_tiny(self):
        for a in TINY.all_values():
            for b in TINY.all_values():
                expected = not TINY.contains(a * b)
                assert will_multiply_overflow(a, b, TINY) is expected, (a, b)


# ===================================================================
# RESULT RANGE CONFIGURATION
# ===================================================================

class TestResultBounds:

    def test_tiny_in_range(self, calc_tiny):
        assert calc_tiny.power(2, 2) == 4
        assert calc_tiny.power(-2, 3) == -8

    def test_tiny_overflow(self, calc_tiny):
        with pytest.raises(PowerOverflowError):
            calc_tiny.power(2, 3)
        with pytest.raises(PowerOverflowError):
            calc_tiny.power(-3, 2)

    def test_base_outside_bounds_with_fixed_result(self, calc_tiny):
        assert calc_tiny.power(8, 0) == 1
        assert calc_tiny.power(-100, -1) == 0

    def test_base_outside_int64_zero_exponent(self):
        assert power(2**63, 0) == 1
        assert power(-(2**100), 0) == 1

    def test_base_outside_int64_negative_exponent(self):
        assert power(-(2**64), -3) == 0
        assert power(2**63, -2) == 0

    def test_exp_one_overflow_base_outside_int64(self):
        """Branch: EXP-ONE-OVERFLOW - the base itself is not representable."""
        with pytest.raises(PowerOverflowError, match="Result exceeds") as info:
            power(2**63, 1)
        assert not info.value.intermediate
        with pytest.raises(PowerOverflowError):
            power(MIN64 - 1, 1)

    def test_sq_base_overflow_base_outside_int64(self):
        """Branch: SQ-BASE-OVERFLOW - squaring never starts."""
        with pytest.raises(PowerOverflowError, match="Result exceeds") as info:
            power(2**63, 2)
        assert not info.value.intermediate
        with pytest.raises(PowerOverflowError):
            power(-(2**64), 3)

    def test_sq_base_overflow_tiny(self, calc_tiny):
        with pytest.raises(PowerOverflowError):
            calc_tiny.power(-9, 2)

    def test_bounds_without_unit_values_rejected(self):
        with pytest.raises(ValueError, match="-1, 0 and 1"):
            PowerCalculator(Bounds(0, 100))

    def test_lopsided_bounds_rejected(self):
        with pytest.raises(ValueError, match="symmetric or two's-complement"):
            PowerCalculator(Bounds(-40, 10))

    def test_symmetric_bounds_accepted(self):
        calc = PowerCalculator(Bounds(-10, 10))
        assert calc.power(-2, 3) == -8
        with pytest.raises(PowerOverflowError):
            calc.power(-3, 3)

    def test_default_is_int64(self, calc):
        assert calc.bounds == INT64
        assert calc.power(-2, 63) == power(-2, 63)


# ===================================================================
# COVERAGE MATRIX
# ===================================================================

COVERAGE_MATRIX = {
    "EXP-ZERO": ["test_exp_zero_positive_base", "test_exp_zero_zero_base"],
    "EXP-ONE": ["test_exp_one_returns_base"],
    "EXP-ONE-OVERFLOW": ["test_exp_one_overflow_base_outside_int64"],
    "BASE-ONE": ["test_base_one_positive_exponent", "test_base_one_negative_exponent"],
    "BASE-ZERO-POS": ["test_base_zero_pos"],
    "BASE-ZERO-NEG": ["test_base_zero_neg_raises", "test_base_zero_neg_kind"],
    "NEG-EXP-MINUS-ONE": ["test_neg_exp_minus_one_even", "test_neg_exp_minus_one_odd"],
    "NEG-EXP-TRUNCATE": ["test_neg_exp_truncate_positive_base"],
    "SQUARING": ["test_squaring_positive"],
    "SQ-BASE-OVERFLOW": ["test_sq_base_overflow_base_outside_int64"],
    "SQ-RESULT-OVERFLOW": ["test_sq_result_overflow_power_of_two"],
    "SQ-INTERMEDIATE-OVERFLOW": ["test_sq_intermediate_overflow"],
    "SQ-DONE": ["test_squaring_positive", "test_squaring_reaches_min_exactly"],
    "MUL-ZERO": ["test_mul_zero"],
    "MUL-OVERFLOW": ["test_mul_overflow"],
    "MUL-OK": ["test_mul_ok"],
}


def test_coverage_matrix_matches_spec():
    """Every branch in the contract is covered, and nothing else is listed."""
    spec_ids = set(build_spec(INT64).branch_ids())
    assert set(COVERAGE_MATRIX) == spec_ids


def test_coverage_matrix_names_real_tests():
    names = set()
    for obj in list(globals().values()):
        if isinstance(obj, type) and obj.__name__.startswith("Test"):
            names.update(n for n in dir(obj) if n.startswith("test_"))
    for branch, tests in COVERAGE_MATRIX.items():
        for test in tests:
            assert test in names, f"{branch}: unknown test {test}"
