"""Integer exponentiation with explicit overflow detection.

``power(base, exponent)`` computes ``base ** exponent`` for integers and
confines the result to a fixed range (the signed 64-bit range unless told
otherwise).  Decision branches are annotated with their branch ids (see
spec.py BranchSpec) so white-box tests can trace coverage back to the
contract.

Edge cases are resolved in a fixed precedence order before the general
case runs; see ``power`` for the table.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from integer_power.bounds import Bounds, INT64

DIVISION_BY_ZERO_MESSAGE = "Division by zero: 0^y where y < 0 is undefined."


class ErrorKind(str, Enum):
    INVALID_OPERATION = "invalid_operation"
    OVERFLOW = "overflow"


class ExponentiationError(ArithmeticError):
    """Raised when ``base ** exponent`` has no integer result."""

    kind = ErrorKind.INVALID_OPERATION

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PowerOverflowError(ExponentiationError, OverflowError):
    """Raised when a multiplication step would leave the result range."""

    kind = ErrorKind.OVERFLOW

    def __init__(self, message: str, *, intermediate: bool = False) -> None:
        self.intermediate = intermediate
        super().__init__(message)


# ---------------------------------------------------------------------------
# Overflow primitive
# ---------------------------------------------------------------------------

def will_multiply_overflow(a: int, b: int, bounds: Bounds = INT64) -> bool:
    """Return True if ``a * b`` would fall outside ``bounds``.

    The product is never formed.  The range is asymmetric (``-lo == hi + 1``
    for two's-complement ranges), so the magnitude limit depends on the sign
    of the product.  For positive integers ``x * y > limit`` holds exactly
    when ``x > limit // y``, so the comparison has no slack at the boundary.

    Branches: MUL-ZERO, MUL-OVERFLOW, MUL-OK
    """
    if a == 0 or b == 0:                                          # MUL-ZERO
        return False

    negative = (a < 0) != (b < 0)
    # The limit follows the sign of the product, unlike a symmetric check
    # against hi alone: (-2) ** 63 == MIN fits, while MIN * -1 still
    # overflows since abs(MIN) == hi + 1.
    limit = bounds.limit_for(negative)
    if abs(a) > limit // abs(b):                                  # MUL-OVERFLOW
        return True
    return False                                                  # MUL-OK


# ---------------------------------------------------------------------------
# Exponentiation
# ---------------------------------------------------------------------------

def _check_bounds(bounds: Bounds) -> None:
    if not (bounds.contains(-1) and bounds.contains(1)):
        raise ValueError(f"result bounds {bounds} must contain -1, 0 and 1")
    # A squared intermediate can only be rejected wrongly when -lo > hi + 1.
    if -bounds.lo not in (bounds.hi, bounds.hi + 1):
        raise ValueError(
            f"result bounds {bounds} must be symmetric or two's-complement"
        )


def _result_overflow(bounds: Bounds) -> PowerOverflowError:
    return PowerOverflowError(f"Result exceeds the representable range {bounds}.")


def _power_by_squaring(base: int, exponent: int, bounds: Bounds) -> int:
    """Exponentiation by squaring for ``exponent > 0``.

    Every multiplication is checked before it is performed, both the
    accumulating one and the squaring of the running base.

    Branches: SQ-BASE-OVERFLOW, SQ-RESULT-OVERFLOW, SQ-INTERMEDIATE-OVERFLOW,
              SQ-DONE
    """
    # Bounds contain -1..1, so an out-of-range base has magnitude above 1.
    if not bounds.contains(base):                                 # SQ-BASE-OVERFLOW
        raise _result_overflow(bounds)

    result = 1
    current_base = base
    current_exponent = exponent

    while current_exponent > 0:
        if current_exponent % 2 == 1:
            if will_multiply_overflow(result, current_base, bounds):  # SQ-RESULT-OVERFLOW
                raise _result_overflow(bounds)
            result *= current_base

        current_exponent //= 2
        if current_exponent > 0:
            if will_multiply_overflow(current_base, current_base, bounds):  # SQ-INTERMEDIATE-OVERFLOW
                raise PowerOverflowError(
                    f"Intermediate value exceeds the representable range {bounds}.",
                    intermediate=True,
                )
            current_base *= current_base

    return result                                                 # SQ-DONE


def power(base: int, exponent: int, bounds: Bounds = INT64) -> int:
    """Compute ``base ** exponent`` within ``bounds``.

    Precedence of the edge cases:

    ====  ===========================  ==============================
    #     condition                    result
    ====  ===========================  ==============================
    1     exponent == 0                1 (0 ** 0 == 1 by convention)
    2     exponent == 1                base (overflow outside bounds)
    3     base == 1                    1
    4     base == 0, exponent > 0      0
    5     base == 0, exponent < 0      ExponentiationError
    6     base == -1, exponent < 0     1 if exponent is even, else -1
    7     exponent < 0                 0 (truncating division)
    8     otherwise                    exponentiation by squaring
    ====  ===========================  ==============================

    Raises:
        ExponentiationError: zero raised to a negative power.
        PowerOverflowError: the result, or a squared intermediate, would
            fall outside ``bounds``.
        ValueError: ``bounds`` does not contain -1, 0 and 1, or is
            neither symmetric nor two's-complement.

    Any integer is accepted as ``base`` and ``exponent``.  A base outside
    ``bounds`` only matters when the result depends on its magnitude.

    Branches: EXP-ZERO, EXP-ONE, EXP-ONE-OVERFLOW, BASE-ONE, BASE-ZERO-POS,
              BASE-ZERO-NEG, NEG-EXP-MINUS-ONE, NEG-EXP-TRUNCATE, SQUARING
    """
    _check_bounds(bounds)

    if exponent == 0:                                             # EXP-ZERO
        return 1
    if exponent == 1:
        if not bounds.contains(base):                             # EXP-ONE-OVERFLOW
            raise _result_overflow(bounds)
        return base                                               # EXP-ONE
    if base == 1:                                                 # BASE-ONE
        return 1
    if base == 0:
        if exponent > 0:                                          # BASE-ZERO-POS
            return 0
        raise ExponentiationError(DIVISION_BY_ZERO_MESSAGE)       # BASE-ZERO-NEG

    if exponent < 0:
        if base == -1:                                            # NEG-EXP-MINUS-ONE
            return 1 if exponent % 2 == 0 else -1
        # |base| > 1: the true value is a fraction strictly between -1 and 1.
        return 0                                                  # NEG-EXP-TRUNCATE

    return _power_by_squaring(base, exponent, bounds)             # SQUARING


@dataclass(frozen=True)
class PowerCalculator:
    """``power`` bound to a fixed result range."""

    bounds: Bounds = INT64

    def __post_init__(self) -> None:
        _check_bounds(self.bounds)

    def power(self, base: int, exponent: int) -> int:
        return power(base, exponent, self.bounds)

    def will_multiply_overflow(self, a: int, b: int) -> bool:
        return will_multiply_overflow(a, b, self.bounds)
