"""Integer exponentiation with explicit overflow detection."""

from integer_power.bounds import Bounds, INT32, INT64
from integer_power.power import (
    ErrorKind,
    ExponentiationError,
    PowerCalculator,
    PowerOverflowError,
    power,
    will_multiply_overflow,
)

__all__ = [
    "Bounds",
    "INT32",
    "INT64",
    "ErrorKind",
    "ExponentiationError",
    "PowerCalculator",
    "PowerOverflowError",
    "power",
    "will_multiply_overflow",
]
