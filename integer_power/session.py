"""Calculation session: the presentation shell around ``power``.

A session takes the two raw strings a user typed, parses them, calls the
exponentiation core, and turns the outcome into a display message.  Every
attempt is appended to an in-memory audit log that ends with a separator
line, whatever the outcome.

Branches: IN-EMPTY, IN-INVALID, CALC-OK, CALC-OVERFLOW, CALC-MATH-ERROR
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from integer_power.bounds import Bounds, INT32, INT64
from integer_power.power import (
    ErrorKind,
    ExponentiationError,
    PowerCalculator,
    PowerOverflowError,
)

logger = logging.getLogger(__name__)

LOG_SEPARATOR = "-------------------"
RESULT_PLACEHOLDER = "Result will appear here"

MISSING_INPUT_MESSAGE = "Please enter both base and exponent values."
INVALID_INPUT_MESSAGE = "Invalid input: Please enter valid integers only."
INVALID_INPUT_KIND = "invalid_input"


class InvalidInputError(ValueError):
    """Raised when an operand string is not an integer within range."""

    def __init__(self, text: str, bounds: Bounds) -> None:
        self.text = text
        self.bounds = bounds
        super().__init__(f"{text!r} is not an integer in {bounds}")


def parse_operand(text: str, bounds: Bounds = INT32) -> int:
    """Parse a trimmed decimal integer, rejecting values outside ``bounds``.

    An optional leading sign is accepted; whitespace inside the number,
    underscores and non-decimal digits are not.
    """
    body = text[1:] if text[:1] in ("+", "-") else text
    if not body or not (body.isascii() and body.isdigit()):
        raise InvalidInputError(text, bounds)
    value = int(text)
    if not bounds.contains(value):
        raise InvalidInputError(text, bounds)
    return value


@dataclass(frozen=True)
class CalculationOutcome:
    ok: bool
    message: str
    result: int | None = None
    error_kind: str | None = None


@dataclass
class CalculatorSession:
    """One user's form: inputs in, a message out, and an audit log."""

    operand_bounds: Bounds = INT32
    result_bounds: Bounds = INT64
    log: list[str] = field(default_factory=list)
    last_message: str = RESULT_PLACEHOLDER

    def __post_init__(self) -> None:
        if not (
            self.result_bounds.contains(self.operand_bounds.lo)
            and self.result_bounds.contains(self.operand_bounds.hi)
        ):
            raise ValueError(
                f"operand bounds {self.operand_bounds} must lie within "
                f"result bounds {self.result_bounds}"
            )
        self._calculator = PowerCalculator(self.result_bounds)

    @property
    def calculator(self) -> PowerCalculator:
        return self._calculator

    @property
    def log_text(self) -> str:
        return "".join(f"{line}\n" for line in self.log)

    def calculate(self, base_text: str, exponent_text: str) -> CalculationOutcome:
        """Run one attempt and record it in the log."""
        try:
            outcome = self._calculate(base_text.strip(), exponent_text.strip())
        finally:
            self.log.append(LOG_SEPARATOR)
        self.last_message = outcome.message
        return outcome

    def clear(self) -> None:
        """Forget the log and reset the displayed message."""
        self.log.clear()
        self.last_message = RESULT_PLACEHOLDER
        logger.debug("session cleared")

    # -- internal ---------------------------------------------------------

    def _calculate(self, base_text: str, exponent_text: str) -> CalculationOutcome:
        if not base_text or not exponent_text:                    # IN-EMPTY
            return CalculationOutcome(
                ok=False,
                message=MISSING_INPUT_MESSAGE,
                error_kind=INVALID_INPUT_KIND,
            )

        try:
            base = parse_operand(base_text, self.operand_bounds)
            exponent = parse_operand(exponent_text, self.operand_bounds)
        except InvalidInputError as e:                            # IN-INVALID
            logger.warning("rejected input: %s", e)
            self.log.append("Error: Invalid number format")
            return CalculationOutcome(
                ok=False,
                message=INVALID_INPUT_MESSAGE,
                error_kind=INVALID_INPUT_KIND,
            )

        self.log.append(f"Calculating: {base}^{exponent}")
        try:
            result = self._calculator.power(base, exponent)
        except PowerOverflowError as e:                           # CALC-OVERFLOW
            logger.warning("overflow computing %d^%d: %s", base, exponent, e)
            self.log.append(f"Error: {e.message}")
            return CalculationOutcome(
                ok=False,
                message=f"Overflow Error: {e.message}",
                error_kind=ErrorKind.OVERFLOW.value,
            )
        except ExponentiationError as e:                          # CALC-MATH-ERROR
            logger.warning("math error computing %d^%d: %s", base, exponent, e)
            self.log.append(f"Error: {e.message}")
            return CalculationOutcome(
                ok=False,
                message=f"Math Error: {e.message}",
                error_kind=e.kind.value,
            )

        logger.info("%d^%d = %d", base, exponent, result)         # CALC-OK
        self.log.append(f"Success: {result}")
        return CalculationOutcome(
            ok=True,
            message=f"Result: {base}^{exponent} = {result}",
            result=result,
        )
