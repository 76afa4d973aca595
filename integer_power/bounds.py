"""
Bounds layer for integer exponentiation.

A Bounds value is the inclusive integer interval a result (or an operand)
must live in.  The exponentiation core never leaves it silently: any
multiplication that would escape the interval is reported as an overflow
instead of being clamped or wrapped.

Small presets (TINY, SMALL) exist so the whole input domain can be
verified exhaustively; INT32 and INT64 mirror fixed-width machine types.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Bounds:
    """An inclusive integer interval [lo, hi]."""

    lo: int
    hi: int

    def __post_init__(self) -> None:
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")

    @property
    def width(self) -> int:
        """Total number of representable values."""
        return self.hi - self.lo + 1

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def limit_for(self, negative: bool) -> int:
        """Largest magnitude a result of the given sign may have."""
        return -self.lo if negative else self.hi

    def __str__(self) -> str:
        return f"[{self.lo}, {self.hi}]"


# ---------------------------------------------------------------------------
# Common bounds presets
# ---------------------------------------------------------------------------

INT32 = Bounds(lo=-(2**31), hi=2**31 - 1)
INT64 = Bounds(lo=-(2**63), hi=2**63 - 1)

# Small bounds useful for exhaustive verification
TINY = Bounds(lo=-8, hi=7)
SMALL = Bounds(lo=-128, hi=127)
