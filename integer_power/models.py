"""Request and response models for the HTTP surface.

Two entry points exist: ``/power`` takes typed integers and maps core
errors to HTTP status codes, ``/session`` takes raw strings the way a
form would and always answers with a rendered outcome.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from integer_power.bounds import INT32


class PowerRequest(BaseModel):
    """Typed operands, each limited to the signed 32-bit range."""

    base: int = Field(..., ge=INT32.lo, le=INT32.hi)
    exponent: int = Field(..., ge=INT32.lo, le=INT32.hi)


class PowerResponse(BaseModel):
    base: int
    exponent: int
    result: int


class PowerErrorDetail(BaseModel):
    message: str
    kind: str


class SessionRequest(BaseModel):
    """Raw text as typed into the base and exponent fields."""

    base: str = Field(default="", max_length=64)
    exponent: str = Field(default="", max_length=64)


class SessionOutcome(BaseModel):
    ok: bool
    message: str
    result: int | None = None
    error_kind: str | None = None


class SessionLog(BaseModel):
    lines: list[str]
    message: str
