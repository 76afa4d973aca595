"""FastAPI endpoints for integer exponentiation.

Routes
------
POST   /power              Compute base ** exponent from typed integers
POST   /session/calculate  Run one form attempt from raw strings
GET    /session/log        Audit log and the last displayed message
DELETE /session/log        Clear the log and reset the message
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from integer_power.models import (
    PowerErrorDetail,
    PowerRequest,
    PowerResponse,
    SessionLog,
    SessionOutcome,
    SessionRequest,
)
from integer_power.power import ExponentiationError, PowerOverflowError
from integer_power.session import CalculatorSession

logger = logging.getLogger(__name__)

power_router = APIRouter(tags=["power"])
session_router = APIRouter(prefix="/session", tags=["session"])

# The session instance is injected by the app factory (see app.py).
_session: CalculatorSession | None = None


def set_session(session: CalculatorSession) -> None:
    """Inject the session instance. Called once at app startup."""
    global _session
    _session = session


def get_session() -> CalculatorSession:
    assert _session is not None, "Session not initialized"
    return _session


# ---------------------------------------------------------------------------
# Error helpers
# ---------------------------------------------------------------------------

def _error(status_code: int, e: ExponentiationError) -> HTTPException:
    detail = PowerErrorDetail(message=e.message, kind=e.kind.value)
    return HTTPException(status_code=status_code, detail=detail.model_dump())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@power_router.post(
    "/power",
    response_model=PowerResponse,
    responses={400: {"description": "Zero to a negative power"},
               422: {"description": "Result outside the 64-bit range"}},
)
def compute_power(payload: PowerRequest) -> PowerResponse:
    """Compute ``base ** exponent`` in the signed 64-bit range."""
    calculator = get_session().calculator
    try:
        result = calculator.power(payload.base, payload.exponent)
    except PowerOverflowError as e:
        logger.info("overflow: %d^%d", payload.base, payload.exponent)
        raise _error(422, e) from e
    except ExponentiationError as e:
        logger.info("invalid operation: %d^%d", payload.base, payload.exponent)
        raise _error(400, e) from e
    return PowerResponse(base=payload.base, exponent=payload.exponent, result=result)


@session_router.post("/calculate", response_model=SessionOutcome)
def calculate(payload: SessionRequest) -> SessionOutcome:
    """Run one attempt; errors are reported in the body, not the status."""
    outcome = get_session().calculate(payload.base, payload.exponent)
    return SessionOutcome(
        ok=outcome.ok,
        message=outcome.message,
        result=outcome.result,
        error_kind=outcome.error_kind,
    )


@session_router.get("/log", response_model=SessionLog)
def read_log() -> SessionLog:
    session = get_session()
    return SessionLog(lines=list(session.log), message=session.last_message)


@session_router.delete("/log", response_model=SessionLog)
def clear_log() -> SessionLog:
    """Clear the audit log and return the emptied state."""
    session = get_session()
    session.clear()
    return SessionLog(lines=[], message=session.last_message)
