"""Application factory and entry point.

Run with:
    uvicorn integer_power.app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from integer_power.api import power_router, session_router, set_session
from integer_power.logging_config import setup_logging
from integer_power.session import CalculatorSession


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging when the server starts."""
    logger = setup_logging()
    logger.info("%s started", app.title)
    yield


def create_app(session: CalculatorSession | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional session for testing; creates a fresh one if omitted.
    """
    if session is None:
        session = CalculatorSession()

    set_session(session)

    app = FastAPI(
        title="Integer Exponentiation API",
        description=(
            "Computes base ** exponent for 32-bit integer operands with a "
            "signed 64-bit result, using exponentiation by squaring with "
            "explicit overflow detection. The session endpoints mirror a "
            "calculator form: raw text in, a rendered message and an audit "
            "log out."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(power_router)
    app.include_router(session_router)
    return app


# Default app instance for `uvicorn integer_power.app:app`
app = create_app()
