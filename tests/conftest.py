"""Shared fixtures for exponentiation tests."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from integer_power.app import create_app
from integer_power.bounds import INT64, TINY
from integer_power.power import PowerCalculator
from integer_power.session import CalculatorSession


@pytest.fixture
def calc() -> PowerCalculator:
    return PowerCalculator(INT64)


@pytest.fixture
def calc_tiny() -> PowerCalculator:
    """Result range [-8, 7]: small enough to reason about by hand."""
    return PowerCalculator(TINY)


@pytest.fixture
def session() -> CalculatorSession:
    return CalculatorSession()


@pytest.fixture
def client(session) -> TestClient:
    app = create_app(session=session)
    return TestClient(app)
