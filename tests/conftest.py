# tests/conftest.py
from __future__ import annotations

import pytest
from click.testing import CliRunner

from emi_calc.data_models import LoanTerms
from emi_calc_web.app import create_app


# -------- Environment --------
@pytest.fixture(autouse=True)
def _default_currency_env(monkeypatch):
    # keep the display currency independent of the developer's shell
    monkeypatch.delenv("EMI_CALC_CURRENCY", raising=False)
    yield


# -------- Domain fixtures --------
@pytest.fixture
def loan_terms():
    """Factory for loan terms; defaults to 10 lakh at 8.5 % over 10 years."""

    def _factory(principal=1_000_000.0, annual_rate_percent=8.5, term_months=120):
        return LoanTerms(
            principal=principal,
            annual_rate_percent=annual_rate_percent,
            term_months=term_months,
        )

    return _factory


@pytest.fixture
def sample_terms(loan_terms):
    return loan_terms()


# -------- Surfaces --------
@pytest.fixture
def app():
    return create_app({"TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def cli_runner():
    return CliRunner()
