import sys
from pathlib import Path

import pytest

# Make project root importable
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.schema import ProjectionInputs  # noqa: E402


@pytest.fixture
def household() -> ProjectionInputs:
    """A mid-career household with every flow switched on."""
    return ProjectionInputs(
        current_cash=20_000.0,
        current_physical_assets=15_000.0,
        current_investments=150_000.0,
        current_debt=30_000.0,
        monthly_expenses=2_500.0,
        monthly_debt_payment=500.0,
        monthly_investment_contribution=1_000.0,
        monthly_net_income=5_000.0,
        expected_annual_return=0.07,
        inflation_rate=0.025,
        volatility=0.15,
        projection_years=30,
        current_age=35,
        retirement_age=60,
        safe_withdrawal_rate=0.04,
    )


@pytest.fixture
def flat() -> ProjectionInputs:
    """No flows, no growth, no inflation."""
    return ProjectionInputs(
        current_cash=10_000.0,
        current_physical_assets=5_000.0,
        current_investments=50_000.0,
        current_debt=8_000.0,
        expected_annual_return=0.0,
        inflation_rate=0.0,
        volatility=0.0,
        projection_years=10,
    )
