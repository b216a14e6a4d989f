"""
Shared fixtures for the projection engine tests.
"""

import pytest

from financial_projection.core.input_processor import process_inputs
from financial_projection.financial_statements.statement_builder import generate_three_statement_model
from financial_projection.core.valuation import generate_dcf_valuation


@pytest.fixture
def founder_inputs():
    """Base case: $1M revenue, 60% COGS, 21% tax, 10% WACC, 8x exit."""
    return {
        "assumptions": {
            "base_revenue": 1_000_000,
            "revenue_growth_rate": [0.10, 0.08, 0.05, 0.03, 0.03],
            "cogs_as_percentage_of_revenue": [0.60],
            "tax_rate": 0.21,
        },
        "valuation_assumptions": {
            "wacc": 0.10,
            "terminal_value_method": "exit_multiple",
            "exit_multiple": 8,
        },
    }


@pytest.fixture
def investor_inputs():
    """Fully specified investor request with historical actuals."""
    return {
        "assumptions": {
            "revenue_growth_rate": [0.12, 0.10, 0.08],
            "cogs_as_percentage_of_revenue": [0.55],
            "sga_as_percentage_of_revenue": [0.20],
            "depreciation_as_percentage_of_revenue": [0.04],
            "capex_as_percentage_of_revenue": [0.05],
            "tax_rate": 0.25,
            "interest_rate_on_debt": 0.06,
            "accounts_receivable_as_percentage_of_sales": 0.10,
            "inventory_as_percentage_of_cogs": 0.12,
            "accounts_payable_as_percentage_of_cogs": 0.08,
            "shares_outstanding": 1_000_000,
        },
        "valuation_assumptions": {
            "wacc": 0.09,
            "terminal_value_method": "perpetual_growth",
            "terminal_growth_rate": 0.025,
        },
        "historical_data": {
            "income_statement": {"revenue": 5_000_000, "depreciation": 180_000},
            "balance_sheet": {
                "cash": 400_000,
                "accounts_receivable": 500_000,
                "inventory": 330_000,
                "ppe_net": 1_200_000,
                "accounts_payable": 220_000,
                "long_term_debt": 800_000,
                "common_stock": 1_000_000,
                "retained_earnings": 410_000,
            },
        },
    }


@pytest.fixture
def peer_company():
    return {
        "name": "Peer Co",
        "enterprise_value": 10_000_000,
        "ltm_revenue": 2_000_000,
        "ltm_ebitda": 1_000_000,
        "ltm_net_income": 500_000,
        "market_cap": 9_000_000,
    }


@pytest.fixture
def founder_validated(founder_inputs):
    return process_inputs(founder_inputs, "founder")


@pytest.fixture
def founder_model(founder_validated):
    return generate_three_statement_model(founder_validated, "founder")


@pytest.fixture
def founder_valuation(founder_model, founder_validated):
    return generate_dcf_valuation(founder_model, founder_validated, "founder")
