# src/financial_projection/financial_statements/cash_flow_statement.py
"""
Cash Flow Statement Construction

Indirect-method cash flow statement for a single projection year.
Working-capital deltas are measured against the prior year's balances
(or the opening position in year 1).

Sign conventions:
- change_in_* fields are balance movements (current - prior)
- change_in_working_capital is the cash effect: -(dAR + dInv) + dAP
- capital_expenditures is a positive magnitude; investing cash flow is
  its negative
"""

import pandas as pd
from typing import Dict
from dataclasses import dataclass


@dataclass(frozen=True)
class CashFlowStatementYear:
    """Cash flow statement for a single projection year."""
    year: int
    net_income: float = 0.0
    depreciation: float = 0.0
    change_in_accounts_receivable: float = 0.0
    change_in_inventory: float = 0.0
    change_in_accounts_payable: float = 0.0
    capital_expenditures: float = 0.0
    debt_raised_or_repaid: float = 0.0
    equity_raised_or_repaid: float = 0.0
    dividends_paid: float = 0.0
    beginning_cash: float = 0.0

    @property
    def change_in_working_capital(self) -> float:
        """Cash effect of working-capital movements."""
        return (
            -(self.change_in_accounts_receivable + self.change_in_inventory)
            + self.change_in_accounts_payable
        )

    @property
    def increase_in_net_working_capital(self) -> float:
        """Increase in NWC; positive means cash consumed."""
        return -self.change_in_working_capital

    @property
    def cash_flow_from_operations(self) -> float:
        return self.net_income + self.depreciation + self.change_in_working_capital

    @property
    def cash_flow_from_investing(self) -> float:
        return -self.capital_expenditures

    @property
    def cash_flow_from_financing(self) -> float:
        return self.debt_raised_or_repaid + self.equity_raised_or_repaid - self.dividends_paid

    @property
    def net_change_in_cash(self) -> float:
        return (
            self.cash_flow_from_operations +
            self.cash_flow_from_investing +
            self.cash_flow_from_financing
        )

    @property
    def ending_cash(self) -> float:
        return self.beginning_cash + self.net_change_in_cash

    def to_dict(self) -> Dict[str, float]:
        """
        Convert cash flow statement to dictionary format.

        Returns:
            Dictionary with all cash flow items
        """
        return {
            'year': self.year,

            # Operating Activities
            'net_income': self.net_income,
            'depreciation': self.depreciation,
            'change_in_accounts_receivable': self.change_in_accounts_receivable,
            'change_in_inventory': self.change_in_inventory,
            'change_in_accounts_payable': self.change_in_accounts_payable,
            'change_in_working_capital': self.change_in_working_capital,
            'cash_flow_from_operations': self.cash_flow_from_operations,

            # Investing Activities
            'capital_expenditures': -self.capital_expenditures,
            'cash_flow_from_investing': self.cash_flow_from_investing,

            # Financing Activities
            'debt_raised_or_repaid': self.debt_raised_or_repaid,
            'equity_raised_or_repaid': self.equity_raised_or_repaid,
            'dividends_paid': self.dividends_paid,
            'cash_flow_from_financing': self.cash_flow_from_financing,

            # Cash
            'net_change_in_cash': self.net_change_in_cash,
            'beginning_cash': self.beginning_cash,
            'ending_cash': self.ending_cash,
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Convert cash flow statement to a one-row DataFrame."""
        return pd.DataFrame([self.to_dict()])
