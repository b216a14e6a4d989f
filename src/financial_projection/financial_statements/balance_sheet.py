# src/financial_projection/financial_statements/balance_sheet.py
"""
Balance Sheet Construction

One projected year of the balance sheet. Cash is not forecast here: it
is solved from the cash flow statement and written into a new record
with with_cash(), after which the double-entry identity holds.
"""

import pandas as pd
from typing import Dict
from dataclasses import dataclass, replace

from ..config import BALANCE_TOLERANCE


@dataclass(frozen=True)
class BalanceSheetYear:
    """Balance sheet components for a single projection year."""
    year: int

    # Assets
    cash: float = 0.0
    accounts_receivable: float = 0.0
    inventory: float = 0.0
    ppe_net: float = 0.0

    # Liabilities
    accounts_payable: float = 0.0
    short_term_debt: float = 0.0
    long_term_debt: float = 0.0

    # Equity
    common_stock: float = 0.0
    retained_earnings: float = 0.0
    other_equity: float = 0.0

    @property
    def total_current_assets(self) -> float:
        return self.cash + self.accounts_receivable + self.inventory

    @property
    def total_non_current_assets(self) -> float:
        return self.ppe_net

    @property
    def total_assets(self) -> float:
        return self.total_current_assets + self.total_non_current_assets

    @property
    def total_current_liabilities(self) -> float:
        return self.accounts_payable + self.short_term_debt

    @property
    def total_debt(self) -> float:
        return self.short_term_debt + self.long_term_debt

    @property
    def total_liabilities(self) -> float:
        return self.total_current_liabilities + self.long_term_debt

    @property
    def total_equity(self) -> float:
        return self.common_stock + self.retained_earnings + self.other_equity

    @property
    def total_liabilities_and_equity(self) -> float:
        return self.total_liabilities + self.total_equity

    @property
    def balance_sheet_check(self) -> float:
        """Assets minus liabilities and equity; zero when balanced."""
        return self.total_assets - self.total_liabilities_and_equity

    @property
    def net_debt(self) -> float:
        return self.total_debt - self.cash

    def with_cash(self, cash: float) -> "BalanceSheetYear":
        """Return a copy carrying the cash solved from the cash flow statement."""
        return replace(self, cash=cash)

    def is_balanced(self, tolerance: float = BALANCE_TOLERANCE) -> bool:
        """
        Validate that the balance sheet balances.

        The tolerance is relative to total assets for large balance
        sheets and absolute for small ones.
        """
        scale = max(1.0, abs(self.total_assets))
        return abs(self.balance_sheet_check) <= tolerance * scale

    def get_working_capital(self) -> float:
        """
        Calculate working capital.

        Returns:
            Working capital (Current Assets - Current Liabilities)
        """
        return self.total_current_assets - self.total_current_liabilities

    def to_dict(self) -> Dict[str, float]:
        """
        Convert balance sheet to dictionary format.

        Returns:
            Dictionary with all balance sheet items
        """
        return {
            'year': self.year,

            # Assets
            'cash': self.cash,
            'accounts_receivable': self.accounts_receivable,
            'inventory': self.inventory,
            'total_current_assets': self.total_current_assets,
            'ppe_net': self.ppe_net,
            'total_non_current_assets': self.total_non_current_assets,
            'total_assets': self.total_assets,

            # Liabilities
            'accounts_payable': self.accounts_payable,
            'short_term_debt': self.short_term_debt,
            'total_current_liabilities': self.total_current_liabilities,
            'long_term_debt': self.long_term_debt,
            'total_debt': self.total_debt,
            'total_liabilities': self.total_liabilities,

            # Equity
            'common_stock': self.common_stock,
            'retained_earnings': self.retained_earnings,
            'other_equity': self.other_equity,
            'total_equity': self.total_equity,

            # Totals
            'total_liabilities_and_equity': self.total_liabilities_and_equity,
            'balance_sheet_check': self.balance_sheet_check,
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Convert balance sheet to a one-row DataFrame."""
        return pd.DataFrame([self.to_dict()])
